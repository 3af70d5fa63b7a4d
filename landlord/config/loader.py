"""
Configuration File Loading
==========================

File discovery and structured content loading used by the file-system tenant
provider and the route module loader.

Supported content formats:
- JSON (``.json``)
- YAML (``.yaml``, ``.yml``)
"""

import fnmatch
import glob
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from ..exceptions import ConfigurationLoadError

logger = logging.getLogger(__name__)

GlobPatterns = Union[str, Sequence[str]]


@dataclass
class GlobOptions:
    """Options for resolving glob patterns."""
    cwd: Optional[str] = None
    ignore: List[str] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Union["GlobOptions", Mapping[str, Any], None]) -> "GlobOptions":
        """Build options from an instance, a plain mapping or ``None``."""
        if isinstance(value, GlobOptions):
            return value
        if not value:
            return cls()

        ignore = value.get("ignore") or []
        if isinstance(ignore, str):
            ignore = [ignore]
        return cls(cwd=value.get("cwd"), ignore=list(ignore))

    @property
    def root(self) -> Path:
        return Path(self.cwd) if self.cwd else Path.cwd()


@dataclass(frozen=True)
class ResolvedFile:
    """A file matched by a glob pattern."""
    full_path: str
    base: str   # file name with extension
    name: str   # file name without its last extension
    ext: str    # last extension, including the dot
    dir: str    # parent directory relative to the glob root, posix style


def _as_list(patterns: GlobPatterns) -> List[str]:
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def _is_ignored(relative: str, base: str, ignore: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(base, pattern)
               for pattern in ignore)


def resolve_globs(patterns: GlobPatterns,
                  options: Union[GlobOptions, Mapping[str, Any], None] = None) -> List[ResolvedFile]:
    """
    Resolve one or more glob patterns to file metadata.

    Relative patterns are resolved against ``options.cwd`` (default: the
    process working directory). Results keep pattern order, are sorted within
    a pattern and never contain the same file twice. An empty result is not
    an error.
    """
    opts = GlobOptions.from_value(options)
    root = opts.root.resolve()
    seen = set()
    resolved: List[ResolvedFile] = []

    for pattern in _as_list(patterns):
        expanded = os.path.expanduser(pattern)
        if not os.path.isabs(expanded):
            expanded = str(root / expanded)

        for match in sorted(glob.glob(expanded, recursive=True)):
            path = Path(match).resolve()
            if not path.is_file() or path in seen:
                continue

            try:
                relative = path.relative_to(root)
            except ValueError:
                relative = Path(os.path.relpath(path, root))

            if _is_ignored(relative.as_posix(), path.name, opts.ignore):
                logger.debug(f"Ignoring {path}")
                continue

            seen.add(path)
            parent = relative.parent.as_posix()
            resolved.append(ResolvedFile(
                full_path=str(path),
                base=path.name,
                name=path.stem,
                ext=path.suffix,
                dir="" if parent == "." else parent,
            ))

    return resolved


def _load_json(stream) -> Any:
    return json.load(stream)


def _load_yaml(stream) -> Any:
    return yaml.safe_load(stream)


CONTENT_LOADERS: Dict[str, Any] = {
    ".json": _load_json,
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
}


def load_structured_file(path: Union[str, Path]) -> Any:
    """
    Load a structured configuration file.

    Raises:
        ConfigurationLoadError: If the file is unreadable, malformed or has
            an unsupported extension.
    """
    file_path = Path(path)
    loader = CONTENT_LOADERS.get(file_path.suffix.lower())
    if loader is None:
        raise ConfigurationLoadError(
            f"Unsupported configuration format: {file_path.suffix or file_path.name}",
            path=str(file_path)
        )

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return loader(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load configuration file {file_path}: {e}")
        raise ConfigurationLoadError(
            f"Failed to load configuration file {file_path}: {e}",
            path=str(file_path),
            original_error=e
        ) from e
