"""
Configuration merge helpers.

Deep merge of nested configuration mappings and safe dotted-path lookup.
"""

import copy
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Union

_PATH_TOKEN = re.compile(r"[^.\[\]]+")

PathExpression = Union[str, Sequence[Union[str, int]]]


def deep_merge(base: Optional[Mapping[str, Any]],
               override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Merge ``override`` on top of ``base`` and return a new dictionary.

    Nested mappings are merged recursively. Any other value found in
    ``override`` replaces the value in ``base``. Lists are replaced whole,
    not merged element by element. Neither argument is mutated.
    """
    result: Dict[str, Any] = copy.deepcopy(dict(base)) if base else {}

    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def split_path(path: PathExpression) -> Iterable[Union[str, int]]:
    """Split ``a.b[0].c`` into ``["a", "b", 0, "c"]``."""
    if isinstance(path, str):
        return [int(token) if token.isdigit() else token
                for token in _PATH_TOKEN.findall(path)]
    return list(path)


def get_path(obj: Any, path: PathExpression, default: Any = None) -> Any:
    """
    Safely read a nested value.

    Returns ``default`` when any segment is missing instead of raising.
    """
    segments = split_path(path)
    if not segments:
        return default

    current = obj
    for segment in segments:
        if isinstance(current, Mapping):
            if segment in current:
                current = current[segment]
            elif str(segment) in current:
                current = current[str(segment)]
            else:
                return default
        elif isinstance(current, (list, tuple)) and isinstance(segment, int):
            if -len(current) <= segment < len(current):
                current = current[segment]
            else:
                return default
        else:
            return default

    return current


def set_path(data: Dict[str, Any], path: PathExpression, value: Any) -> None:
    """Set nested dictionary value using dot notation."""
    keys = [str(key) for key in split_path(path)]
    current = data

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
