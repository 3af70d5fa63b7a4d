"""
Route Module Loader
===================

Builds one ``APIRouter`` out of route modules found on disk. Each module must
expose a ``router`` attribute; it is mounted under the name of the directory
it was found in, so ``modules/users/routes.py`` serves ``/users/...``.
"""

import importlib.util
import logging
import re
from typing import Any, Mapping, Optional, Union

from fastapi import APIRouter

from ..config.loader import GlobOptions, GlobPatterns, ResolvedFile, resolve_globs
from ..config.log_sink import LogSink, resolve_log_sink
from ..exceptions import ModuleLoaderError

logger = logging.getLogger(__name__)

_UNSAFE_NAME = re.compile(r"\W")


def _import_module(resolved: ResolvedFile):
    module_name = "landlord_routes_" + _UNSAFE_NAME.sub("_", f"{resolved.dir}_{resolved.name}")
    spec = importlib.util.spec_from_file_location(module_name, resolved.full_path)
    if spec is None or spec.loader is None:
        raise ModuleLoaderError(f"Cannot import route module {resolved.full_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ModuleLoaderError(f"Failed to import route module {resolved.full_path}: {e}",
                                original_error=e) from e
    return module


def load_routers(globs: GlobPatterns,
                 glob_options: Union[GlobOptions, Mapping[str, Any], None] = None,
                 log: Optional[LogSink] = None) -> APIRouter:
    """
    Load route modules into a single router.

    Args:
        globs: Glob(s) matching the route modules, e.g. ``"**/*routes*.py"``.
        glob_options: ``cwd`` and ``ignore`` for the glob resolver.
        log: Sink for progress messages.

    Raises:
        ModuleLoaderError: If no globs are given, nothing matches, or a
            module cannot be imported or has no ``router``.
    """
    log = resolve_log_sink(log)

    if not globs:
        raise ModuleLoaderError("module-loader: No globs were supplied.")

    modules = [m for m in resolve_globs(globs, glob_options) if m.ext == ".py"]
    if not modules:
        raise ModuleLoaderError("module-loader: No files found matching the supplied pattern.")

    router = APIRouter()

    for resolved in modules:
        log(f"module-loader: Found {resolved.full_path} ...")

        module_router = getattr(_import_module(resolved), "router", None)
        if not isinstance(module_router, APIRouter):
            raise ModuleLoaderError(f"Route module {resolved.full_path} has no APIRouter named 'router'")

        prefix = f"/{resolved.dir}" if resolved.dir else ""
        router.include_router(module_router, prefix=prefix)

        log(f"module-loader: Loaded {resolved.full_path}")

    return router
