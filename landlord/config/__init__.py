"""
Configuration Module
====================

Helpers shared by the tenant providers and the application wiring:
- Glob-based file discovery and JSON / YAML loading
- Deep merge and safe nested-path lookup
- Application settings from YAML and environment variables
- Log sinks and logging setup
"""

from .loader import GlobOptions, ResolvedFile, load_structured_file, resolve_globs
from .log_sink import (
    LogSink, configure_logging, default_log_sink, make_log_sink, null_log_sink
)
from .merge import deep_merge, get_path, set_path
from .settings import LandlordSettings, load_settings

__all__ = [
    # Loading
    "GlobOptions", "ResolvedFile", "load_structured_file", "resolve_globs",

    # Logging
    "LogSink", "configure_logging", "default_log_sink", "make_log_sink", "null_log_sink",

    # Merging
    "deep_merge", "get_path", "set_path",

    # Settings
    "LandlordSettings", "load_settings",
]
