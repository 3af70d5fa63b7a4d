"""
Log sinks and logging setup.

Every landlord entry point takes an explicit ``log`` callable that receives
one human-readable line per significant step. The default sink forwards to
the standard ``logging`` module.
"""

import logging
from typing import Callable, Optional, Union

LogSink = Callable[[str], None]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("landlord")


def default_log_sink(message: str) -> None:
    """Forward a message to the ``landlord`` logger at INFO level."""
    logger.info(message)


def null_log_sink(message: str) -> None:
    """Discard the message."""


def make_log_sink(target: Union[str, logging.Logger], level: int = logging.INFO) -> LogSink:
    """Create a sink writing to the given logger (or logger name) at ``level``."""
    target_logger = logging.getLogger(target) if isinstance(target, str) else target

    def sink(message: str) -> None:
        target_logger.log(level, message)

    return sink


def resolve_log_sink(log: Optional[LogSink]) -> LogSink:
    return log if log is not None else default_log_sink


def configure_logging(level: Union[int, str] = logging.INFO, fmt: str = LOG_FORMAT) -> None:
    """Configure root logging for applications embedding landlord."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logging.basicConfig(level=level, format=fmt, handlers=[logging.StreamHandler()])
