"""
Logger wrapper that carries context.

ContextLogger attaches a fixed set of key-value pairs (for example the
cycle number and store path) to every message it logs.
"""

import logging
from typing import Any


class ContextLogger:
    """
    Logger wrapper that adds contextual information to all log messages

    Usage:
        log = ContextLogger(__name__, cycle=3)
        log.info("Merged batch", added=2)
        # extra context: cycle=3, added=2
    """

    def __init__(self, name: str, **context: Any):
        self.logger = logging.getLogger(name)
        self.context = context

    def bind(self, **context: Any) -> "ContextLogger":
        """Return a new ContextLogger with additional context."""
        return ContextLogger(self.logger.name, **{**self.context, **context})

    def log(self, level: int, msg: str, *args, exc_info=None, **kwargs: Any) -> None:
        self.logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            extra={**self.context, **kwargs},
        )

    def debug(self, msg: str, *args, **kwargs) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, exc_info=None, **kwargs) -> None:
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def get_context(self) -> dict[str, Any]:
        return dict(self.context)
