"""
Structured logging configuration for the cashtag tracker

Provides JSON-formatted or coloured console logging, optional rotating
file output, and a ContextLogger for attaching cycle context to messages.

Usage:
    from src.utils.logging import setup_logging, get_logger

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/cashtags/tracker.log")

    logger = get_logger(__name__)
    logger.info("Record added", extra={"cashtag": "$FOO"})
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_from_env",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
