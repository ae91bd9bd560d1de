"""Logging setup for a11y-audit."""

import logging
import sys
from typing import Any

ROOT_LOGGER = "a11y_audit"
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Send package logs to stderr.

    Args:
        level: Log level name, case-insensitive (DEBUG, INFO, WARNING, ...)
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    logger.handlers = [handler]
    logger.propagate = False

    # httpx logs every analyzer request at INFO
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
        )


def get_logger(name: str) -> logging.Logger:
    """Get a logger for an a11y-audit module.

    Args:
        name: Module name (will be prefixed with a11y_audit)
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class ContextAdapter(logging.LoggerAdapter):
    """Prefixes each message with its ``key=value`` context."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"[{context}] {msg}", kwargs


def get_logger_with_context(name: str, **context: Any) -> ContextAdapter:
    """Get a module logger whose messages carry ``context``, e.g. the workspace."""
    return ContextAdapter(get_logger(name), context)
