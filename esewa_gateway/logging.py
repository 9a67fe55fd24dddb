"""
Centralized logging configuration for esewa-gateway.

Usage:
    from esewa_gateway.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Status lookup completed")
    logger.error("Status lookup failed", exc_info=True)

The library never installs handlers on import; applications (and the
bundled scripts) call configure_logging() once at startup.
"""

import logging
import os
import sys
from functools import cache
from typing import Any

# Default format for logs
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Loggers that are too chatty at INFO for request-level tracing
NOISY_LOGGERS = ("httpx", "httpcore", "httpcore.http11", "httpcore.connection")


def _get_log_level() -> int:
    """Get log level from environment or default to INFO."""
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(simple: bool | None = None) -> None:
    """
    Configure root logger with a stdout handler.

    Args:
        simple: Use the short format. Defaults to LOG_FORMAT_SIMPLE when
            ESEWA_ENV is production, detailed format otherwise.
    """
    root = logging.getLogger()

    # Only configure if no handlers exist
    if root.handlers:
        return

    root.setLevel(_get_log_level())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_get_log_level())

    if simple is None:
        simple = os.environ.get("ESEWA_ENV", "").lower() in ("prod", "production", "live")
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if simple else LOG_FORMAT))

    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """
    Escape characters that could be used for log injection attacks (CWE-117).

    Callback payloads and transaction ids come from outside, so newlines and
    control characters are neutralised before they reach a log line.
    """
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None, max_length: int = 36) -> str:
    """
    Sanitize a transaction identifier for safe logging.

    Transaction uuids are caller-generated and usually short, so they are
    kept whole up to max_length (one canonical UUID) and escaped.

    Args:
        id_value: Identifier to sanitize (can be None)
        max_length: Maximum length to keep

    Returns:
        Sanitized id or "N/A" if empty
    """
    if not id_value:
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    return safe_value[:max_length]


def sanitize_string_for_logging(value: Any, max_length: int = 50) -> str:
    """Escape and shorten free text the gateway echoes back, such as a status value."""
    if value is None or value == "":
        return "N/A"
    text = _escape_log_injection(str(value))
    return text if len(text) <= max_length else f"{text[:max_length]}..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
