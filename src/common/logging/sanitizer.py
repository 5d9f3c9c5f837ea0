"""
Log Sanitization

Redacts credentials from log output. Registry sources are configured with
database URLs and service keys that must never reach the logs verbatim.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from re import Pattern
from urllib.parse import urlsplit, urlunsplit

NamedPattern = tuple[str, Pattern[str]]

SENSITIVE_PATTERNS: list[NamedPattern] = [
    # postgres:// and postgresql:// with user:password@
    ("PG_CONN", re.compile(r"postgres(?:ql)?://[^:/\s]+:[^@\s]+@", re.IGNORECASE)),
    (
        "SECRET",
        re.compile(
            r"(secret|password|passwd|pwd)\s*[=:]\s*['\"]?[^\s'\"]{8,}['\"]?", re.IGNORECASE
        ),
    ),
    (
        "API_KEY",
        re.compile(r"(api[_-]?key|apikey)\s*[=:]\s*['\"]?[\w\-]{20,}['\"]?", re.IGNORECASE),
    ),
    # Service-role keys are JWTs
    ("JWT", re.compile(r"eyJ[\w\-]{10,}\.[\w\-]{10,}\.[\w\-]{10,}")),
    ("BEARER", re.compile(r"Bearer\s+[a-zA-Z0-9\-_\.]+", re.IGNORECASE)),
]

REDACTION_PLACEHOLDER = "[REDACTED]"


def redact_dsn(url: str) -> str:
    """
    Return a connection URL with its password masked.

    Suitable for log lines that need to show which database is used:
    ``postgresql://app:pw@db:5432/news`` -> ``postgresql://app:***@db:5432/news``.
    """
    parts = urlsplit(url)
    if parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{parts.username}:***@{host}" if parts.username else f"***@{host}"
    return urlunsplit(parts._replace(netloc=netloc))


class SanitizingFilter(logging.Filter):
    """
    A logging filter that redacts credentials from log records.

    The message is rendered with its arguments before redaction, so secrets
    passed as ``%s`` arguments or inside exception text are caught as well.

    Usage:
        logger = logging.getLogger(__name__)
        logger.addFilter(SanitizingFilter())
    """

    def __init__(
        self,
        name: str = "",
        additional_patterns: Sequence[NamedPattern] | None = None,
        redaction_placeholder: str = REDACTION_PLACEHOLDER,
    ):
        super().__init__(name)
        self._patterns = [*SENSITIVE_PATTERNS, *(additional_patterns or ())]
        self._placeholder = redaction_placeholder

    def sanitize(self, text: str) -> str:
        """Apply every pattern to ``text``."""
        for pattern_name, pattern in self._patterns:
            text = pattern.sub(f"{pattern_name}={self._placeholder}", text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the rendered message in place; never drops the record."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Mismatched format arguments; leave them for the handler to report
            return True

        record.msg = self.sanitize(message)
        record.args = None
        return True


def configure_sanitized_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> None:
    """
    Configure the root logger with sanitization enabled.

    The filter is attached to the root handlers: records propagated from
    child loggers skip the root logger's own filters.

    Args:
        level: Logging level, as a number or a name such as "INFO"
        format_string: Log format string (uses default if not specified)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=format_string or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    sanitizing_filter = SanitizingFilter()
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SanitizingFilter) for f in handler.filters):
            handler.addFilter(sanitizing_filter)


def get_sanitized_logger(name: str) -> logging.Logger:
    """Get a logger with a SanitizingFilter attached (at most once)."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, SanitizingFilter) for f in logger.filters):
        logger.addFilter(SanitizingFilter())
    return logger
