"""Helpers that keep credentials and bound values out of log output."""

import logging
import re
from typing import Any, Dict, Optional, Sequence

REDACTED = "***REDACTED***"

# user:password@ in any connection URL (postgresql://, cassandra://, ...)
URL_CREDENTIALS = re.compile(r"(?P<scheme>[a-z][a-z0-9+.\-]*://)(?P<user>[^:/@\s]+):(?P<password>[^@\s]+)@", re.IGNORECASE)

# key=value or key: value pairs found in driver messages and DSNs
KEY_VALUE_SECRETS = re.compile(
    r"(?P<key>password|passwd|pwd|secret|token)(?P<sep>\s*[:=]\s*)(?P<quote>['\"]?)(?P<value>[^'\"\s;,)]+)(?P=quote)",
    re.IGNORECASE,
)


def redact_url(url: str) -> str:
    """Mask the password of a connection URL; other text is returned unchanged."""
    return URL_CREDENTIALS.sub(lambda m: f"{m['scheme']}{m['user']}:{REDACTED}@", url)


def sanitize_error_message(message: str) -> str:
    """
    Mask connection URL passwords and ``password=...`` style secrets.

    Args:
        message: Error or log text, usually taken from a driver exception.

    Returns:
        The text with every secret replaced by ``***REDACTED***``.
    """
    sanitized = redact_url(message)
    return KEY_VALUE_SECRETS.sub(
        lambda m: f"{m['key']}{m['sep']}{m['quote']}{REDACTED}{m['quote']}", sanitized
    )


def truncate_error_message(error: Exception, max_length: int = 200) -> str:
    """Sanitized ``str(error)``, cut to ``max_length`` characters."""
    error_str = sanitize_error_message(str(error))
    if len(error_str) > max_length:
        error_str = error_str[:max_length] + "..."
    return error_str


def describe_statement(
    text: str, params: Optional[Sequence[Any]] = None, max_length: int = 500
) -> str:
    """
    One-line description of a dispatched statement for debug logs.

    Whitespace runs are collapsed and only parameter types are shown, so bound
    values never reach the log.
    """
    flat = " ".join(text.split())
    if len(flat) > max_length:
        flat = flat[:max_length] + "..."
    types = ", ".join(type(p).__name__ for p in params or [])
    return f"{flat} [{types}]"


def safe_log_error(
    logger_instance: logging.Logger,
    message: str,
    exc_info: bool = False,
    extra: Optional[Dict[str, Any]] = None,
    **kwargs
) -> None:
    """
    Log an error with secrets masked in the message and in string ``extra`` values.

    Args:
        logger_instance: The logger to write to
        message: The message, sanitized before logging
        exc_info: Whether to include exception info
        extra: Additional record attributes
        **kwargs: Passed through to ``Logger.error``
    """
    sanitized_extra = None
    if extra:
        sanitized_extra = {
            key: sanitize_error_message(value) if isinstance(value, str) else value
            for key, value in extra.items()
        }

    logger_instance.error(
        sanitize_error_message(message), exc_info=exc_info, extra=sanitized_extra, **kwargs
    )


def safe_log_warning(logger_instance: logging.Logger, message: str, **kwargs) -> None:
    logger_instance.warning(sanitize_error_message(message), **kwargs)
