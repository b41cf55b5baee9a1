"""
gitshelf logging utilities.

Three package loggers: ``gitshelf`` for repository operations,
``gitshelf.http`` for the wire and ``gitshelf.scan`` for setup-time
discovery. Access tokens never reach a log record and base64 file
payloads are replaced by their length.
"""

import logging
import re
from typing import Any

_sdk_logger = logging.getLogger("gitshelf")
_http_logger = logging.getLogger("gitshelf.http")
_scan_logger = logging.getLogger("gitshelf.scan")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# (pattern, replacement) pairs applied in order to free-form text
_TOKEN_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # "Authorization: token abc", "'Authorization': 'Bearer abc'"
    (
        re.compile(r"(authorization['\"]?\s*[:=]\s*['\"]?)(token|bearer|basic)\s+[^'\"\s,}]+", re.IGNORECASE),
        r"\1\2 [REDACTED]",
    ),
    # GitHub personal access tokens, classic and fine-grained
    (re.compile(r"\b(ghp|gho|ghu|ghs|ghr)_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    # token: "abc", password='abc'
    (
        re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE),
        r"\1: [REDACTED]",
    ),
]

SECRET_KEYS = frozenset({"authorization", "token", "secret", "password", "api_key"})

# Keys holding file payloads rather than secrets
_PAYLOAD_KEYS = frozenset({"content"})
_PAYLOAD_PREVIEW_LENGTH = 32


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    scan_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Attach a handler to the ``gitshelf`` logger and set levels.

    Args:
        level: Level of the ``gitshelf`` logger (default: INFO)
        http_level: Level of ``gitshelf.http``; DEBUG shows every request
        scan_level: Level of ``gitshelf.scan``
        handler: Handler to attach (default: StreamHandler to stderr)
        format_string: Record format (default: time, logger, level, message)

    Example:
        ```python
        import logging
        from gitshelf.logging import configure_logging

        # Show each request and response, nothing else below INFO
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    _sdk_logger.addHandler(handler)

    for logger, logger_level in (
        (_sdk_logger, level),
        (_http_logger, http_level),
        (_scan_logger, scan_level),
    ):
        logger.setLevel(level if logger_level is None else logger_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    The package logger, or one of its children.

    Args:
        name: Child suffix such as "http" or "scan"; None for ``gitshelf``
    """
    return _sdk_logger if name is None else _sdk_logger.getChild(name)


def mask_sensitive_data(text: str) -> str:
    """Redact access tokens and authorization header values in ``text``."""
    for pattern, replacement in _TOKEN_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def elide_payload(value: str) -> str:
    """
    Shorten a file payload for logging.

    Returns:
        The value itself when short, otherwise a "<N chars>" marker
    """
    if len(value) <= _PAYLOAD_PREVIEW_LENGTH:
        return value
    return f"<{len(value)} chars>"


def _is_secret(key: str, secret_keys: frozenset[str] | set[str]) -> bool:
    key = key.lower()
    return any(secret in key for secret in secret_keys)


def _scrub(key: str, value: Any, secret_keys: frozenset[str] | set[str]) -> Any:
    if _is_secret(key, secret_keys):
        return "[REDACTED]"
    if key.lower() in _PAYLOAD_KEYS and isinstance(value, str):
        return elide_payload(value)
    if isinstance(value, dict):
        return safe_log_dict(value, secret_keys)
    if isinstance(value, list):
        return [safe_log_dict(item, secret_keys) if isinstance(item, dict) else item for item in value]
    return value


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: frozenset[str] | set[str] | None = None
) -> dict[str, Any]:
    """
    Copy of ``data`` fit for a log line.

    Values under keys containing a secret name (``authorization``,
    ``token``...) become "[REDACTED]"; ``content`` payloads are elided.
    Nested dicts and lists of dicts are handled.
    """
    secret_keys = SECRET_KEYS if sensitive_keys is None else sensitive_keys
    return {key: _scrub(key, value, secret_keys) for key, value in data.items()}


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """
    Log an outgoing request on ``gitshelf.http`` at DEBUG.

    The line reads ``METHOD URL | headers={...} | body={...}``, with the
    sections present only when given.
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    sections = [f"{method} {mask_sensitive_data(url)}"]
    if headers:
        sections.append(f"headers={safe_log_dict(headers)}")
    if body:
        sections.append(f"body={safe_log_dict(body)}")
    _http_logger.debug(" | ".join(sections))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log a response status on ``gitshelf.http`` at DEBUG.

    Bodies are never logged; they routinely carry whole files.
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    line = f"Response {status_code} from {mask_sensitive_data(url)}"
    if elapsed_ms is not None:
        line += f" | elapsed={elapsed_ms:.2f}ms"
    _http_logger.debug(line)


__all__ = [
    "SECRET_KEYS",
    "configure_logging",
    "elide_payload",
    "get_logger",
    "log_http_request",
    "log_http_response",
    "mask_sensitive_data",
    "safe_log_dict",
]
