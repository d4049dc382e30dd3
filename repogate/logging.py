"""
repogate logging utilities.

Provides configurable logging for command handling, authentication and the
signing client, plus the audit sink. Ensures no sensitive data (secrets,
full signatures, repository passwords) is logged.
"""

import logging
import re
from typing import Any

# Package loggers
_root_logger = logging.getLogger("repogate")
_auth_logger = logging.getLogger("repogate.auth")
_http_logger = logging.getLogger("repogate.http")
_audit_logger = logging.getLogger("repogate.audit")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Signature query parameter
    (re.compile(r"([?&]sig=)[^&\s]+"), r"\1[SIGNATURE_REDACTED]"),
    # Hex HMAC digests (SHA1 is 40 chars, SHA512 128)
    (re.compile(r"signature['\"]?\s*[:=]\s*['\"]?[a-fA-F0-9]{40,}['\"]?"), "signature: [SIGNATURE_REDACTED]"),
    # Password query parameters
    (re.compile(r"([?&]repopassword=)[^&\s]*"), r"\1[REDACTED]"),
    # Secret/password patterns
    (re.compile(r"(secret|token|password)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

# Keys masked by safe_log_dict unless the caller supplies its own set
_DEFAULT_SENSITIVE_KEYS = {"sig", "signature", "secret", "password", "token"}


def configure_logging(
    level: int = logging.INFO,
    auth_level: int | None = None,
    http_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure repogate logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        auth_level: Log level for signature verification (default: same as level)
        http_level: Log level for client HTTP logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from repogate.logging import configure_logging

        # Trace signature verification
        configure_logging(level=logging.INFO, auth_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(format_string))

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _auth_logger.setLevel(auth_level if auth_level is not None else level)
    _http_logger.setLevel(http_level if http_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a repogate logger.

    Args:
        name: Logger name suffix (e.g., "auth", "http"). If None, returns the package logger.
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"repogate.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces signatures, secrets and passwords with redacted placeholders.
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    A key is sensitive when it equals or contains one of sensitive_keys
    (so ``repopassword`` is caught by ``password``).

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: sig, signature, secret, password, token)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        else:
            result[key] = value

    return result


def log_command(command: str, params: dict[str, Any]) -> None:
    """Log an inbound command at DEBUG level with sensitive parameters masked."""
    if not _root_logger.isEnabledFor(logging.DEBUG):
        return

    _root_logger.debug(f"{command} | params={safe_log_dict(params)}")


def log_http_request(method: str, url: str) -> None:
    """Log a client HTTP request at DEBUG level with the signature masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    _http_logger.debug(f"{method} {mask_sensitive_data(url)}")


def log_http_response(status_code: int, url: str, elapsed_ms: float | None = None) -> None:
    """Log a client HTTP response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


class LoggingAuditSink:
    """Audit sink that writes each line at INFO to the repogate.audit logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _audit_logger

    def log(self, message: str) -> None:
        self._logger.info(message)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_command",
    "log_http_request",
    "log_http_response",
    "LoggingAuditSink",
]
