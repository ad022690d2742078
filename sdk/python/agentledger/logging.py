"""
AgentLedger logging utilities.

Provides configurable logging for ledger operations, monitor polling and
remote substrate reads. Message bodies and rating comments are never logged
verbatim, and identity addresses are shortened.
"""

import logging
from typing import Any

# Create package-specific loggers
_root_logger = logging.getLogger("agentledger")
_ledger_logger = logging.getLogger("agentledger.ledger")
_monitor_logger = logging.getLogger("agentledger.monitor")
_rpc_logger = logging.getLogger("agentledger.rpc")

# Keys whose values are free text supplied by agents
_CONTENT_KEYS = {"body", "comment", "message", "response"}

# Keys holding submitting identities
_IDENTITY_KEYS = {"identity", "submitter", "address"}

_IDENTITY_PREVIEW_LENGTH = 6


def configure_logging(
    level: int = logging.INFO,
    ledger_level: int | None = None,
    monitor_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure AgentLedger logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        ledger_level: Log level for ledger operations (default: same as level)
        monitor_level: Log level for the event monitor (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from agentledger.logging import configure_logging

        # Trace every poll batch
        configure_logging(level=logging.INFO, monitor_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _ledger_logger.setLevel(ledger_level if ledger_level is not None else level)
    _monitor_logger.setLevel(monitor_level if monitor_level is not None else level)
    _rpc_logger.setLevel(monitor_level if monitor_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get an AgentLedger logger.

    Args:
        name: Logger name suffix (e.g., "ledger", "monitor"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"agentledger.{name}")


def truncate_identity(identity: str) -> str:
    """
    Shorten an identity address for logging, e.g. "0x1a2b3c...9f8e7d".

    Short values are returned unchanged.
    """
    if len(identity) <= _IDENTITY_PREVIEW_LENGTH * 2 + 3:
        return identity
    return f"{identity[:_IDENTITY_PREVIEW_LENGTH + 2]}...{identity[-_IDENTITY_PREVIEW_LENGTH:]}"


def redact_content(text: str) -> str:
    """Replace agent-supplied text with a length marker."""
    return f"[{len(text)} chars]"


def safe_log_dict(data: dict[str, Any]) -> dict[str, Any]:
    """
    Create a copy of a dictionary that is safe to log.

    Free-text values (bodies, comments) become length markers and identity
    addresses are truncated. Nested dicts and lists of dicts are handled.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in _CONTENT_KEYS and isinstance(value, str):
            result[key] = redact_content(value)
        elif key_lower in _IDENTITY_KEYS and isinstance(value, str):
            result[key] = truncate_identity(value)
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_ledger_operation(operation: str, submitter: str, **fields: Any) -> None:
    """
    Log a committed ledger operation at DEBUG level.

    Args:
        operation: Operation name ("register", "send", "respond", "rate")
        submitter: Submitting identity address
        **fields: Operation-specific values (content is redacted)
    """
    if not _ledger_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{operation}: submitter={truncate_identity(submitter)}"]
    if fields:
        log_parts.append(f"fields={safe_log_dict(fields)}")

    _ledger_logger.debug(" | ".join(log_parts))


def log_poll_batch(
    from_block: int,
    to_block: int,
    delivered: int,
    skipped: int = 0,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log one completed monitor poll at DEBUG level.

    Args:
        from_block: First block read (inclusive)
        to_block: Last block read (inclusive)
        delivered: Number of events delivered to subscribers
        skipped: Number of entries skipped as undecodable or duplicate
        elapsed_ms: Poll duration in milliseconds (optional)
    """
    if not _monitor_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Polled blocks {from_block}..{to_block}", f"delivered={delivered}"]

    if skipped:
        log_parts.append(f"skipped={skipped}")

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _monitor_logger.debug(" | ".join(log_parts))


def log_rpc_request(method: str, url: str, params: Any = None) -> None:
    """Log a JSON-RPC request at DEBUG level."""
    if not _rpc_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} -> {url}"]
    if params is not None:
        log_parts.append(f"params={params}")

    _rpc_logger.debug(" | ".join(log_parts))


def log_rpc_response(
    method: str,
    status_code: int,
    elapsed_ms: float | None = None,
) -> None:
    """Log a JSON-RPC response at DEBUG level. Result payloads are never logged."""
    if not _rpc_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} for {method}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _rpc_logger.debug(" | ".join(log_parts))


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "truncate_identity",
    "redact_content",
    "safe_log_dict",
    "log_ledger_operation",
    "log_poll_batch",
    "log_rpc_request",
    "log_rpc_response",
]
