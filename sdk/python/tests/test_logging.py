"""
Property-based tests for AgentLedger logging.
"""

import io
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from agentledger.logging import (
    configure_logging,
    get_logger,
    log_ledger_operation,
    log_poll_batch,
    log_rpc_request,
    log_rpc_response,
    redact_content,
    safe_log_dict,
    truncate_identity,
)

address_strategy = st.text(
    alphabet=st.sampled_from("0123456789abcdef"),
    min_size=40,
    max_size=40,
).map(lambda hex_digits: "0x" + hex_digits)

# Agent-supplied text long enough that a length marker cannot contain it
content_strategy = st.text(min_size=12, max_size=200)


def _capture(logger_name: str) -> io.StringIO:
    log_buffer = io.StringIO()
    handler = logging.StreamHandler(log_buffer)
    handler.setLevel(logging.DEBUG)

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    logger.handlers = [handler]
    return log_buffer


@given(body=content_strategy, comment=content_strategy, address=address_strategy)
@settings(max_examples=100)
def test_property_safe_log_dict_hides_content(body: str, comment: str, address: str) -> None:
    """
    Property: safe_log_dict never carries message bodies, comments or full
    addresses, at any nesting depth.
    """
    data = {
        "body": body,
        "submitter": address,
        "nested": {"comment": comment, "identity": address},
        "batch": [{"message": body}, {"count": 3}],
    }

    safe_data = safe_log_dict(data)

    assert safe_data["body"] == f"[{len(body)} chars]"
    assert safe_data["nested"]["comment"] == f"[{len(comment)} chars]"
    assert safe_data["batch"][0]["message"] == f"[{len(body)} chars]"
    assert safe_data["batch"][1] == {"count": 3}
    assert address not in str(safe_data)


@given(body=content_strategy, address=address_strategy)
@settings(max_examples=100)
def test_property_ledger_operation_log_hides_content(body: str, address: str) -> None:
    """
    Property: a logged ledger operation never contains the body or the full
    submitter address.
    """
    log_buffer = _capture("agentledger.ledger")

    log_ledger_operation("send", address, message_id=4, body=body)

    output = log_buffer.getvalue()
    assert output.startswith("send: submitter=")
    assert body not in output
    assert address not in output
    assert "message_id" in output


@given(address=address_strategy)
@settings(max_examples=100)
def test_property_truncate_identity_hides_middle(address: str) -> None:
    """
    Property: truncated addresses keep the 0x prefix and the last six digits.
    """
    truncated = truncate_identity(address)

    assert truncated.startswith(address[:8])
    assert truncated.endswith(address[-6:])
    assert "..." in truncated
    assert len(truncated) < len(address)


def test_truncate_identity_keeps_short_values() -> None:
    assert truncate_identity("0xabc") == "0xabc"
    assert truncate_identity("") == ""


def test_redact_content() -> None:
    assert redact_content("hello") == "[5 chars]"
    assert redact_content("") == "[0 chars]"


def test_poll_batch_log() -> None:
    log_buffer = _capture("agentledger.monitor")

    log_poll_batch(4, 9, delivered=6, skipped=1, elapsed_ms=2.5)

    assert log_buffer.getvalue().strip() == (
        "Polled blocks 4..9 | delivered=6 | skipped=1 | elapsed=2.50ms"
    )


def test_rpc_logs() -> None:
    log_buffer = _capture("agentledger.rpc")

    log_rpc_request("ledger_getLogs", "http://node", [{"fromBlock": 1, "toBlock": 2}])
    log_rpc_response("ledger_getLogs", 200, elapsed_ms=1.0)

    lines = log_buffer.getvalue().splitlines()
    assert lines[0].startswith("ledger_getLogs -> http://node | params=")
    assert lines[1] == "Response 200 for ledger_getLogs | elapsed=1.00ms"


def test_debug_helpers_silent_above_debug() -> None:
    log_buffer = _capture("agentledger.monitor")
    logging.getLogger("agentledger.monitor").setLevel(logging.INFO)

    log_poll_batch(1, 1, delivered=1)

    assert log_buffer.getvalue() == ""


def test_configure_logging_sets_levels() -> None:
    """Test that configure_logging properly sets log levels."""
    handler = logging.StreamHandler(io.StringIO())
    configure_logging(
        level=logging.WARNING,
        ledger_level=logging.DEBUG,
        monitor_level=logging.ERROR,
        handler=handler,
    )

    try:
        assert get_logger().level == logging.WARNING
        assert get_logger("ledger").level == logging.DEBUG
        assert get_logger("monitor").level == logging.ERROR
        assert get_logger("rpc").level == logging.ERROR
    finally:
        get_logger().removeHandler(handler)


def test_get_logger_returns_correct_loggers() -> None:
    """Test that get_logger returns the correct logger instances."""
    assert get_logger().name == "agentledger"
    assert get_logger("ledger").name == "agentledger.ledger"
    assert get_logger("monitor").name == "agentledger.monitor"
