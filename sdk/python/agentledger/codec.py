"""
Event log codec.

Turns event payloads into raw (topic, data) pairs for the log and raw
LogEntry records back into typed events. The wire payload uses camelCase keys
and canonical JSON.
"""

import hashlib
import json
from typing import Any

from agentledger.canonicalize import canonicalize
from agentledger.exceptions import EventDecodeError
from agentledger.types.agents import AgentRole
from agentledger.types.events import EVENT_TYPES, EventKind, LedgerEvent, LogEntry

# (wire key, attribute name, python type) per event kind, in payload order
_SCHEMAS: dict[EventKind, tuple[tuple[str, str, type], ...]] = {
    EventKind.AGENT_REGISTERED: (
        ("agentId", "agent_id", int),
        ("identity", "identity", str),
        ("name", "name", str),
        ("role", "role", int),
        ("metadataRef", "metadata_ref", str),
    ),
    EventKind.MESSAGE_SENT: (
        ("messageId", "message_id", int),
        ("senderAgentId", "sender_agent_id", int),
        ("receiverAgentId", "receiver_agent_id", int),
        ("body", "body", str),
    ),
    EventKind.MESSAGE_RESPONDED: (
        ("messageId", "message_id", int),
        ("responderAgentId", "responder_agent_id", int),
        ("targetAgentId", "target_agent_id", int),
        ("body", "body", str),
    ),
    EventKind.AGENT_RATED: (
        ("agentId", "agent_id", int),
        ("raterAgentId", "rater_agent_id", int),
        ("positive", "positive", bool),
        ("comment", "comment", str),
    ),
    EventKind.TRUST_SCORE_UPDATED: (
        ("agentId", "agent_id", int),
        ("trustScore", "trust_score", int),
        ("totalInteractions", "total_interactions", int),
    ),
}


def encode_event(kind: EventKind, **fields: Any) -> tuple[str, str]:
    """
    Encode an event payload for the log.

    Args:
        kind: Event kind
        **fields: Payload values keyed by attribute name (e.g. agent_id=3)

    Returns:
        (topic, data) where data is canonical JSON

    Raises:
        ValueError: If a field is missing or unexpected
    """
    schema = _SCHEMAS[kind]
    expected = {attr for _, attr, _ in schema}
    if set(fields) != expected:
        missing = expected - set(fields)
        extra = set(fields) - expected
        raise ValueError(
            f"Bad payload for {kind.value}: missing={sorted(missing)} extra={sorted(extra)}"
        )

    payload = {}
    for wire_key, attr, _ in schema:
        value = fields[attr]
        payload[wire_key] = int(value) if isinstance(value, AgentRole) else value
    return kind.value, canonicalize(payload)


def decode_entry(entry: LogEntry) -> LedgerEvent:
    """
    Decode a raw log entry into its typed event.

    Raises:
        EventDecodeError: Unknown topic, malformed JSON, or a missing or
            mistyped field
    """
    try:
        kind = EventKind(entry.topic)
    except ValueError:
        raise EventDecodeError(
            f"Unknown event topic {entry.topic!r} at {entry.position}", entry.position
        ) from None

    try:
        payload = json.loads(entry.data)
    except (TypeError, ValueError, RecursionError) as e:
        raise EventDecodeError(
            f"Malformed {kind.value} payload at {entry.position}: {e}", entry.position
        ) from e

    if not isinstance(payload, dict):
        raise EventDecodeError(
            f"{kind.value} payload at {entry.position} is not an object", entry.position
        )

    values: dict[str, Any] = {}
    for wire_key, attr, expected_type in _SCHEMAS[kind]:
        if wire_key not in payload:
            raise EventDecodeError(
                f"{kind.value} at {entry.position} is missing {wire_key!r}", entry.position
            )
        value = payload[wire_key]
        if not _is_instance(value, expected_type):
            raise EventDecodeError(
                f"{kind.value} at {entry.position}: {wire_key!r} should be "
                f"{expected_type.__name__}, got {type(value).__name__}",
                entry.position,
            )
        values[attr] = value

    if kind is EventKind.AGENT_REGISTERED:
        try:
            values["role"] = AgentRole(values["role"])
        except ValueError:
            raise EventDecodeError(
                f"Unknown agent role {values['role']} at {entry.position}", entry.position
            ) from None

    return EVENT_TYPES[kind](
        position=entry.position,
        transaction_hash=entry.transaction_hash,
        **values,
    )


def transaction_hash(block_number: int, staged: list[tuple[str, str]]) -> str:
    """
    Compute the hash identifying one committed block.

    SHA256 over the canonical JSON of the block number and its (topic, data)
    pairs, hex encoded with a 0x prefix.
    """
    canonical = canonicalize(
        {
            "blockNumber": block_number,
            "entries": [{"topic": topic, "data": data} for topic, data in staged],
        }
    )
    digest = hashlib.sha256(canonical.encode("utf-8", "surrogatepass")).hexdigest()
    return f"0x{digest}"


def _is_instance(value: Any, expected_type: type) -> bool:
    # bool is an int subclass; keep the two apart in both directions
    if expected_type is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected_type)
