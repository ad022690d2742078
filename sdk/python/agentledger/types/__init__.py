"""AgentLedger type definitions.

This module exports all data model types used by the package.
"""

from agentledger.types.agents import Agent, AgentRole, Reputation
from agentledger.types.events import (
    EVENT_TYPES,
    AgentRated,
    AgentRegistered,
    BaseEvent,
    EventFilter,
    EventKind,
    HistoricalEvents,
    LedgerEvent,
    LogEntry,
    LogPosition,
    MessageResponded,
    MessageSent,
    TrustScoreUpdated,
)
from agentledger.types.messages import Message, Rating

__all__ = [
    # Agent types
    "Agent",
    "AgentRole",
    "Reputation",
    # Message types
    "Message",
    "Rating",
    # Log types
    "LogPosition",
    "LogEntry",
    # Event types
    "EventKind",
    "BaseEvent",
    "AgentRegistered",
    "MessageSent",
    "MessageResponded",
    "AgentRated",
    "TrustScoreUpdated",
    "LedgerEvent",
    "EVENT_TYPES",
    # Query types
    "EventFilter",
    "HistoricalEvents",
]
