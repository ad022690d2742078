"""AgentLedger - agent registry, messaging and reputation on an append-only ledger."""

from agentledger.components import INITIAL_TRUST_SCORE, UNBOUND_AGENT_ID
from agentledger.eventlog import EventLog
from agentledger.exceptions import (
    AgentLedgerError,
    AgentNotFoundError,
    AlreadyRatedError,
    AlreadyRunningError,
    CannotRateSelfError,
    ConfigurationError,
    EventDecodeError,
    NoRatingExistsError,
    RaterNotRegisteredError,
    SubstrateError,
    ValidationError,
)
from agentledger.identity import Identity
from agentledger.ledger import AgentLedger
from agentledger.logging import configure_logging, get_logger
from agentledger.monitor import EventMonitor, MonitorState
from agentledger.retry import RetryConfig
from agentledger.rpc import RPCEventSource
from agentledger.sources import EventSource, LocalEventSource
from agentledger.types import (
    Agent,
    AgentRated,
    AgentRegistered,
    AgentRole,
    EventFilter,
    EventKind,
    HistoricalEvents,
    LogEntry,
    LogPosition,
    Message,
    MessageResponded,
    MessageSent,
    Reputation,
    TrustScoreUpdated,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Ledger
    "AgentLedger",
    "EventLog",
    "INITIAL_TRUST_SCORE",
    "UNBOUND_AGENT_ID",
    # Identities
    "Identity",
    # Monitoring
    "EventMonitor",
    "MonitorState",
    "EventSource",
    "LocalEventSource",
    "RPCEventSource",
    "RetryConfig",
    # Types
    "Agent",
    "AgentRole",
    "Reputation",
    "Message",
    "LogEntry",
    "LogPosition",
    "EventKind",
    "AgentRegistered",
    "MessageSent",
    "MessageResponded",
    "AgentRated",
    "TrustScoreUpdated",
    "EventFilter",
    "HistoricalEvents",
    # Exceptions
    "AgentLedgerError",
    "AgentNotFoundError",
    "RaterNotRegisteredError",
    "CannotRateSelfError",
    "AlreadyRatedError",
    "NoRatingExistsError",
    "AlreadyRunningError",
    "ValidationError",
    "EventDecodeError",
    "SubstrateError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "get_logger",
]
