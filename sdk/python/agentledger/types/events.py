"""Event log data models.

Raw entries (LogEntry) are what the substrate stores and serves. The typed
events below are what monitors deliver to subscribers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from agentledger.types.agents import AgentRole


class EventKind(str, Enum):
    """Names of the event kinds. Used as the raw entry topic."""

    AGENT_REGISTERED = "AgentRegistered"
    MESSAGE_SENT = "MessageSent"
    MESSAGE_RESPONDED = "MessageResponded"
    AGENT_RATED = "AgentRated"
    TRUST_SCORE_UPDATED = "TrustScoreUpdated"


@dataclass(frozen=True, order=True)
class LogPosition:
    """Coordinates of an entry in the event log."""

    block_number: int
    log_index: int

    def __str__(self) -> str:
        return f"{self.block_number}:{self.log_index}"


@dataclass(frozen=True)
class LogEntry:
    """A raw, encoded entry as stored by the substrate."""

    position: LogPosition
    transaction_hash: str
    topic: str
    data: str  # canonical JSON payload


@dataclass(frozen=True)
class BaseEvent:
    """Fields shared by every decoded event."""

    kind: ClassVar[EventKind]

    position: LogPosition
    transaction_hash: str

    @property
    def block_number(self) -> int:
        return self.position.block_number


@dataclass(frozen=True)
class AgentRegistered(BaseEvent):
    kind: ClassVar[EventKind] = EventKind.AGENT_REGISTERED

    agent_id: int
    identity: str
    name: str
    role: AgentRole
    metadata_ref: str


@dataclass(frozen=True)
class MessageSent(BaseEvent):
    kind: ClassVar[EventKind] = EventKind.MESSAGE_SENT

    message_id: int
    sender_agent_id: int
    receiver_agent_id: int
    body: str


@dataclass(frozen=True)
class MessageResponded(BaseEvent):
    kind: ClassVar[EventKind] = EventKind.MESSAGE_RESPONDED

    message_id: int
    responder_agent_id: int
    target_agent_id: int
    body: str


@dataclass(frozen=True)
class AgentRated(BaseEvent):
    kind: ClassVar[EventKind] = EventKind.AGENT_RATED

    agent_id: int
    rater_agent_id: int
    positive: bool
    comment: str


@dataclass(frozen=True)
class TrustScoreUpdated(BaseEvent):
    kind: ClassVar[EventKind] = EventKind.TRUST_SCORE_UPDATED

    agent_id: int
    trust_score: int
    total_interactions: int


LedgerEvent = Union[
    AgentRegistered,
    MessageSent,
    MessageResponded,
    AgentRated,
    TrustScoreUpdated,
]

EVENT_TYPES: dict[EventKind, type] = {
    EventKind.AGENT_REGISTERED: AgentRegistered,
    EventKind.MESSAGE_SENT: MessageSent,
    EventKind.MESSAGE_RESPONDED: MessageResponded,
    EventKind.AGENT_RATED: AgentRated,
    EventKind.TRUST_SCORE_UPDATED: TrustScoreUpdated,
}


@dataclass(frozen=True)
class EventFilter:
    """Equality filters for historical queries. None means "any"."""

    agent_id: int | None = None
    message_id: int | None = None
    sender_agent_id: int | None = None
    receiver_agent_id: int | None = None


@dataclass
class HistoricalEvents:
    """Result of a historical query, partitioned by event kind."""

    agent_registered: list[AgentRegistered] = field(default_factory=list)
    message_sent: list[MessageSent] = field(default_factory=list)
    message_responded: list[MessageResponded] = field(default_factory=list)
    agent_rated: list[AgentRated] = field(default_factory=list)
    trust_score_updated: list[TrustScoreUpdated] = field(default_factory=list)

    def add(self, event: LedgerEvent) -> None:
        """Append an event to the list for its kind."""
        self.by_kind(event.kind).append(event)

    def by_kind(self, kind: EventKind) -> list:
        """Return the list holding events of the given kind."""
        return {
            EventKind.AGENT_REGISTERED: self.agent_registered,
            EventKind.MESSAGE_SENT: self.message_sent,
            EventKind.MESSAGE_RESPONDED: self.message_responded,
            EventKind.AGENT_RATED: self.agent_rated,
            EventKind.TRUST_SCORE_UPDATED: self.trust_score_updated,
        }[kind]

    def all(self) -> list[LedgerEvent]:
        """All events across kinds, in log order."""
        merged: list[LedgerEvent] = [
            *self.agent_registered,
            *self.message_sent,
            *self.message_responded,
            *self.agent_rated,
            *self.trust_score_updated,
        ]
        return sorted(merged, key=lambda event: event.position)

    def __len__(self) -> int:
        return (
            len(self.agent_registered)
            + len(self.message_sent)
            + len(self.message_responded)
            + len(self.agent_rated)
            + len(self.trust_score_updated)
        )
