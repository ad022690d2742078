"""
AgentLedger main entry point.

Aggregates the registry, messaging and reputation components over one shared
state and event log.
"""

from agentledger.components import (
    MessagingComponent,
    RegistryComponent,
    ReputationComponent,
)
from agentledger.eventlog import EventLog
from agentledger.sources import LocalEventSource
from agentledger.state import LedgerState
from agentledger.types.agents import Agent, AgentRole, Reputation
from agentledger.types.messages import Message


class AgentLedger:
    """
    The ledger core: agent registration, messaging and reputation.

    Every operation runs to completion before the next begins; the ledger
    takes no locks and expects its caller (the substrate) to serialize
    operations.

    Example:
        ```python
        from agentledger import AgentLedger, AgentRole

        ledger = AgentLedger()
        alice = ledger.register("alice", AgentRole.CHAT, "ipfs://alice", submitter="0xa1")
        bob = ledger.register("bob", AgentRole.GENERIC, "ipfs://bob", submitter="0xb2")

        ledger.send(bob, "hi", submitter="0xa1")
        ledger.rate(bob, True, "quick reply", submitter="0xa1")
        ledger.reputation(bob)  # Reputation(trust_score=100, total_interactions=1, ...)
        ```
    """

    def __init__(self, event_log: EventLog | None = None) -> None:
        """
        Initialize an empty ledger.

        Args:
            event_log: Log to append to (default: a fresh in-process EventLog)
        """
        self._state = LedgerState()
        self._event_log = event_log if event_log is not None else EventLog()

        self.registry = RegistryComponent(self._state, self._event_log)
        self.messaging = MessagingComponent(self._state, self._event_log)
        self.reputation_engine = ReputationComponent(self._state, self._event_log)

    @property
    def event_log(self) -> EventLog:
        """The underlying event log (for indexers and tests)."""
        return self._event_log

    def event_source(self) -> LocalEventSource:
        """An EventSource reading this ledger's log, for EventMonitor."""
        return LocalEventSource(self._event_log)

    # Registry

    def register(
        self,
        name: str,
        role: AgentRole | int,
        metadata_ref: str,
        submitter: str,
    ) -> int:
        return self.registry.register(name, role, metadata_ref, submitter)

    def list_all(self) -> list[Agent]:
        return self.registry.list_all()

    def count(self) -> int:
        return self.registry.count()

    def get_agent(self, agent_id: int) -> Agent | None:
        return self.registry.get_agent(agent_id)

    def agent_id_of(self, identity: str) -> int | None:
        return self.registry.agent_id_of(identity)

    # Messaging

    def send(self, receiver_agent_id: int, body: str, submitter: str) -> int:
        return self.messaging.send(receiver_agent_id, body, submitter)

    def respond(
        self,
        message_id: int,
        target_agent_id: int,
        body: str,
        submitter: str,
    ) -> None:
        self.messaging.respond(message_id, target_agent_id, body, submitter)

    def get_message(self, message_id: int) -> Message | None:
        return self.messaging.get_message(message_id)

    # Reputation

    def rate(
        self,
        target_agent_id: int,
        positive: bool,
        comment: str,
        submitter: str,
    ) -> None:
        self.reputation_engine.rate(target_agent_id, positive, comment, submitter)

    def reputation(self, agent_id: int) -> Reputation:
        return self.reputation_engine.reputation(agent_id)

    def has_rated(self, target_agent_id: int, rater_agent_id: int) -> bool:
        return self.reputation_engine.has_rated(target_agent_id, rater_agent_id)

    def rating(self, target_agent_id: int, rater_agent_id: int) -> bool:
        return self.reputation_engine.rating(target_agent_id, rater_agent_id)

    def top_rated(self) -> list[Agent]:
        return self.reputation_engine.top_rated()

    def __repr__(self) -> str:
        return (
            f"AgentLedger(agents={self.count()}, "
            f"messages={self.messaging.message_count()}, "
            f"tip={self._event_log.current_tip()})"
        )
