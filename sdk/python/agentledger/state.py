"""
Ledger state shared by the registry, messaging and reputation components.

The substrate serializes every operation, so none of this is locked.
"""

from dataclasses import dataclass, field

from agentledger.types.agents import Agent
from agentledger.types.messages import Message, Rating


class SequenceAllocator:
    """Single-writer counter handing out 0, 1, 2, ..."""

    def __init__(self, start: int = 0) -> None:
        self._next = start

    @property
    def next_value(self) -> int:
        """The value the next allocate() call will return."""
        return self._next

    def allocate(self) -> int:
        value = self._next
        self._next += 1
        return value

    def is_assigned(self, value: int) -> bool:
        """True if the value has already been handed out."""
        return 0 <= value < self._next


class IdentityMap:
    """Binds submitting identities to agent ids. Last registration wins."""

    def __init__(self) -> None:
        self._bindings: dict[str, int] = {}

    def bind(self, identity: str, agent_id: int) -> int | None:
        """Bind identity to agent_id, returning the previous binding if any."""
        previous = self._bindings.get(identity)
        self._bindings[identity] = agent_id
        return previous

    def resolve(self, identity: str) -> int | None:
        return self._bindings.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


@dataclass
class LedgerState:
    """All records owned by the ledger core."""

    agent_ids: SequenceAllocator = field(default_factory=SequenceAllocator)
    message_ids: SequenceAllocator = field(default_factory=SequenceAllocator)
    identities: IdentityMap = field(default_factory=IdentityMap)
    agents: list[Agent] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
    ratings: dict[tuple[int, int], Rating] = field(default_factory=dict)

    def agent_exists(self, agent_id: int) -> bool:
        return self.agent_ids.is_assigned(agent_id)
