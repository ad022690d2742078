"""Agent-related data models."""

from dataclasses import dataclass
from enum import IntEnum


class AgentRole(IntEnum):
    """Closed set of agent roles. Encoded in events by integer value."""

    GENERIC = 0
    CHAT = 1


@dataclass
class Agent:
    """A registered agent and its reputation counters."""

    id: int
    name: str
    role: AgentRole
    metadata_ref: str
    trust_score: int = 100  # 0 to 100
    total_interactions: int = 0
    positive_ratings: int = 0


@dataclass(frozen=True)
class Reputation:
    """Reputation snapshot of one agent."""

    trust_score: int
    total_interactions: int
    positive_ratings: int
