"""Message and rating data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    """A message sent from one agent to another."""

    id: int
    sender_agent_id: int
    receiver_agent_id: int
    body: str


@dataclass(frozen=True)
class Rating:
    """A rating given by one agent to another. At most one per pair."""

    target_agent_id: int
    rater_agent_id: int
    positive: bool
    comment: str = ""
