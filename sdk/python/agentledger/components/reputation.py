"""Reputation component.

Each agent may rate any other agent once. The target's trust score is the
integer percentage of positive ratings it has received, and stays at 100
until the first rating arrives.
"""

from dataclasses import replace
from typing import TYPE_CHECKING

from agentledger.components.validation import require_int, require_str
from agentledger.exceptions import (
    AgentNotFoundError,
    AlreadyRatedError,
    CannotRateSelfError,
    NoRatingExistsError,
    RaterNotRegisteredError,
)
from agentledger.logging import log_ledger_operation
from agentledger.types.agents import Agent, Reputation
from agentledger.types.events import EventKind
from agentledger.types.messages import Rating

if TYPE_CHECKING:
    from agentledger.eventlog import EventLog
    from agentledger.state import LedgerState

INITIAL_TRUST_SCORE = 100


def compute_trust_score(positive_ratings: int, total_interactions: int) -> int:
    """
    Trust score for the given counters.

    Args:
        positive_ratings: Positive ratings received
        total_interactions: All ratings received

    Returns:
        floor(positive * 100 / total), or INITIAL_TRUST_SCORE when total is 0
    """
    if total_interactions == 0:
        return INITIAL_TRUST_SCORE
    return positive_ratings * 100 // total_interactions


class ReputationComponent:
    """Records peer ratings and maintains trust scores."""

    def __init__(self, state: "LedgerState", event_log: "EventLog") -> None:
        self.state = state
        self.event_log = event_log

    def rate(
        self,
        target_agent_id: int,
        positive: bool,
        comment: str,
        submitter: str,
    ) -> None:
        """
        Rate an agent on behalf of the submitter's agent.

        Emits AgentRated followed by TrustScoreUpdated in one block.

        Args:
            target_agent_id: Agent being rated
            positive: True for a positive rating
            comment: Free-text comment (may be empty)
            submitter: Identity address submitting the operation

        Raises:
            ValidationError: If an argument has the wrong type
            RaterNotRegisteredError: If the submitter has no bound agent
            AgentNotFoundError: If the target was never registered
            CannotRateSelfError: If the rater and target are the same agent
            AlreadyRatedError: If the rater already rated the target
        """
        require_int("target_agent_id", target_agent_id)
        require_str("comment", comment)
        require_str("submitter", submitter)
        rater_agent_id = self.state.identities.resolve(submitter)
        if rater_agent_id is None:
            raise RaterNotRegisteredError(submitter)
        if not self.state.agent_exists(target_agent_id):
            raise AgentNotFoundError(target_agent_id)
        if rater_agent_id == target_agent_id:
            raise CannotRateSelfError(rater_agent_id)
        key = (target_agent_id, rater_agent_id)
        if key in self.state.ratings:
            raise AlreadyRatedError(target_agent_id, rater_agent_id)

        positive = bool(positive)
        target = self.state.agents[target_agent_id]
        total = target.total_interactions + 1
        positives = target.positive_ratings + (1 if positive else 0)
        score = compute_trust_score(positives, total)

        with self.event_log.transaction() as tx:
            tx.emit(
                EventKind.AGENT_RATED,
                agent_id=target_agent_id,
                rater_agent_id=rater_agent_id,
                positive=positive,
                comment=comment,
            )
            tx.emit(
                EventKind.TRUST_SCORE_UPDATED,
                agent_id=target_agent_id,
                trust_score=score,
                total_interactions=total,
            )
            self.state.ratings[key] = Rating(
                target_agent_id=target_agent_id,
                rater_agent_id=rater_agent_id,
                positive=positive,
                comment=comment,
            )
            target.total_interactions = total
            target.positive_ratings = positives
            target.trust_score = score

        log_ledger_operation(
            "rate",
            submitter,
            target=target_agent_id,
            rater=rater_agent_id,
            positive=positive,
            trust_score=score,
            comment=comment,
        )

    def reputation(self, agent_id: int) -> Reputation:
        """
        Get an agent's reputation counters.

        Raises:
            AgentNotFoundError: If the agent was never registered
        """
        if not self.state.agent_exists(agent_id):
            raise AgentNotFoundError(agent_id)
        agent = self.state.agents[agent_id]
        return Reputation(
            trust_score=agent.trust_score,
            total_interactions=agent.total_interactions,
            positive_ratings=agent.positive_ratings,
        )

    def has_rated(self, target_agent_id: int, rater_agent_id: int) -> bool:
        return (target_agent_id, rater_agent_id) in self.state.ratings

    def rating(self, target_agent_id: int, rater_agent_id: int) -> bool:
        """
        Whether the rater's rating of the target was positive.

        Raises:
            NoRatingExistsError: If the rater never rated the target
        """
        stored = self.state.ratings.get((target_agent_id, rater_agent_id))
        if stored is None:
            raise NoRatingExistsError(target_agent_id, rater_agent_id)
        return stored.positive

    def get_rating(self, target_agent_id: int, rater_agent_id: int) -> Rating | None:
        """Return the full rating record, comment included, if one exists."""
        return self.state.ratings.get((target_agent_id, rater_agent_id))

    def top_rated(self) -> list[Agent]:
        """All agents by trust score, highest first; ties keep registration order."""
        # sorted() is stable and agents are stored in id order
        return sorted(
            (replace(agent) for agent in self.state.agents),
            key=lambda agent: agent.trust_score,
            reverse=True,
        )
