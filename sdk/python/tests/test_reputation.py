"""
Property-based and unit tests for ratings and trust scores.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from agentledger.codec import decode_entry
from agentledger.components.reputation import compute_trust_score
from agentledger.exceptions import (
    AgentNotFoundError,
    AlreadyRatedError,
    CannotRateSelfError,
    NoRatingExistsError,
    RaterNotRegisteredError,
    ValidationError,
)
from agentledger.testing import create_ledger_with_agents
from agentledger.types.agents import AgentRole, Reputation
from agentledger.types.events import AgentRated, TrustScoreUpdated

AGENT_COUNT = 6
IDENTITIES = [f"0x{i:040x}" for i in range(AGENT_COUNT)]

rating_strategy = st.tuples(
    st.integers(min_value=0, max_value=AGENT_COUNT - 1),  # rater
    st.integers(min_value=0, max_value=AGENT_COUNT - 1),  # target
    st.booleans(),
)


def _fresh_ledger():
    ledger, _ = create_ledger_with_agents(
        roles=[AgentRole.GENERIC] * AGENT_COUNT, identities=IDENTITIES
    )
    return ledger


@given(ratings=st.lists(rating_strategy, max_size=40))
@settings(max_examples=100)
def test_trust_score_matches_formula(ratings: list[tuple[int, int, bool]]) -> None:
    """
    Property: trust score is always within [0, 100] and equals
    positive * 100 // total, or 100 with no ratings.

    Rejected ratings (self, duplicate) never change any counter.
    """
    ledger = _fresh_ledger()
    accepted: dict[tuple[int, int], bool] = {}

    for rater, target, positive in ratings:
        before = ledger.reputation(target)
        if rater == target:
            with pytest.raises(CannotRateSelfError):
                ledger.rate(target, positive, "", IDENTITIES[rater])
            assert ledger.reputation(target) == before
        elif (target, rater) in accepted:
            with pytest.raises(AlreadyRatedError):
                ledger.rate(target, positive, "", IDENTITIES[rater])
            assert ledger.reputation(target) == before
        else:
            ledger.rate(target, positive, "", IDENTITIES[rater])
            accepted[(target, rater)] = positive

    for agent in ledger.list_all():
        received = [p for (target, _), p in accepted.items() if target == agent.id]
        total = len(received)
        positives = sum(received)
        assert 0 <= agent.trust_score <= 100
        assert agent.total_interactions == total
        assert agent.positive_ratings == positives
        if total == 0:
            assert agent.trust_score == 100
        else:
            assert agent.trust_score == positives * 100 // total


@given(ratings=st.lists(rating_strategy, max_size=40))
@settings(max_examples=100)
def test_top_rated_is_stable_sort(ratings: list[tuple[int, int, bool]]) -> None:
    """
    Property: top_rated() is a permutation of list_all() ordered by trust
    score descending, with lower ids first on ties.
    """
    ledger = _fresh_ledger()
    for rater, target, positive in ratings:
        if rater != target and not ledger.has_rated(target, rater):
            ledger.rate(target, positive, "", IDENTITIES[rater])

    top = ledger.top_rated()
    everyone = ledger.list_all()

    assert sorted(agent.id for agent in top) == [agent.id for agent in everyone]
    for first, second in zip(top, top[1:]):
        assert first.trust_score >= second.trust_score
        if first.trust_score == second.trust_score:
            assert first.id < second.id


@given(
    positives=st.integers(min_value=0, max_value=500),
    extra=st.integers(min_value=0, max_value=500),
)
def test_compute_trust_score_bounds(positives: int, extra: int) -> None:
    total = positives + extra
    score = compute_trust_score(positives, total)

    assert 0 <= score <= 100
    if total:
        assert score == positives * 100 // total


class TestRate:
    """Unit tests for rate() and its error ordering."""

    def test_scenario_mixed_ratings(self, populated_ledger) -> None:
        ledger, ids = populated_ledger

        ledger.rate(2, True, "great", ids[1])
        ledger.rate(2, False, "slow", ids[0])

        assert ledger.reputation(2) == Reputation(
            trust_score=50, total_interactions=2, positive_ratings=1
        )

    def test_scenario_self_rating(self, populated_ledger) -> None:
        ledger, ids = populated_ledger
        before = ledger.get_agent(2)
        tip = ledger.event_log.current_tip()

        with pytest.raises(CannotRateSelfError) as exc_info:
            ledger.rate(2, True, "me", ids[2])

        assert exc_info.value.code == "CANNOT_RATE_SELF"
        assert ledger.get_agent(2) == before
        assert ledger.event_log.current_tip() == tip
        assert not ledger.has_rated(2, 2)

    def test_self_rating_rejected_for_later_registration(self, ledger) -> None:
        ledger.register("late", AgentRole.GENERIC, "", "0xlate")
        ledger.register("later", AgentRole.GENERIC, "", "0xlater")

        with pytest.raises(CannotRateSelfError):
            ledger.rate(1, False, "", "0xlater")

    def test_unregistered_rater(self, populated_ledger) -> None:
        ledger, _ = populated_ledger

        with pytest.raises(RaterNotRegisteredError) as exc_info:
            ledger.rate(1, True, "", "0xstranger")

        assert exc_info.value.identity == "0xstranger"

    def test_unregistered_rater_checked_before_target(self, populated_ledger) -> None:
        ledger, _ = populated_ledger

        with pytest.raises(RaterNotRegisteredError):
            ledger.rate(99, True, "", "0xstranger")

    def test_unknown_target(self, populated_ledger) -> None:
        ledger, ids = populated_ledger

        with pytest.raises(AgentNotFoundError):
            ledger.rate(99, True, "", ids[0])

    def test_duplicate_rating_rejected(self, populated_ledger) -> None:
        ledger, ids = populated_ledger
        ledger.rate(1, True, "", ids[0])
        tip = ledger.event_log.current_tip()

        with pytest.raises(AlreadyRatedError):
            ledger.rate(1, False, "changed my mind", ids[0])

        assert ledger.reputation(1) == Reputation(100, 1, 1)
        assert ledger.rating(1, 0) is True
        assert ledger.event_log.current_tip() == tip

    def test_events_in_one_block_in_order(self, populated_ledger) -> None:
        ledger, ids = populated_ledger

        ledger.rate(0, False, "meh", ids[1])

        tip = ledger.event_log.current_tip()
        events = [decode_entry(e) for e in ledger.event_log.read_range(tip, tip)]
        assert [type(e) for e in events] == [AgentRated, TrustScoreUpdated]
        rated, updated = events
        assert rated.position.log_index == 0
        assert updated.position.log_index == 1
        assert rated.transaction_hash == updated.transaction_hash
        assert (rated.agent_id, rated.rater_agent_id, rated.positive, rated.comment) == (
            0,
            1,
            False,
            "meh",
        )
        assert (updated.agent_id, updated.trust_score, updated.total_interactions) == (0, 0, 1)

    def test_trust_score_truncates(self, ledger) -> None:
        for i in range(4):
            ledger.register(f"a{i}", AgentRole.GENERIC, "", f"0x{i}")

        ledger.rate(0, True, "", "0x1")
        ledger.rate(0, False, "", "0x2")
        ledger.rate(0, False, "", "0x3")

        assert ledger.reputation(0).trust_score == 33


class TestQueries:
    """Unit tests for reputation queries."""

    def test_reputation_unknown_agent(self, ledger) -> None:
        with pytest.raises(AgentNotFoundError):
            ledger.reputation(0)

    def test_new_agent_reputation(self, populated_ledger) -> None:
        ledger, _ = populated_ledger

        assert ledger.reputation(0) == Reputation(100, 0, 0)

    def test_has_rated_and_rating(self, populated_ledger) -> None:
        ledger, ids = populated_ledger
        ledger.rate(2, False, "", ids[1])

        assert ledger.has_rated(2, 1)
        assert not ledger.has_rated(1, 2)
        assert ledger.rating(2, 1) is False

    def test_rating_missing(self, populated_ledger) -> None:
        ledger, _ = populated_ledger

        with pytest.raises(NoRatingExistsError) as exc_info:
            ledger.rating(2, 1)

        assert exc_info.value.code == "NO_RATING_EXISTS"

    def test_get_rating_keeps_comment(self, populated_ledger) -> None:
        ledger, ids = populated_ledger
        ledger.rate(2, True, "thorough", ids[0])

        stored = ledger.reputation_engine.get_rating(2, 0)
        assert stored is not None
        assert stored.comment == "thorough"
        assert ledger.reputation_engine.get_rating(2, 1) is None

    def test_top_rated_ties_by_id(self, populated_ledger) -> None:
        ledger, ids = populated_ledger
        ledger.rate(0, False, "", ids[1])

        assert [agent.id for agent in ledger.top_rated()] == [1, 2, 0]

    @pytest.mark.parametrize(
        "target,comment",
        [(1, None), (1, 7), ("1", ""), (True, ""), (None, "")],
    )
    def test_rate_rejects_mistyped_arguments(self, populated_ledger, target, comment) -> None:
        ledger, ids = populated_ledger
        tip = ledger.event_log.current_tip()

        with pytest.raises(ValidationError) as exc_info:
            ledger.rate(target, True, comment, ids[0])

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert ledger.event_log.current_tip() == tip
        assert ledger.reputation(1) == Reputation(100, 0, 0)
        assert not ledger.has_rated(1, 0)
