"""
Pytest fixtures for AgentLedger testing.

Provides common fixtures and helpers for tests that drive a ledger and
observe it through an event monitor.
"""

from collections.abc import Sequence
from typing import Generator

import pytest

from agentledger.identity import Identity
from agentledger.ledger import AgentLedger
from agentledger.testing.mock import MockEventSource
from agentledger.types.agents import AgentRole


def create_identities(count: int) -> list[str]:
    """Generate `count` fresh identity addresses."""
    return [Identity.generate()[0].address for _ in range(count)]


def create_ledger_with_agents(
    roles: Sequence[AgentRole] = (AgentRole.CHAT, AgentRole.GENERIC, AgentRole.GENERIC),
    identities: Sequence[str] | None = None,
) -> tuple[AgentLedger, list[str]]:
    """
    Build a ledger with one agent per role, each registered by its own identity.

    Agent i is named "agent-i" and bound to identities[i].

    Returns:
        (ledger, identities)
    """
    if identities is None:
        identities = create_identities(len(roles))
    if len(identities) < len(roles):
        raise ValueError("Need one identity per agent")

    ledger = AgentLedger()
    for index, role in enumerate(roles):
        ledger.register(f"agent-{index}", role, f"ipfs://agent-{index}", identities[index])
    return ledger, list(identities)


# ============================================================================
# Ledger Fixtures
# ============================================================================


@pytest.fixture
def ledger() -> AgentLedger:
    """Provide an empty AgentLedger."""
    return AgentLedger()


@pytest.fixture
def identities() -> list[str]:
    """Provide five distinct identity addresses."""
    return create_identities(5)


@pytest.fixture
def populated_ledger(identities: list[str]) -> tuple[AgentLedger, list[str]]:
    """
    Provide a ledger with agents 0 (CHAT), 1 and 2 (GENERIC).

    Example:
        ```python
        def test_rating(populated_ledger):
            ledger, ids = populated_ledger
            ledger.rate(2, True, "", submitter=ids[1])
        ```
    """
    return create_ledger_with_agents(identities=identities[:3])


# ============================================================================
# Source Fixtures
# ============================================================================


@pytest.fixture
def mock_source(ledger: AgentLedger) -> Generator[MockEventSource, None, None]:
    """Provide a MockEventSource serving the `ledger` fixture's log."""
    source = MockEventSource(ledger.event_log)
    yield source
    source.reset()
