"""Shared fixtures for the AgentLedger test suite."""

from agentledger.testing.fixtures import (  # noqa: F401
    identities,
    ledger,
    mock_source,
    populated_ledger,
)
