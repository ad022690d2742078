"""
Pytest plugin for AgentLedger testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["agentledger.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from agentledger.testing.fixtures import (
    identities,
    ledger,
    mock_source,
    populated_ledger,
)

__all__ = [
    "ledger",
    "identities",
    "populated_ledger",
    "mock_source",
]
