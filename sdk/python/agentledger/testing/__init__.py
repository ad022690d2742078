"""AgentLedger testing utilities.

Provides a scriptable event source and fixtures for testing applications
built on AgentLedger.
"""

from agentledger.testing.fixtures import create_identities, create_ledger_with_agents
from agentledger.testing.mock import MockCall, MockEventSource, make_raw_entry

__all__ = [
    # Mock source
    "MockEventSource",
    "MockCall",
    "make_raw_entry",
    # Helper functions
    "create_identities",
    "create_ledger_with_agents",
]
