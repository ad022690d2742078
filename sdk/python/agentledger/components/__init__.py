"""AgentLedger state-transition components."""

from agentledger.components.messaging import UNBOUND_AGENT_ID, MessagingComponent
from agentledger.components.registry import RegistryComponent
from agentledger.components.reputation import (
    INITIAL_TRUST_SCORE,
    ReputationComponent,
    compute_trust_score,
)

__all__ = [
    "RegistryComponent",
    "MessagingComponent",
    "ReputationComponent",
    "UNBOUND_AGENT_ID",
    "INITIAL_TRUST_SCORE",
    "compute_trust_score",
]
