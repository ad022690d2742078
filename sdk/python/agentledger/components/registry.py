"""Agent registry component."""

from dataclasses import replace
from typing import TYPE_CHECKING

from agentledger.components.validation import require_str
from agentledger.exceptions import ValidationError
from agentledger.logging import get_logger, log_ledger_operation, truncate_identity
from agentledger.types.agents import Agent, AgentRole
from agentledger.types.events import EventKind

if TYPE_CHECKING:
    from agentledger.eventlog import EventLog
    from agentledger.state import LedgerState

logger = get_logger("ledger")


class RegistryComponent:
    """Registers agents and answers registry queries."""

    def __init__(self, state: "LedgerState", event_log: "EventLog") -> None:
        """
        Initialize the registry.

        Args:
            state: Shared ledger state
            event_log: Log that receives AgentRegistered events
        """
        self.state = state
        self.event_log = event_log

    def register(
        self,
        name: str,
        role: AgentRole | int,
        metadata_ref: str,
        submitter: str,
    ) -> int:
        """
        Register a new agent and bind the submitting identity to it.

        Names and metadata references need not be unique, and empty strings
        are accepted. Registering again from the same identity rebinds it to
        the new agent; the earlier agent keeps its record but loses its owner.

        Args:
            name: Display name for the agent
            role: AgentRole (or its integer value)
            metadata_ref: Opaque pointer to off-ledger metadata
            submitter: Identity address submitting the operation

        Returns:
            The new agent id (equal to count() before the call)

        Raises:
            ValidationError: If role is not a known AgentRole or a field is not a string
        """
        agent_role = _coerce_role(role)
        require_str("name", name)
        require_str("metadata_ref", metadata_ref)
        require_str("submitter", submitter)

        agent_id = self.state.agent_ids.next_value
        with self.event_log.transaction() as tx:
            tx.emit(
                EventKind.AGENT_REGISTERED,
                agent_id=agent_id,
                identity=submitter,
                name=name,
                role=agent_role,
                metadata_ref=metadata_ref,
            )
            self.state.agent_ids.allocate()
            self.state.agents.append(
                Agent(id=agent_id, name=name, role=agent_role, metadata_ref=metadata_ref)
            )
            previous = self.state.identities.bind(submitter, agent_id)

        if previous is not None:
            logger.warning(
                "Identity %s rebound from agent %d to agent %d",
                truncate_identity(submitter),
                previous,
                agent_id,
            )
        log_ledger_operation("register", submitter, agent_id=agent_id, role=agent_role.name)
        return agent_id

    def list_all(self) -> list[Agent]:
        """Return copies of all agents in ascending id order."""
        return [replace(agent) for agent in self.state.agents]

    def count(self) -> int:
        """Number of agents ever registered."""
        return self.state.agent_ids.next_value

    def get_agent(self, agent_id: int) -> Agent | None:
        """Return a copy of one agent, or None if the id was never assigned."""
        if not self.state.agent_exists(agent_id):
            return None
        return replace(self.state.agents[agent_id])

    def agent_id_of(self, identity: str) -> int | None:
        """Return the agent currently bound to an identity, if any."""
        return self.state.identities.resolve(identity)


def _coerce_role(role: AgentRole | int) -> AgentRole:
    if isinstance(role, bool):
        raise ValidationError(f"Invalid agent role: {role!r}")
    try:
        return AgentRole(role)
    except ValueError:
        raise ValidationError(f"Invalid agent role: {role!r}") from None
