"""Messaging component."""

from typing import TYPE_CHECKING

from agentledger.components.validation import require_int, require_str
from agentledger.exceptions import AgentNotFoundError
from agentledger.logging import log_ledger_operation
from agentledger.types.events import EventKind
from agentledger.types.messages import Message

if TYPE_CHECKING:
    from agentledger.eventlog import EventLog
    from agentledger.state import LedgerState

# Sender/responder id recorded when the submitter has no bound agent
UNBOUND_AGENT_ID = 0


class MessagingComponent:
    """Sends messages between agents and records responses."""

    def __init__(self, state: "LedgerState", event_log: "EventLog") -> None:
        self.state = state
        self.event_log = event_log

    def send(self, receiver_agent_id: int, body: str, submitter: str) -> int:
        """
        Send a message to an agent.

        The sender is the agent bound to the submitting identity, or
        UNBOUND_AGENT_ID if there is none. Messaging oneself is allowed.

        Args:
            receiver_agent_id: Recipient agent id
            body: Message text (may be empty)
            submitter: Identity address submitting the operation

        Returns:
            The new message id

        Raises:
            ValidationError: If an argument has the wrong type
            AgentNotFoundError: If the receiver was never registered
        """
        require_int("receiver_agent_id", receiver_agent_id)
        require_str("body", body)
        require_str("submitter", submitter)
        if not self.state.agent_exists(receiver_agent_id):
            raise AgentNotFoundError(receiver_agent_id)

        sender_agent_id = self._resolve(submitter)
        message_id = self.state.message_ids.next_value
        with self.event_log.transaction() as tx:
            tx.emit(
                EventKind.MESSAGE_SENT,
                message_id=message_id,
                sender_agent_id=sender_agent_id,
                receiver_agent_id=receiver_agent_id,
                body=body,
            )
            self.state.message_ids.allocate()
            self.state.messages.append(
                Message(
                    id=message_id,
                    sender_agent_id=sender_agent_id,
                    receiver_agent_id=receiver_agent_id,
                    body=body,
                )
            )

        log_ledger_operation(
            "send",
            submitter,
            message_id=message_id,
            sender=sender_agent_id,
            receiver=receiver_agent_id,
            body=body,
        )
        return message_id

    def respond(
        self,
        message_id: int,
        target_agent_id: int,
        body: str,
        submitter: str,
    ) -> None:
        """
        Respond to a message.

        Only the target agent is checked. The message id is not looked up and
        the target is not compared with the original sender.

        Args:
            message_id: Id of the message being answered
            target_agent_id: Agent the response is addressed to
            body: Response text (may be empty)
            submitter: Identity address submitting the operation

        Raises:
            ValidationError: If an argument has the wrong type
            AgentNotFoundError: If the target was never registered
        """
        require_int("message_id", message_id)
        require_int("target_agent_id", target_agent_id)
        require_str("body", body)
        require_str("submitter", submitter)
        if not self.state.agent_exists(target_agent_id):
            raise AgentNotFoundError(target_agent_id)

        responder_agent_id = self._resolve(submitter)
        with self.event_log.transaction() as tx:
            tx.emit(
                EventKind.MESSAGE_RESPONDED,
                message_id=message_id,
                responder_agent_id=responder_agent_id,
                target_agent_id=target_agent_id,
                body=body,
            )

        log_ledger_operation(
            "respond",
            submitter,
            message_id=message_id,
            responder=responder_agent_id,
            target=target_agent_id,
            body=body,
        )

    def get_message(self, message_id: int) -> Message | None:
        """Return a stored message, or None if the id was never assigned."""
        if not self.state.message_ids.is_assigned(message_id):
            return None
        return self.state.messages[message_id]

    def message_count(self) -> int:
        return self.state.message_ids.next_value

    def _resolve(self, submitter: str) -> int:
        agent_id = self.state.identities.resolve(submitter)
        return UNBOUND_AGENT_ID if agent_id is None else agent_id
