"""AgentLedger exception classes."""


class AgentLedgerError(Exception):
    """Base exception for all AgentLedger errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(AgentLedgerError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(AgentLedgerError):
    """Raised when an operation argument is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_ERROR", message)


class AgentNotFoundError(AgentLedgerError):
    """Raised when an agent id was never assigned."""

    def __init__(self, agent_id: int) -> None:
        super().__init__("AGENT_NOT_FOUND", f"Agent {agent_id} does not exist")
        self.agent_id = agent_id


class RaterNotRegisteredError(AgentLedgerError):
    """Raised when the submitting identity has no agent to rate with."""

    def __init__(self, identity: str) -> None:
        super().__init__(
            "RATER_NOT_REGISTERED", f"Identity {identity} has no registered agent"
        )
        self.identity = identity


class CannotRateSelfError(AgentLedgerError):
    """Raised when an agent tries to rate itself."""

    def __init__(self, agent_id: int) -> None:
        super().__init__("CANNOT_RATE_SELF", f"Agent {agent_id} cannot rate itself")
        self.agent_id = agent_id


class AlreadyRatedError(AgentLedgerError):
    """Raised on a second rating for the same (target, rater) pair."""

    def __init__(self, target_agent_id: int, rater_agent_id: int) -> None:
        super().__init__(
            "ALREADY_RATED",
            f"Agent {rater_agent_id} has already rated agent {target_agent_id}",
        )
        self.target_agent_id = target_agent_id
        self.rater_agent_id = rater_agent_id


class NoRatingExistsError(AgentLedgerError):
    """Raised when looking up a rating that was never given."""

    def __init__(self, target_agent_id: int, rater_agent_id: int) -> None:
        super().__init__(
            "NO_RATING_EXISTS",
            f"Agent {rater_agent_id} has not rated agent {target_agent_id}",
        )
        self.target_agent_id = target_agent_id
        self.rater_agent_id = rater_agent_id


class AlreadyRunningError(AgentLedgerError):
    """Raised when starting a monitor that is already polling."""

    def __init__(self) -> None:
        super().__init__("ALREADY_RUNNING", "Event monitoring is already active")


class EventDecodeError(AgentLedgerError):
    """Raised when a raw log entry cannot be decoded into a typed event."""

    def __init__(self, message: str, position: object | None = None) -> None:
        super().__init__("EVENT_DECODE_ERROR", message)
        self.position = position


class SubstrateError(AgentLedgerError):
    """Raised when the ledger substrate cannot be read."""

    pass
