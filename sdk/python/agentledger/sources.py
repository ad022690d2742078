"""
Event sources: the read surface an EventMonitor polls.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from agentledger.types.events import LogEntry

if TYPE_CHECKING:
    from agentledger.eventlog import EventLog


class EventSource(ABC):
    """Abstract read access to a ledger's event log."""

    @abstractmethod
    async def current_tip(self) -> int:
        """Return the highest committed block number."""
        pass

    @abstractmethod
    async def read_range(self, from_block: int, to_block: int) -> list[LogEntry]:
        """Return the entries of blocks from_block..to_block (inclusive), in log order."""
        pass

    async def close(self) -> None:
        """Release any resources held by the source."""
        pass


class LocalEventSource(EventSource):
    """EventSource over an in-process EventLog."""

    def __init__(self, event_log: "EventLog") -> None:
        self.event_log = event_log

    async def current_tip(self) -> int:
        return self.event_log.current_tip()

    async def read_range(self, from_block: int, to_block: int) -> list[LogEntry]:
        return self.event_log.read_range(from_block, to_block)
