"""
Mock event source for testing.

Provides a MockEventSource that serves an in-process EventLog while letting
tests script read failures, inject raw entries, stall reads, and inspect
which calls were made.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from agentledger.eventlog import EventLog
from agentledger.exceptions import SubstrateError
from agentledger.sources import EventSource
from agentledger.types.events import LogEntry, LogPosition


@dataclass
class MockCall:
    """Record of a method call."""

    method: str
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MockEventSource(EventSource):
    """
    Scriptable EventSource for monitor tests.

    Example:
        ```python
        ledger = AgentLedger()
        source = MockEventSource(ledger.event_log)
        source.fail_next(2)                      # next two reads raise SubstrateError
        source.inject(LogEntry(...))             # extra raw entry served with its block
        source.hold_reads()                      # reads block until release_reads()
        ```
    """

    def __init__(self, event_log: EventLog | None = None) -> None:
        self.event_log = event_log if event_log is not None else EventLog()
        self._calls: list[MockCall] = []
        self._failures: list[Exception] = []
        self._injected: list[LogEntry] = []
        self._tip_override: int | None = None
        self._gate: asyncio.Event | None = None
        self.closed = False

    # Scripting

    def fail_next(self, times: int = 1, error: Exception | None = None) -> None:
        """Make the next `times` calls raise `error` (default: SubstrateError)."""
        for _ in range(times):
            self._failures.append(
                error if error is not None else SubstrateError("MOCK_FAILURE", "Scripted read failure")
            )

    def inject(self, entry: LogEntry) -> None:
        """Serve an extra raw entry alongside the log's own entries."""
        self._injected.append(entry)

    def set_tip(self, tip: int | None) -> None:
        """Report a fixed tip instead of the log's (None restores the log's)."""
        self._tip_override = tip

    def hold_reads(self) -> None:
        """Block read_range() calls until release_reads()."""
        self._gate = asyncio.Event()

    def release_reads(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    # Call tracking

    def was_called(self, method: str) -> bool:
        return any(call.method == method for call in self._calls)

    def call_count(self, method: str) -> int:
        return sum(1 for call in self._calls if call.method == method)

    def get_calls(self, method: str | None = None) -> list[MockCall]:
        if method is None:
            return list(self._calls)
        return [call for call in self._calls if call.method == method]

    def reset(self) -> None:
        """Clear recorded calls and scripted behavior."""
        self._calls.clear()
        self._failures.clear()
        self._injected.clear()
        self._tip_override = None
        self.release_reads()

    # EventSource

    async def current_tip(self) -> int:
        self._calls.append(MockCall("current_tip", (), {}))
        self._maybe_fail()
        if self._tip_override is not None:
            return self._tip_override
        injected_tip = max((e.position.block_number for e in self._injected), default=0)
        return max(self.event_log.current_tip(), injected_tip)

    async def read_range(self, from_block: int, to_block: int) -> list[LogEntry]:
        self._calls.append(MockCall("read_range", (from_block, to_block), {}))
        gate = self._gate
        if gate is not None:
            await gate.wait()
        self._maybe_fail()

        entries = self.event_log.read_range(from_block, to_block)
        entries.extend(
            entry
            for entry in self._injected
            if from_block <= entry.position.block_number <= to_block
        )
        return sorted(entries, key=lambda entry: entry.position)

    async def close(self) -> None:
        self.closed = True

    def _maybe_fail(self) -> None:
        if self._failures:
            raise self._failures.pop(0)


def make_raw_entry(
    block_number: int,
    log_index: int = 0,
    topic: str = "AgentRegistered",
    data: str = "{}",
    transaction_hash: str = "0x" + "00" * 32,
) -> LogEntry:
    """Build a raw LogEntry by hand, e.g. to inject a malformed one."""
    return LogEntry(
        position=LogPosition(block_number, log_index),
        transaction_hash=transaction_hash,
        topic=topic,
        data=data,
    )
