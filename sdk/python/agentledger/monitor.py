"""
Event monitor: polls an event source and republishes typed events.

The monitor keeps a private cursor (the last fully processed block), reads
new blocks on every tick, decodes them, and hands each event to the
subscribers registered for its kind, in log order. It never writes to the
ledger.
"""

import asyncio
import inspect
import os
import time
from collections.abc import Callable
from enum import Enum
from typing import Any, Literal

from agentledger.codec import decode_entry
from agentledger.exceptions import (
    AgentLedgerError,
    AlreadyRunningError,
    ConfigurationError,
    EventDecodeError,
    SubstrateError,
    ValidationError,
)
from agentledger.logging import get_logger, log_poll_batch
from agentledger.retry import RetryConfig, backoff_delay
from agentledger.sources import EventSource
from agentledger.types.events import (
    EventFilter,
    EventKind,
    HistoricalEvents,
    LedgerEvent,
    LogEntry,
    LogPosition,
)

logger = get_logger("monitor")

EventCallback = Callable[[Any], Any]
ErrorCallback = Callable[[Exception], Any]

StartPosition = int | Literal["latest"]

# Filter name -> event attribute it is compared against, per kind
_FILTER_FIELDS: dict[EventKind, dict[str, str]] = {
    EventKind.AGENT_REGISTERED: {"agent_id": "agent_id"},
    EventKind.MESSAGE_SENT: {
        "message_id": "message_id",
        "sender_agent_id": "sender_agent_id",
        "receiver_agent_id": "receiver_agent_id",
    },
    EventKind.MESSAGE_RESPONDED: {
        "message_id": "message_id",
        "sender_agent_id": "responder_agent_id",
        "receiver_agent_id": "target_agent_id",
    },
    EventKind.AGENT_RATED: {"agent_id": "agent_id"},
    EventKind.TRUST_SCORE_UPDATED: {"agent_id": "agent_id"},
}


class MonitorState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    FAULTED = "faulted"


def matches_filter(event: LedgerEvent, filters: EventFilter | None) -> bool:
    """
    Check an event against equality filters.

    Each kind is compared only on the filters that name one of its fields;
    for responses, sender means the responder and receiver means the target.
    """
    if filters is None:
        return True
    for filter_name, attr in _FILTER_FIELDS[event.kind].items():
        wanted = getattr(filters, filter_name)
        if wanted is not None and getattr(event, attr) != wanted:
            return False
    return True


class EventMonitor:
    """
    Polls an EventSource and delivers decoded events to subscribers.

    One monitor runs at most one poll at a time. Several monitors may watch
    the same source; each has its own cursor and subscribers.

    Example:
        ```python
        monitor = EventMonitor(ledger.event_source())
        monitor.on_agent_rated(lambda event: print(event.agent_id, event.positive))
        monitor.on_error(lambda error: print("monitor error:", error))

        await monitor.start("latest", poll_interval_ms=1000)
        ...
        monitor.stop()
        ```
    """

    DEFAULT_POLL_INTERVAL_MS = 5000

    def __init__(
        self,
        source: EventSource,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            source: Event source to poll
            poll_interval_ms: Default interval between polls in milliseconds
            retry_config: Backoff applied between polls after read failures
        """
        self.source = source
        self.poll_interval_ms = poll_interval_ms
        self.retry_config = retry_config or RetryConfig()

        self._subscribers: dict[EventKind, list[EventCallback]] = {
            kind: [] for kind in EventKind
        }
        self._error_subscribers: list[ErrorCallback] = []

        self._state = MonitorState.IDLE
        self._cursor = 0
        self._last_position: LogPosition | None = None
        self._generation = 0
        self._poll_in_flight = False
        self._consecutive_failures = 0
        self._task: asyncio.Task | None = None
        self._wake: asyncio.Event | None = None

    @classmethod
    def from_env(
        cls,
        source: EventSource,
        retry_config: RetryConfig | None = None,
    ) -> "EventMonitor":
        """
        Create a monitor configured from environment variables.

        Environment variables:
            AGENTLEDGER_POLL_INTERVAL_MS: Poll interval in milliseconds (optional, default: 5000)

        Raises:
            ConfigurationError: If the interval is not a positive integer
        """
        raw = os.environ.get("AGENTLEDGER_POLL_INTERVAL_MS")
        interval = cls.DEFAULT_POLL_INTERVAL_MS
        if raw:
            try:
                interval = int(raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid AGENTLEDGER_POLL_INTERVAL_MS: {raw}"
                ) from None
            if interval <= 0:
                raise ConfigurationError("AGENTLEDGER_POLL_INTERVAL_MS must be positive")

        return cls(source, poll_interval_ms=interval, retry_config=retry_config)

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def cursor(self) -> int:
        """Last block whose events were fully delivered."""
        return self._cursor

    def is_monitoring(self) -> bool:
        return self._state is not MonitorState.IDLE

    # Subscriptions

    def on(self, kind: EventKind, callback: EventCallback) -> None:
        """Subscribe to one event kind. Coroutine functions are awaited."""
        self._subscribers[EventKind(kind)].append(callback)

    def off(self, kind: EventKind | Literal["error"], callback: Callable[..., Any]) -> None:
        """Remove a subscription. Unknown callbacks are ignored."""
        listeners: list = (
            self._error_subscribers if kind == "error" else self._subscribers[EventKind(kind)]
        )
        if callback in listeners:
            listeners.remove(callback)

    def on_agent_registered(self, callback: EventCallback) -> None:
        self.on(EventKind.AGENT_REGISTERED, callback)

    def on_message_sent(self, callback: EventCallback) -> None:
        self.on(EventKind.MESSAGE_SENT, callback)

    def on_message_responded(self, callback: EventCallback) -> None:
        self.on(EventKind.MESSAGE_RESPONDED, callback)

    def on_agent_rated(self, callback: EventCallback) -> None:
        self.on(EventKind.AGENT_RATED, callback)

    def on_trust_score_updated(self, callback: EventCallback) -> None:
        self.on(EventKind.TRUST_SCORE_UPDATED, callback)

    def on_error(self, callback: ErrorCallback) -> None:
        """Subscribe to monitor failures (read errors, undecodable entries, subscriber errors)."""
        self._error_subscribers.append(callback)

    # Lifecycle

    async def start(
        self,
        from_position: StartPosition = "latest",
        poll_interval_ms: int | None = None,
    ) -> None:
        """
        Start polling.

        Args:
            from_position: Block to treat as already processed, or "latest"
                to begin after the source's current tip
            poll_interval_ms: Interval between polls (default: the monitor's)

        Raises:
            AlreadyRunningError: If the monitor is already polling
            ValidationError: If from_position or the interval is invalid
            SubstrateError: If the tip cannot be read for "latest"
        """
        if self.is_monitoring():
            raise AlreadyRunningError()

        interval_ms = self.poll_interval_ms if poll_interval_ms is None else poll_interval_ms
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms <= 0:
            raise ValidationError(f"poll_interval_ms must be a positive integer, got {interval_ms!r}")

        if from_position != "latest" and (
            isinstance(from_position, bool)
            or not isinstance(from_position, int)
            or from_position < 0
        ):
            raise ValidationError(
                f"from_position must be a block number or 'latest', got {from_position!r}"
            )

        # Claim the monitor before awaiting so a concurrent start() fails
        self._state = MonitorState.POLLING
        self._generation += 1
        generation = self._generation

        if from_position == "latest":
            try:
                cursor = await self.source.current_tip()
            except BaseException:
                if self._generation == generation:
                    self._state = MonitorState.IDLE
                raise
        else:
            cursor = from_position

        if self._generation != generation:
            # stop() was called while the tip was being read
            return

        self._cursor = cursor
        self._last_position = None
        self._consecutive_failures = 0
        self._wake = asyncio.Event()
        self._task = asyncio.create_task(self._run(generation, interval_ms / 1000, self._wake))
        logger.info("Event monitoring started after block %d", cursor)

    def stop(self) -> None:
        """
        Stop polling. Idempotent.

        Returns as soon as the monitor is idle. A read already in flight is
        allowed to finish but its results are discarded.
        """
        if self._state is MonitorState.IDLE:
            return

        self._state = MonitorState.IDLE
        self._generation += 1
        if self._wake is not None:
            self._wake.set()
        logger.info("Event monitoring stopped at block %d", self._cursor)

    async def wait_closed(self) -> None:
        """Wait for the polling task of the last run to exit."""
        if self._task is not None:
            await self._task

    async def poll_once(self) -> int:
        """
        Run one poll immediately.

        Returns:
            Number of events delivered; 0 when idle, when nothing is new, or
            when another poll is already in flight
        """
        return await self._tick(self._generation)

    # Historical queries

    async def historical_query(
        self,
        from_position: int = 0,
        to_position: StartPosition = "latest",
        filters: EventFilter | None = None,
    ) -> HistoricalEvents:
        """
        Read and decode a block range without touching the live cursor.

        Undecodable entries are skipped.

        Args:
            from_position: First block (inclusive)
            to_position: Last block (inclusive), or "latest" for the current tip
            filters: Equality filters; see matches_filter

        Returns:
            Matching events partitioned by kind, each list in log order
        """
        to_block = await self.source.current_tip() if to_position == "latest" else to_position
        entries = await self.source.read_range(from_position, to_block)

        result = HistoricalEvents()
        previous: LogPosition | None = None
        for entry in sorted(entries, key=lambda e: e.position):
            if entry.position == previous:
                continue
            previous = entry.position
            try:
                event = decode_entry(entry)
            except EventDecodeError as e:
                logger.debug("Skipping undecodable entry: %s", e)
                continue
            if matches_filter(event, filters):
                result.add(event)
        return result

    # Internals

    async def _run(self, generation: int, interval: float, wake: asyncio.Event) -> None:
        while self._generation == generation:
            delay = interval
            if self._consecutive_failures:
                delay = max(
                    interval,
                    backoff_delay(self.retry_config, self._consecutive_failures - 1),
                )
            try:
                await asyncio.wait_for(wake.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

            if self._generation != generation:
                break
            try:
                await self._tick(generation)
            except Exception as e:
                # The loop outlives any single poll
                logger.exception("Unexpected error during poll")
                await self._report(e)

    async def _tick(self, generation: int) -> int:
        if not self.is_monitoring() or generation != self._generation:
            return 0
        if self._poll_in_flight:
            logger.debug("Poll already in flight; tick dropped")
            return 0

        self._poll_in_flight = True
        started = time.monotonic()
        try:
            try:
                tip = await self.source.current_tip()
                if tip <= self._cursor:
                    if generation == self._generation:
                        self._recovered()
                    return 0
                from_block = self._cursor + 1
                entries = await self.source.read_range(from_block, tip)
            except Exception as e:
                if generation == self._generation:
                    await self._faulted(e)
                return 0

            if generation != self._generation:
                return 0

            self._recovered()
            delivered, skipped, complete = await self._deliver_batch(
                generation, entries, from_block, tip
            )
            if complete:
                self._cursor = tip
            log_poll_batch(
                from_block,
                tip,
                delivered,
                skipped,
                (time.monotonic() - started) * 1000,
            )
            return delivered
        finally:
            self._poll_in_flight = False

    async def _deliver_batch(
        self,
        generation: int,
        entries: list[LogEntry],
        from_block: int,
        tip: int,
    ) -> tuple[int, int, bool]:
        delivered = skipped = 0
        for entry in sorted(entries, key=lambda e: e.position):
            if generation != self._generation:
                return delivered, skipped, False

            position = entry.position
            out_of_range = not from_block <= position.block_number <= tip
            seen = self._last_position is not None and position <= self._last_position
            if out_of_range or seen:
                skipped += 1
                continue

            self._last_position = position
            try:
                event = decode_entry(entry)
            except EventDecodeError as e:
                skipped += 1
                await self._report(e)
                continue

            await self._dispatch(event)
            delivered += 1

        return delivered, skipped, True

    async def _dispatch(self, event: LedgerEvent) -> None:
        for callback in list(self._subscribers[event.kind]):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(
                    "%s subscriber failed at %s: %s", event.kind.value, event.position, e
                )
                await self._report(e)

    async def _faulted(self, error: Exception) -> None:
        self._consecutive_failures += 1
        if self._state is not MonitorState.FAULTED:
            logger.warning("Event source read failed; monitor faulted: %s", error)
        self._state = MonitorState.FAULTED
        if not isinstance(error, AgentLedgerError):
            wrapped = SubstrateError("READ_FAILED", str(error))
            wrapped.__cause__ = error
            error = wrapped
        await self._report(error)

    def _recovered(self) -> None:
        if self._state is MonitorState.FAULTED:
            logger.info(
                "Event source reachable again after %d failed polls",
                self._consecutive_failures,
            )
            self._state = MonitorState.POLLING
        self._consecutive_failures = 0

    async def _report(self, error: Exception) -> None:
        for callback in list(self._error_subscribers):
            try:
                result = callback(error)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error subscriber failed")
