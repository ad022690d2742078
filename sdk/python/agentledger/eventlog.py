"""
In-process append-only event log.

Stands in for the ledger substrate's log: each committed transaction becomes
one block holding the transaction's entries in emission order. Block 0 is
genesis and stays empty.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from agentledger.codec import encode_event, transaction_hash
from agentledger.types.events import EventKind, LogEntry, LogPosition


class Transaction:
    """Events staged by one ledger operation. Encoded as they are emitted."""

    def __init__(self) -> None:
        self._staged: list[tuple[str, str]] = []

    def emit(self, kind: EventKind, **fields: Any) -> None:
        self._staged.append(encode_event(kind, **fields))

    @property
    def staged(self) -> list[tuple[str, str]]:
        return list(self._staged)


class EventLog:
    """Ordered, append-only record of committed state transitions."""

    def __init__(self) -> None:
        self._blocks: list[list[LogEntry]] = [[]]
        self._in_transaction = False

    def current_tip(self) -> int:
        """Highest committed block number (0 when nothing was committed)."""
        return len(self._blocks) - 1

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """
        Stage events for one operation and commit them as a block.

        If the body raises, nothing is committed. A transaction that emits
        nothing does not produce a block.
        """
        if self._in_transaction:
            raise RuntimeError("Transactions cannot be nested")

        self._in_transaction = True
        try:
            tx = Transaction()
            yield tx
            if tx.staged:
                self._commit(tx.staged)
        finally:
            self._in_transaction = False

    def append(self, kind: EventKind, **fields: Any) -> list[LogEntry]:
        """Commit a single event as its own block."""
        with self.transaction() as tx:
            tx.emit(kind, **fields)
        return list(self._blocks[-1])

    def read_range(self, from_block: int, to_block: int) -> list[LogEntry]:
        """
        Return every entry in blocks from_block..to_block (inclusive), in order.

        Bounds outside the committed range are clamped.
        """
        start = max(from_block, 0)
        end = min(to_block, self.current_tip())
        if start > end:
            return []

        entries: list[LogEntry] = []
        for block in self._blocks[start : end + 1]:
            entries.extend(block)
        return entries

    def entries(self) -> Iterator[LogEntry]:
        for block in self._blocks:
            yield from block

    def __len__(self) -> int:
        return sum(len(block) for block in self._blocks)

    def _commit(self, staged: list[tuple[str, str]]) -> None:
        block_number = len(self._blocks)
        tx_hash = transaction_hash(block_number, staged)
        self._blocks.append(
            [
                LogEntry(
                    position=LogPosition(block_number, log_index),
                    transaction_hash=tx_hash,
                    topic=topic,
                    data=data,
                )
                for log_index, (topic, data) in enumerate(staged)
            ]
        )
