"""In-memory reference ledger.

Implements the :class:`rtoledger.store.base.RecordStore` contract the way a
multi-version ledger platform does:

* a transaction reads from a snapshot taken when it begins;
* writes are buffered in the transaction and applied all at once on commit;
* commit validates the read set (key versions) and every range scanned
  (phantom protection); any difference aborts the commit with
  :class:`MvccConflictError` and nothing is applied;
* each committed write appends a :class:`KeyModification` to the key's
  history, stamped with a transaction id chained to the previous one.

Used by tests, by the demo script and by :class:`rtoledger.client.RtoLedgerClient`.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType, TracebackType

from rtoledger.exceptions import InvalidKeyError, MvccConflictError, TransactionClosedError
from rtoledger.store.base import KeyModification
from rtoledger.store.composite import create_composite_key, partial_key_range, split_composite_key

_logger = logging.getLogger(__name__)

GENESIS_TX_ID = "0" * 64


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class _Versioned:
    version: int
    """Block height of the transaction that wrote the value."""
    value: bytes


@dataclass(frozen=True, slots=True)
class _RangeRead:
    start_key: str
    end_key: str
    observed: tuple[tuple[str, int], ...]


class _TxState(StrEnum):
    OPEN = "open"
    COMMITTED = "committed"
    DISCARDED = "discarded"


def _in_range(key: str, start_key: str, end_key: str) -> bool:
    if start_key and key < start_key:
        return False
    return not (end_key and key >= end_key)


def _scan(state: Mapping[str, _Versioned], start_key: str, end_key: str) -> list[tuple[str, _Versioned]]:
    return [(key, state[key]) for key in sorted(state) if _in_range(key, start_key, end_key)]


def chain_tx_id(previous: str, height: int, timestamp: datetime, writes: Mapping[str, bytes]) -> str:
    """SHA-256 over the previous tx id and the canonical write set."""
    digest = hashlib.sha256()
    digest.update(previous.encode("ascii"))
    digest.update(height.to_bytes(8, "big"))
    digest.update(timestamp.isoformat().encode("ascii"))
    for key in sorted(writes):
        encoded = key.encode("utf-8")
        value = writes[key]
        digest.update(len(encoded).to_bytes(4, "big"))
        digest.update(encoded)
        digest.update(len(value).to_bytes(4, "big"))
        digest.update(value)
    return digest.hexdigest()


class InMemoryLedger:
    """Committed state, per-key history and the transaction-id chain."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._state: dict[str, _Versioned] = {}
        self._history: dict[str, list[tuple[int, KeyModification]]] = {}
        self._height = 0
        self._last_tx_id = GENESIS_TX_ID

    @property
    def height(self) -> int:
        """Number of committed write transactions."""
        return self._height

    @property
    def last_tx_id(self) -> str:
        return self._last_tx_id

    def transaction(self) -> LedgerTransaction:
        """Begin a transaction on the current committed snapshot."""
        with self._lock:
            snapshot = MappingProxyType(dict(self._state))
            height = self._height
        return LedgerTransaction(self, snapshot, height)

    def history_at(self, key: str, height: int) -> list[KeyModification]:
        """History of *key* up to block *height*, newest first."""
        with self._lock:
            entries = list(self._history.get(key, ()))
        return [modification for block, modification in reversed(entries) if block <= height]

    def commit(
        self,
        reads: Mapping[str, int | None],
        ranges: Sequence[_RangeRead],
        writes: Mapping[str, bytes],
    ) -> str | None:
        """Validate and apply a transaction's read/write sets.

        Returns the new transaction id, or ``None`` for a read-only
        transaction (which is never validated and leaves no history).
        """
        if not writes:
            return None

        with self._lock:
            for key, version in reads.items():
                current = self._state.get(key)
                if (current.version if current is not None else None) != version:
                    raise MvccConflictError(f"Read conflict on key {key!r}", key=key)

            for read in ranges:
                observed = tuple((key, v.version) for key, v in _scan(self._state, read.start_key, read.end_key))
                if observed != read.observed:
                    raise MvccConflictError(f"Phantom read in range [{read.start_key!r}, {read.end_key!r})")

            height = self._height + 1
            timestamp = self._clock()
            tx_id = chain_tx_id(self._last_tx_id, height, timestamp, writes)
            for key, value in writes.items():
                self._state[key] = _Versioned(version=height, value=value)
                modification = KeyModification(tx_id=tx_id, timestamp=timestamp, is_delete=False, value=value)
                self._history.setdefault(key, []).append((height, modification))
            self._height = height
            self._last_tx_id = tx_id

        _logger.debug("Committed tx %s at height %d (%d writes)", tx_id, height, len(writes))
        return tx_id


class LedgerTransaction:
    """Single-use record store bound to one snapshot of an :class:`InMemoryLedger`.

    Usage::

        async with ledger.transaction() as tx:
            await tx.put_state("VEH1", b"...")
        # committed here; an exception inside the block discards instead
    """

    def __init__(
        self,
        ledger: InMemoryLedger,
        snapshot: Mapping[str, _Versioned],
        height: int,
    ) -> None:
        self._ledger = ledger
        self._snapshot = snapshot
        self._height = height
        self._reads: dict[str, int | None] = {}
        self._ranges: list[_RangeRead] = []
        self._writes: dict[str, bytes] = {}
        self._state = _TxState.OPEN
        self.tx_id: str | None = None

    @property
    def is_open(self) -> bool:
        return self._state is _TxState.OPEN

    @property
    def writes(self) -> Mapping[str, bytes]:
        """Buffered write set (read-only view)."""
        return MappingProxyType(self._writes)

    def _require_open(self) -> None:
        if self._state is not _TxState.OPEN:
            raise TransactionClosedError(f"Transaction already {self._state}")

    # ------------------------------------------------------------------
    # RecordStore
    # ------------------------------------------------------------------

    async def get_state(self, key: str) -> bytes | None:
        self._require_open()
        current = self._snapshot.get(key)
        self._reads.setdefault(key, current.version if current is not None else None)
        return current.value if current is not None else None

    async def put_state(self, key: str, value: bytes) -> None:
        self._require_open()
        if not key:
            raise InvalidKeyError("key must be non-empty")
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"value must be bytes, got {type(value).__name__}")
        if not value:
            raise ValueError(f"value for key {key!r} must be non-empty")
        self._writes[key] = bytes(value)

    async def get_state_by_range(self, start_key: str, end_key: str) -> list[tuple[str, bytes]]:
        self._require_open()
        rows = _scan(self._snapshot, start_key, end_key)
        self._ranges.append(
            _RangeRead(
                start_key=start_key,
                end_key=end_key,
                observed=tuple((key, v.version) for key, v in rows),
            )
        )
        return [(key, v.value) for key, v in rows]

    def create_composite_key(self, index_name: str, components: Sequence[str]) -> str:
        return create_composite_key(index_name, components)

    def split_composite_key(self, key: str) -> tuple[str, list[str]]:
        return split_composite_key(key)

    async def get_state_by_partial_composite_key(
        self,
        index_name: str,
        components: Sequence[str],
    ) -> list[tuple[str, bytes]]:
        start_key, end_key = partial_key_range(index_name, components)
        return await self.get_state_by_range(start_key, end_key)

    async def get_history_for_key(self, key: str) -> list[KeyModification]:
        self._require_open()
        return self._ledger.history_at(key, self._height)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def commit(self) -> str | None:
        self._require_open()
        try:
            self.tx_id = self._ledger.commit(self._reads, self._ranges, self._writes)
        except MvccConflictError:
            self._state = _TxState.DISCARDED
            raise
        self._state = _TxState.COMMITTED
        return self.tx_id

    def discard(self) -> None:
        if self._state is _TxState.OPEN:
            self._state = _TxState.DISCARDED
            self._writes.clear()

    async def __aenter__(self) -> LedgerTransaction:
        self._require_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None and self._state is _TxState.OPEN:
            await self.commit()
        else:
            self.discard()
