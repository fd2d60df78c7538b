"""Tests for the in-memory reference ledger (snapshot, buffering, MVCC, history)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from rtoledger.exceptions import InvalidKeyError, MvccConflictError, TransactionClosedError
from rtoledger.store.memory import GENESIS_TX_ID, InMemoryLedger


class _TickingClock:
    def __init__(self) -> None:
        self._now = datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


async def _put(ledger: InMemoryLedger, key: str, value: bytes) -> str | None:
    async with ledger.transaction() as tx:
        await tx.put_state(key, value)
    return tx.tx_id


@pytest.mark.asyncio
async def test_writes_are_buffered_until_commit(ledger: InMemoryLedger) -> None:
    tx = ledger.transaction()
    await tx.put_state("VEH1", b"one")

    # Own writes are not visible to reads in the same transaction.
    assert await tx.get_state("VEH1") is None
    assert ledger.height == 0

    await tx.commit()

    reader = ledger.transaction()
    assert await reader.get_state("VEH1") == b"one"
    assert ledger.height == 1


@pytest.mark.asyncio
async def test_exception_in_block_discards_writes(ledger: InMemoryLedger) -> None:
    with pytest.raises(RuntimeError):
        async with ledger.transaction() as tx:
            await tx.put_state("VEH1", b"one")
            raise RuntimeError("boom")

    reader = ledger.transaction()
    assert await reader.get_state("VEH1") is None
    assert ledger.height == 0


@pytest.mark.asyncio
async def test_snapshot_isolated_from_later_commits(ledger: InMemoryLedger) -> None:
    await _put(ledger, "VEH1", b"v1")
    reader = ledger.transaction()

    await _put(ledger, "VEH1", b"v2")

    assert await reader.get_state("VEH1") == b"v1"
    assert [key for key, _ in await reader.get_state_by_range("", "")] == ["VEH1"]


@pytest.mark.asyncio
async def test_conflicting_writers_one_commits_other_aborts(ledger: InMemoryLedger) -> None:
    await _put(ledger, "VEH1", b"v1")

    first = ledger.transaction()
    second = ledger.transaction()
    assert await first.get_state("VEH1") == b"v1"
    assert await second.get_state("VEH1") == b"v1"
    await first.put_state("VEH1", b"first")
    await second.put_state("VEH1", b"second")

    await first.commit()
    with pytest.raises(MvccConflictError) as exc_info:
        await second.commit()

    assert exc_info.value.key == "VEH1"
    assert not second.is_open
    reader = ledger.transaction()
    assert await reader.get_state("VEH1") == b"first"


@pytest.mark.asyncio
async def test_absent_key_read_conflicts_with_concurrent_insert(ledger: InMemoryLedger) -> None:
    first = ledger.transaction()
    second = ledger.transaction()
    assert await first.get_state("VEH1") is None
    assert await second.get_state("VEH1") is None
    await first.put_state("VEH1", b"first")
    await second.put_state("VEH1", b"second")

    await first.commit()
    with pytest.raises(MvccConflictError):
        await second.commit()


@pytest.mark.asyncio
async def test_phantom_in_scanned_range_aborts_commit(ledger: InMemoryLedger) -> None:
    first = ledger.transaction()
    second = ledger.transaction()

    assert await first.get_state_by_partial_composite_key("chassis~vehicleId", ["CH001"]) == []
    assert await second.get_state_by_partial_composite_key("chassis~vehicleId", ["CH001"]) == []
    await first.put_state(first.create_composite_key("chassis~vehicleId", ["CH001", "VEH1"]), b"\x00")
    await second.put_state(second.create_composite_key("chassis~vehicleId", ["CH001", "VEH2"]), b"\x00")

    await first.commit()
    with pytest.raises(MvccConflictError):
        await second.commit()


@pytest.mark.asyncio
async def test_disjoint_writers_both_commit(ledger: InMemoryLedger) -> None:
    first = ledger.transaction()
    second = ledger.transaction()
    await first.get_state("VEH1")
    await second.get_state("VEH2")
    await first.put_state("VEH1", b"one")
    await second.put_state("VEH2", b"two")

    await first.commit()
    await second.commit()

    assert ledger.height == 2


@pytest.mark.asyncio
async def test_read_only_transaction_leaves_no_trace(ledger: InMemoryLedger) -> None:
    await _put(ledger, "VEH1", b"v1")
    tx = ledger.transaction()
    await tx.get_state("VEH1")

    assert await tx.commit() is None
    assert ledger.height == 1


@pytest.mark.asyncio
async def test_range_scan_is_key_ordered_and_bounded(ledger: InMemoryLedger) -> None:
    async with ledger.transaction() as tx:
        for key in ("VEH3", "VEH1", "VEH2"):
            await tx.put_state(key, key.encode())

    reader = ledger.transaction()
    assert [key for key, _ in await reader.get_state_by_range("", "")] == ["VEH1", "VEH2", "VEH3"]
    assert [key for key, _ in await reader.get_state_by_range("VEH2", "")] == ["VEH2", "VEH3"]
    assert [key for key, _ in await reader.get_state_by_range("", "VEH2")] == ["VEH1"]


@pytest.mark.asyncio
async def test_history_is_newest_first_with_chained_tx_ids() -> None:
    ledger = InMemoryLedger(clock=_TickingClock())
    first_id = await _put(ledger, "VEH1", b"v1")
    await _put(ledger, "OTHER", b"x")
    third_id = await _put(ledger, "VEH1", b"v2")

    reader = ledger.transaction()
    history = await reader.get_history_for_key("VEH1")

    assert [m.value for m in history] == [b"v2", b"v1"]
    assert [m.tx_id for m in history] == [third_id, first_id]
    assert history[0].timestamp > history[1].timestamp
    assert all(not m.is_delete for m in history)
    assert len({first_id, third_id, GENESIS_TX_ID}) == 3
    assert ledger.last_tx_id == third_id


@pytest.mark.asyncio
async def test_history_respects_snapshot_height(ledger: InMemoryLedger) -> None:
    await _put(ledger, "VEH1", b"v1")
    reader = ledger.transaction()
    await _put(ledger, "VEH1", b"v2")

    assert [m.value for m in await reader.get_history_for_key("VEH1")] == [b"v1"]


@pytest.mark.asyncio
async def test_closed_transaction_rejects_use(ledger: InMemoryLedger) -> None:
    tx = ledger.transaction()
    await tx.put_state("VEH1", b"one")
    await tx.commit()

    with pytest.raises(TransactionClosedError):
        await tx.get_state("VEH1")
    with pytest.raises(TransactionClosedError):
        await tx.commit()


@pytest.mark.asyncio
async def test_put_state_validates_key_and_value(ledger: InMemoryLedger) -> None:
    tx = ledger.transaction()
    with pytest.raises(InvalidKeyError):
        await tx.put_state("", b"x")
    with pytest.raises(ValueError):
        await tx.put_state("VEH1", b"")
    with pytest.raises(TypeError):
        await tx.put_state("VEH1", "not-bytes")  # type: ignore[arg-type]
