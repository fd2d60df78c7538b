"""Read-side operations: point lookup, index queries, full scan, history."""

from __future__ import annotations

import logging

from rtoledger.exceptions import VehicleNotFoundError
from rtoledger.index import IndexName, lookup_by_index
from rtoledger.models.history import HistoryEntry, VerificationResult
from rtoledger.models.vehicle import Vehicle
from rtoledger.store.base import RecordStore
from rtoledger.store.composite import is_composite_key

_logger = logging.getLogger(__name__)


async def get_vehicle(store: RecordStore, vehicle_id: str) -> Vehicle:
    raw = await store.get_state(vehicle_id)
    if not raw:
        raise VehicleNotFoundError(vehicle_id)
    return Vehicle.from_bytes(raw)


async def query_by_registration_number(store: RecordStore, registration_number: str) -> list[Vehicle]:
    return await lookup_by_index(store, IndexName.REGISTRATION, registration_number)


async def query_by_chassis_number(store: RecordStore, chassis_number: str) -> list[Vehicle]:
    return await lookup_by_index(store, IndexName.CHASSIS, chassis_number)


async def query_all_vehicles(store: RecordStore) -> list[Vehicle]:
    """Every vehicle on the ledger, in the store's key order.

    The scan covers the whole key space; index entries are recognised by
    the composite-key marker and skipped.
    """
    vehicles: list[Vehicle] = []
    for key, raw in await store.get_state_by_range("", ""):
        if is_composite_key(key) or not raw:
            continue
        vehicles.append(Vehicle.from_bytes(raw))
    return vehicles


async def get_vehicle_history(store: RecordStore, vehicle_id: str) -> list[HistoryEntry]:
    """Committed versions of a vehicle record, in the order the store delivers them."""
    if not await store.get_state(vehicle_id):
        raise VehicleNotFoundError(vehicle_id)

    entries: list[HistoryEntry] = []
    for modification in await store.get_history_for_key(vehicle_id):
        value: Vehicle | None = None
        if not modification.is_delete and modification.value:
            value = Vehicle.from_bytes(modification.value)
        entries.append(
            HistoryEntry(
                tx_id=modification.tx_id,
                timestamp=modification.timestamp,
                is_delete=modification.is_delete,
                value=value,
            )
        )
    _logger.debug("History for %s: %d entries", vehicle_id, len(entries))
    return entries


async def verify_vehicle_information(
    store: RecordStore,
    vehicle_id: str,
    chassis_number: str,
    engine_number: str,
) -> VerificationResult:
    """Check claimed chassis and engine numbers against the ledger record.

    An unknown vehicle is reported as unverified, not as an error.
    """
    raw = await store.get_state(vehicle_id)
    if not raw:
        return VerificationResult(verified=False, message=f"Vehicle with ID {vehicle_id} does not exist")

    vehicle = Vehicle.from_bytes(raw)
    mismatched: list[str] = []
    if vehicle.chassis_number != chassis_number:
        mismatched.append("chassis number")
    if vehicle.engine_number != engine_number:
        mismatched.append("engine number")

    if mismatched:
        verb = "do" if len(mismatched) > 1 else "does"
        return VerificationResult(
            verified=False,
            message=f"Vehicle {vehicle_id}: {' and '.join(mismatched)} {verb} not match the ledger record",
        )
    return VerificationResult(verified=True, message=f"Vehicle {vehicle_id} information verified")
