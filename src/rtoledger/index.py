"""Secondary indexes over vehicle records.

Each index entry is a composite key ``(index name, value, vehicle id)``
holding a one-byte sentinel; existence is the whole payload.  Lookups scan
the ``(index name, value)`` prefix and load the primary record of every
vehicle id found.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from rtoledger.models.vehicle import Vehicle
from rtoledger.store.base import RecordStore

_logger = logging.getLogger(__name__)

INDEX_SENTINEL = b"\x00"


class IndexName(StrEnum):
    REGISTRATION = "registration~vehicleId"
    CHASSIS = "chassis~vehicleId"


async def create_index(store: RecordStore, index_name: IndexName, value: str, vehicle_id: str) -> str:
    """Write the index entry for *vehicle_id* and return its key."""
    key = store.create_composite_key(index_name, [value, vehicle_id])
    await store.put_state(key, INDEX_SENTINEL)
    return key


async def create_vehicle_indexes(store: RecordStore, vehicle: Vehicle) -> None:
    await create_index(store, IndexName.REGISTRATION, vehicle.registration_number, vehicle.vehicle_id)
    await create_index(store, IndexName.CHASSIS, vehicle.chassis_number, vehicle.vehicle_id)


async def lookup_by_index(store: RecordStore, index_name: IndexName, value: str) -> list[Vehicle]:
    """Vehicles indexed under *value*, in index-traversal order.

    Entries whose primary record is missing are skipped.
    """
    results: list[Vehicle] = []
    for key, _ in await store.get_state_by_partial_composite_key(index_name, [value]):
        _, components = store.split_composite_key(key)
        vehicle_id = components[-1]
        raw = await store.get_state(vehicle_id)
        if not raw:
            _logger.warning("Index %s entry %r points at missing vehicle %s", index_name, value, vehicle_id)
            continue
        results.append(Vehicle.from_bytes(raw))
    _logger.debug("Index %s lookup %r matched %d vehicle(s)", index_name, value, len(results))
    return results
