"""Vehicle status state machine.

::

    Active    --reportStolen-->   Stolen
    Stolen    --recoverVehicle--> Recovered
    Stolen    --reportStolen-->   Stolen      (report fields re-stamped)
    Recovered --reportStolen-->   Stolen

``Recovered`` never returns to ``Active``.  ``reportStolen`` is accepted
from every status unless ``LedgerConfig.reject_repeat_theft_report`` is set,
in which case a vehicle already ``Stolen`` is refused.
"""

from __future__ import annotations

from enum import StrEnum

from rtoledger.config import LedgerConfig
from rtoledger.exceptions import AlreadyStolenError, NotStolenError, VehicleStolenError
from rtoledger.models.vehicle import Vehicle, VehicleStatus


class LifecycleEvent(StrEnum):
    THEFT_REPORTED = "theftReported"
    RECOVERED = "recovered"


def next_status(vehicle: Vehicle, event: LifecycleEvent, config: LedgerConfig) -> VehicleStatus:
    """Status *vehicle* moves to on *event*, or raise if the move is refused."""
    if event is LifecycleEvent.THEFT_REPORTED:
        if config.reject_repeat_theft_report and vehicle.status is VehicleStatus.STOLEN:
            raise AlreadyStolenError(vehicle.vehicle_id)
        return VehicleStatus.STOLEN

    if event is LifecycleEvent.RECOVERED:
        if vehicle.status is not VehicleStatus.STOLEN:
            raise NotStolenError(vehicle.vehicle_id)
        return VehicleStatus.RECOVERED

    raise ValueError(f"Unhandled lifecycle event {event!r}")


def ensure_record_change_allowed(vehicle: Vehicle, config: LedgerConfig, *, operation: str) -> None:
    """Guard for transfers and certificate/detail updates.

    These are independent of status unless ``freeze_stolen_vehicles`` is set.
    """
    if config.freeze_stolen_vehicles and vehicle.is_stolen:
        raise VehicleStolenError(vehicle.vehicle_id, operation=operation)
