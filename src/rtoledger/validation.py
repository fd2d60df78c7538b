"""Registration preconditions.

Checks run in a fixed order and only read from the store; the first
failure aborts the registration before anything is written.
"""

from __future__ import annotations

from rtoledger.config import LedgerConfig
from rtoledger.exceptions import (
    DuplicateChassisError,
    DuplicateRegistrationError,
    DuplicateVehicleIdError,
    InvalidInsuranceError,
    InvalidPollutionError,
)
from rtoledger.index import IndexName, lookup_by_index
from rtoledger.models.requests import RegisterVehicleRequest
from rtoledger.models.vehicle import CertificateStatus
from rtoledger.store.base import RecordStore


async def vehicle_exists(store: RecordStore, vehicle_id: str) -> bool:
    raw = await store.get_state(vehicle_id)
    return bool(raw)


async def validate_registration(
    store: RecordStore,
    request: RegisterVehicleRequest,
    config: LedgerConfig,
) -> None:
    """Raise the first failed registration precondition.

    1. vehicle id unused
    2. chassis number unused
    3. registration number unused (only with ``unique_registration_number``)
    4. insurance exactly ``"Valid"``
    5. pollution certificate exactly ``"Valid"``
    """
    vehicle_id = request.vehicle_id
    if await vehicle_exists(store, vehicle_id):
        raise DuplicateVehicleIdError(vehicle_id)

    if await lookup_by_index(store, IndexName.CHASSIS, request.chassis_number):
        raise DuplicateChassisError(request.chassis_number, vehicle_id=vehicle_id)

    if config.unique_registration_number and await lookup_by_index(
        store, IndexName.REGISTRATION, request.registration_number
    ):
        raise DuplicateRegistrationError(request.registration_number, vehicle_id=vehicle_id)

    # Canonical spelling only; "valid" or " Valid" do not qualify.
    if request.insurance_status != CertificateStatus.VALID.value:
        raise InvalidInsuranceError(vehicle_id=vehicle_id)

    if request.pollution_certificate != CertificateStatus.VALID.value:
        raise InvalidPollutionError(vehicle_id=vehicle_id)
