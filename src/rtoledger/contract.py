"""Transaction handlers for the vehicle registry.

A :class:`VehicleRegistry` is bound to one :class:`RecordStore`, normally a
single ledger transaction, for the duration of one invocation.  Every
mutating handler re-reads the current record through that store, derives a
new snapshot with one of the ``Vehicle.with_*`` methods and writes it back;
the store turns the write into exactly one history entry at commit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from rtoledger import queries
from rtoledger._constants import DATE_FORMAT, SAMPLE_VEHICLES
from rtoledger._redact import redact_for_log
from rtoledger.config import LedgerConfig
from rtoledger.index import create_vehicle_indexes
from rtoledger.lifecycle import LifecycleEvent, ensure_record_change_allowed, next_status
from rtoledger.models.history import HistoryEntry, VerificationResult
from rtoledger.models.requests import (
    CertificateUpdateRequest,
    RecoveryRequest,
    RegisterVehicleRequest,
    TheftReportRequest,
    TransferOwnershipRequest,
    VehicleIdRequest,
    VehicleInfoUpdateRequest,
    VerifyVehicleRequest,
    validate_request,
)
from rtoledger.models.vehicle import (
    CertificateStatus,
    CertificateUpdate,
    RecoveryRecord,
    TheftReport,
    TransferRecord,
    Vehicle,
    VehicleStatus,
)
from rtoledger.store.base import RecordStore
from rtoledger.validation import validate_registration

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VehicleRegistry:
    """Registry operations over an injected record store."""

    def __init__(
        self,
        store: RecordStore,
        *,
        config: LedgerConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._config = config or LedgerConfig()
        self._clock = clock

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _today(self) -> str:
        """Invocation date in the configured time zone."""
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now.astimezone(self._config.tzinfo).strftime(DATE_FORMAT)

    async def _put_vehicle(self, vehicle: Vehicle) -> None:
        await self._store.put_state(vehicle.vehicle_id, vehicle.to_bytes())

    async def _load_for_update(self, vehicle_id: str, *, operation: str) -> Vehicle:
        vehicle = await queries.get_vehicle(self._store, vehicle_id)
        ensure_record_change_allowed(vehicle, self._config, operation=operation)
        return vehicle

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def init_ledger(self) -> None:
        """Seed the demonstration records and their index entries."""
        _logger.info("Initializing the vehicle registration ledger")
        for data in SAMPLE_VEHICLES:
            vehicle = Vehicle.from_wire(data)
            await self._put_vehicle(vehicle)
            await create_vehicle_indexes(self._store, vehicle)
            _logger.info("Vehicle %s initialized", vehicle.vehicle_id)

    async def register_vehicle(
        self,
        vehicle_id: str,
        make: str,
        model: str,
        year: str,
        color: str,
        registration_number: str,
        chassis_number: str,
        engine_number: str,
        owner_name: str,
        owner_aadhar: str,
        insurance_status: str,
        insurance_expiry: str,
        pollution_certificate: str,
        pollution_expiry: str,
        document_hash: str = "",
    ) -> Vehicle:
        request = validate_request(
            RegisterVehicleRequest,
            vehicle_id=vehicle_id,
            make=make,
            model=model,
            year=year,
            color=color,
            registration_number=registration_number,
            chassis_number=chassis_number,
            engine_number=engine_number,
            owner_name=owner_name,
            owner_aadhar=owner_aadhar,
            insurance_status=insurance_status,
            insurance_expiry=insurance_expiry,
            pollution_certificate=pollution_certificate,
            pollution_expiry=pollution_expiry,
            document_hash=document_hash,
        )
        _logger.debug("Starting registration for vehicle %s", request.vehicle_id)

        await validate_registration(self._store, request, self._config)

        vehicle = Vehicle(
            vehicle_id=request.vehicle_id,
            make=request.make,
            model=request.model,
            year=request.year,
            color=request.color,
            registration_number=request.registration_number,
            chassis_number=request.chassis_number,
            engine_number=request.engine_number,
            owner_name=request.owner_name,
            owner_aadhar=request.owner_aadhar,
            registration_date=self._today(),
            insurance_status=CertificateStatus.VALID,
            insurance_expiry=request.insurance_expiry,
            pollution_certificate=CertificateStatus.VALID,
            pollution_expiry=request.pollution_expiry,
            status=VehicleStatus.ACTIVE,
            document_ipfs_hash=request.document_hash,
        )
        await self._put_vehicle(vehicle)
        await create_vehicle_indexes(self._store, vehicle)

        _logger.info("Vehicle %s has been successfully registered", vehicle.vehicle_id)
        _logger.debug("Registered record: %s", redact_for_log(vehicle))
        return vehicle

    # ------------------------------------------------------------------
    # Ownership and certificates
    # ------------------------------------------------------------------

    async def transfer_ownership(
        self,
        vehicle_id: str,
        new_owner_name: str,
        new_owner_aadhar: str,
        transfer_document_hash: str = "",
    ) -> Vehicle:
        request = validate_request(
            TransferOwnershipRequest,
            vehicle_id=vehicle_id,
            new_owner_name=new_owner_name,
            new_owner_aadhar=new_owner_aadhar,
            transfer_document_hash=transfer_document_hash,
        )
        vehicle = await self._load_for_update(request.vehicle_id, operation="transferOwnership")
        updated = vehicle.with_transfer(
            owner_name=request.new_owner_name,
            owner_aadhar=request.new_owner_aadhar,
            transfer=TransferRecord(document_hash=request.transfer_document_hash, date=self._today()),
        )
        await self._put_vehicle(updated)
        _logger.info("Ownership of vehicle %s transferred to %s", updated.vehicle_id, updated.owner_name)
        return updated

    async def update_insurance(
        self,
        vehicle_id: str,
        status: str,
        expiry: str,
        document_hash: str = "",
    ) -> Vehicle:
        request = validate_request(
            CertificateUpdateRequest,
            vehicle_id=vehicle_id,
            status=status,
            expiry=expiry,
            document_hash=document_hash,
        )
        vehicle = await self._load_for_update(request.vehicle_id, operation="updateInsurance")
        updated = vehicle.with_insurance(
            status=request.status,
            expiry=request.expiry,
            update=CertificateUpdate(document_hash=request.document_hash, date=self._today()),
        )
        await self._put_vehicle(updated)
        _logger.info("Insurance updated for vehicle %s (%s)", updated.vehicle_id, updated.insurance_status)
        return updated

    async def update_pollution_certificate(
        self,
        vehicle_id: str,
        status: str,
        expiry: str,
        document_hash: str = "",
    ) -> Vehicle:
        request = validate_request(
            CertificateUpdateRequest,
            vehicle_id=vehicle_id,
            status=status,
            expiry=expiry,
            document_hash=document_hash,
        )
        vehicle = await self._load_for_update(request.vehicle_id, operation="updatePollutionCertificate")
        updated = vehicle.with_pollution(
            status=request.status,
            expiry=request.expiry,
            update=CertificateUpdate(document_hash=request.document_hash, date=self._today()),
        )
        await self._put_vehicle(updated)
        _logger.info(
            "Pollution certificate updated for vehicle %s (%s)",
            updated.vehicle_id,
            updated.pollution_certificate,
        )
        return updated

    async def update_vehicle_info(
        self,
        vehicle_id: str,
        color: str = "",
        insurance_status: str = "",
        insurance_expiry: str = "",
        pollution_certificate: str = "",
        pollution_expiry: str = "",
        document_hash: str = "",
    ) -> Vehicle:
        """Partial details update; blank arguments leave the field unchanged."""
        request = validate_request(
            VehicleInfoUpdateRequest,
            vehicle_id=vehicle_id,
            color=color,
            insurance_status=insurance_status,
            insurance_expiry=insurance_expiry,
            pollution_certificate=pollution_certificate,
            pollution_expiry=pollution_expiry,
            document_hash=document_hash,
        )
        vehicle = await self._load_for_update(request.vehicle_id, operation="updateVehicleInfo")
        updated = vehicle.with_details(
            update_date=self._today(),
            color=request.color or None,
            insurance_status=CertificateStatus(request.insurance_status) if request.insurance_status else None,
            insurance_expiry=request.insurance_expiry or None,
            pollution_certificate=(
                CertificateStatus(request.pollution_certificate) if request.pollution_certificate else None
            ),
            pollution_expiry=request.pollution_expiry or None,
            document_hash=request.document_hash or None,
        )
        await self._put_vehicle(updated)
        _logger.info("Vehicle information updated for %s", updated.vehicle_id)
        return updated

    # ------------------------------------------------------------------
    # Theft and recovery
    # ------------------------------------------------------------------

    async def report_stolen(self, vehicle_id: str, reporting_authority: str, case_number: str) -> Vehicle:
        request = validate_request(
            TheftReportRequest,
            vehicle_id=vehicle_id,
            reporting_authority=reporting_authority,
            case_number=case_number,
        )
        vehicle = await queries.get_vehicle(self._store, request.vehicle_id)
        status = next_status(vehicle, LifecycleEvent.THEFT_REPORTED, self._config)
        updated = vehicle.with_theft_report(
            TheftReport(
                date=self._today(),
                authority=request.reporting_authority,
                case_number=request.case_number,
            ),
            status=status,
        )
        await self._put_vehicle(updated)
        _logger.info("Vehicle %s reported as stolen (case %s)", updated.vehicle_id, request.case_number)
        return updated

    async def recover_vehicle(self, vehicle_id: str, recovery_authority: str, recovery_notes: str = "") -> Vehicle:
        request = validate_request(
            RecoveryRequest,
            vehicle_id=vehicle_id,
            recovery_authority=recovery_authority,
            recovery_notes=recovery_notes,
        )
        vehicle = await queries.get_vehicle(self._store, request.vehicle_id)
        status = next_status(vehicle, LifecycleEvent.RECOVERED, self._config)
        updated = vehicle.with_recovery(
            RecoveryRecord(
                date=self._today(),
                authority=request.recovery_authority,
                notes=request.recovery_notes,
            ),
            status=status,
        )
        await self._put_vehicle(updated)
        _logger.info("Vehicle %s recovered from stolen status", updated.vehicle_id)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_vehicle_details(self, vehicle_id: str) -> Vehicle:
        request = validate_request(VehicleIdRequest, vehicle_id=vehicle_id)
        return await queries.get_vehicle(self._store, request.vehicle_id)

    async def query_by_registration_number(self, registration_number: str) -> list[Vehicle]:
        return await queries.query_by_registration_number(self._store, registration_number)

    async def query_by_chassis_number(self, chassis_number: str) -> list[Vehicle]:
        return await queries.query_by_chassis_number(self._store, chassis_number)

    async def query_all_vehicles(self) -> list[Vehicle]:
        return await queries.query_all_vehicles(self._store)

    async def get_vehicle_history(self, vehicle_id: str) -> list[HistoryEntry]:
        request = validate_request(VehicleIdRequest, vehicle_id=vehicle_id)
        return await queries.get_vehicle_history(self._store, request.vehicle_id)

    async def verify_vehicle_information(
        self,
        vehicle_id: str,
        chassis_number: str,
        engine_number: str,
    ) -> VerificationResult:
        request = validate_request(
            VerifyVehicleRequest,
            vehicle_id=vehicle_id,
            chassis_number=chassis_number,
            engine_number=engine_number,
        )
        return await queries.verify_vehicle_information(
            self._store,
            request.vehicle_id,
            request.chassis_number,
            request.engine_number,
        )
