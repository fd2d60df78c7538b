"""Vehicle record model.

The ledger stores a vehicle as a flat JSON object whose keys are listed in
``_PHASE_WIRE_KEYS`` and on the :class:`Vehicle` fields.  In Python the
optional fields appended by later operations are grouped into one typed
sub-record per lifecycle phase (transfer, certificate updates, theft report,
recovery).  :meth:`Vehicle.from_wire` and :meth:`Vehicle.to_wire` convert
between the two shapes.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import Field, model_validator

from rtoledger.exceptions import RecordDecodeError
from rtoledger.models._base import LedgerBaseModel, LedgerEnum


class VehicleStatus(LedgerEnum):
    ACTIVE = "Active"
    STOLEN = "Stolen"
    RECOVERED = "Recovered"
    UNKNOWN = "Unknown"


class CertificateStatus(LedgerEnum):
    """Insurance / pollution-under-control certificate status."""

    VALID = "Valid"
    EXPIRED = "Expired"
    INVALID = "Invalid"
    PENDING = "Pending"
    UNKNOWN = "Unknown"


class TransferRecord(LedgerBaseModel):
    """Last ownership transfer."""

    document_hash: str = ""
    """Content-store hash of the transfer deed."""
    date: str = ""


class CertificateUpdate(LedgerBaseModel):
    """Last insurance or pollution certificate update."""

    document_hash: str = ""
    date: str = ""


class TheftReport(LedgerBaseModel):
    date: str = ""
    authority: str = ""
    case_number: str = ""


class RecoveryRecord(LedgerBaseModel):
    date: str = ""
    authority: str = ""
    notes: str = ""


# Lifecycle field -> {wire key: sub-record attribute}
_PHASE_WIRE_KEYS: dict[str, dict[str, str]] = {
    "transfer": {
        "transferDocumentIPFSHash": "document_hash",
        "transferDate": "date",
    },
    "insurance_update": {
        "insuranceDocumentIPFSHash": "document_hash",
        "insuranceUpdateDate": "date",
    },
    "pollution_update": {
        "pollutionDocumentIPFSHash": "document_hash",
        "pollutionUpdateDate": "date",
    },
    "theft_report": {
        "stolenReportDate": "date",
        "reportingAuthority": "authority",
        "caseNumber": "case_number",
    },
    "recovery": {
        "recoveryDate": "date",
        "recoveryAuthority": "authority",
        "recoveryNotes": "notes",
    },
}


class Vehicle(LedgerBaseModel):
    """Current state of a registered vehicle."""

    vehicle_id: str
    make: str
    model: str
    year: str
    color: str
    registration_number: str
    chassis_number: str
    engine_number: str
    owner_name: str
    owner_aadhar: str
    """National identity reference of the current owner."""
    registration_date: str
    """``YYYY-MM-DD``, set once at registration."""
    insurance_status: CertificateStatus
    insurance_expiry: str
    pollution_certificate: CertificateStatus
    pollution_expiry: str
    status: VehicleStatus = VehicleStatus.ACTIVE
    document_ipfs_hash: str = Field(default="", alias="documentIPFSHash")
    """Content-store hash of the registration documents."""

    transfer: TransferRecord | None = None
    insurance_update: CertificateUpdate | None = None
    pollution_update: CertificateUpdate | None = None
    theft_report: TheftReport | None = None
    recovery: RecoveryRecord | None = None

    @model_validator(mode="before")
    @classmethod
    def _nest_lifecycle_fields(cls, values: Any) -> Any:
        """Lift flat wire keys into their lifecycle sub-records."""
        if not isinstance(values, dict):
            return values
        working = dict(values)
        for phase, keys in _PHASE_WIRE_KEYS.items():
            nested = {attr: working.pop(wire_key) for wire_key, attr in keys.items() if wire_key in working}
            if nested and phase not in working:
                working[phase] = nested
        return working

    @property
    def is_stolen(self) -> bool:
        return self.status is VehicleStatus.STOLEN

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Vehicle:
        try:
            return cls.model_validate(data)
        except ValueError as exc:
            raise RecordDecodeError(f"Invalid vehicle record: {exc}", vehicle_id=str(data.get("vehicleId", ""))) from exc

    @classmethod
    def from_bytes(cls, raw: bytes) -> Vehicle:
        """Decode a record as stored on the ledger."""
        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            raise RecordDecodeError(f"Stored value is not a JSON document: {exc}") from exc
        if not isinstance(data, dict):
            raise RecordDecodeError("Stored value is not a JSON object")
        return cls.from_wire(data)

    def to_wire(self) -> dict[str, str]:
        """Flat camelCase object; lifecycle fields appear once set."""
        wire: dict[str, str] = self.model_dump(mode="json", by_alias=True, exclude=set(_PHASE_WIRE_KEYS))
        for phase, keys in _PHASE_WIRE_KEYS.items():
            record = getattr(self, phase)
            if record is None:
                continue
            for wire_key, attr in keys.items():
                wire[wire_key] = getattr(record, attr)
        return wire

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_wire(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    # ------------------------------------------------------------------
    # Updates (each returns a new snapshot; unrelated fields are kept)
    # ------------------------------------------------------------------

    def with_transfer(self, *, owner_name: str, owner_aadhar: str, transfer: TransferRecord) -> Vehicle:
        return self.model_copy(
            update={
                "owner_name": owner_name,
                "owner_aadhar": owner_aadhar,
                "transfer": transfer,
            }
        )

    def with_insurance(self, *, status: CertificateStatus, expiry: str, update: CertificateUpdate) -> Vehicle:
        return self.model_copy(
            update={
                "insurance_status": status,
                "insurance_expiry": expiry,
                "insurance_update": update,
            }
        )

    def with_pollution(self, *, status: CertificateStatus, expiry: str, update: CertificateUpdate) -> Vehicle:
        return self.model_copy(
            update={
                "pollution_certificate": status,
                "pollution_expiry": expiry,
                "pollution_update": update,
            }
        )

    def with_details(
        self,
        *,
        update_date: str,
        color: str | None = None,
        insurance_status: CertificateStatus | None = None,
        insurance_expiry: str | None = None,
        pollution_certificate: CertificateStatus | None = None,
        pollution_expiry: str | None = None,
        document_hash: str | None = None,
    ) -> Vehicle:
        """Apply a partial details update; ``None`` leaves a field unchanged.

        A change to either certificate stamps that certificate's update date.
        """
        changes: dict[str, Any] = {}
        if color is not None:
            changes["color"] = color
        if document_hash is not None:
            changes["document_ipfs_hash"] = document_hash

        if insurance_status is not None or insurance_expiry is not None:
            if insurance_status is not None:
                changes["insurance_status"] = insurance_status
            if insurance_expiry is not None:
                changes["insurance_expiry"] = insurance_expiry
            previous = self.insurance_update.document_hash if self.insurance_update else ""
            changes["insurance_update"] = CertificateUpdate(document_hash=previous, date=update_date)

        if pollution_certificate is not None or pollution_expiry is not None:
            if pollution_certificate is not None:
                changes["pollution_certificate"] = pollution_certificate
            if pollution_expiry is not None:
                changes["pollution_expiry"] = pollution_expiry
            previous = self.pollution_update.document_hash if self.pollution_update else ""
            changes["pollution_update"] = CertificateUpdate(document_hash=previous, date=update_date)

        return self.model_copy(update=changes)

    def with_theft_report(self, report: TheftReport, *, status: VehicleStatus) -> Vehicle:
        return self.model_copy(update={"status": status, "theft_report": report})

    def with_recovery(self, record: RecoveryRecord, *, status: VehicleStatus) -> Vehicle:
        return self.model_copy(update={"status": status, "recovery": record})
