"""Pydantic request models for registry operations.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by :class:`rtoledger.contract.VehicleRegistry`
so that malformed arguments never reach the store.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from rtoledger.exceptions import InvalidArgumentError
from rtoledger.models.vehicle import CertificateStatus
from rtoledger.store.composite import COMPOSITE_KEY_NAMESPACE, MAX_UNICODE_RUNE

TRequest = TypeVar("TRequest", bound=BaseModel)

# "~" separates the parts of an index name such as "chassis~vehicleId".
_RESERVED_ID_CHARS = (COMPOSITE_KEY_NAMESPACE, MAX_UNICODE_RUNE, "~")


def _parse_certificate_status(value: str) -> CertificateStatus:
    status = CertificateStatus(value)
    if status is CertificateStatus.UNKNOWN:
        allowed = ", ".join(s.value for s in CertificateStatus if s is not CertificateStatus.UNKNOWN)
        raise ValueError(f"certificate status must be one of {allowed}, got {value!r}")
    return status


def validate_request(model_cls: type[TRequest], **kwargs: Any) -> TRequest:
    """Build *model_cls*, mapping pydantic failures to :class:`InvalidArgumentError`."""
    try:
        return model_cls(**kwargs)
    except ValidationError as exc:
        vehicle_id = kwargs.get("vehicle_id")
        raise InvalidArgumentError(
            f"Invalid arguments for {model_cls.__name__}: {exc}",
            vehicle_id=vehicle_id if isinstance(vehicle_id, str) else "",
        ) from exc


class VehicleIdRequest(BaseModel):
    """Request containing a vehicle ID."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    vehicle_id: str

    @field_validator("vehicle_id")
    @classmethod
    def _vehicle_id_valid(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        # Scans tell primary records from index entries by these markers.
        if any(char in vehicle_id for char in _RESERVED_ID_CHARS):
            raise ValueError("vehicle_id must not contain reserved composite-key characters")
        return vehicle_id


class RegisterVehicleRequest(VehicleIdRequest):
    make: str
    model: str
    year: str
    color: str
    registration_number: str
    chassis_number: str
    engine_number: str
    owner_name: str
    owner_aadhar: str
    insurance_status: str
    """Kept as the raw string; the validation engine checks it."""
    insurance_expiry: str
    pollution_certificate: str
    pollution_expiry: str
    document_hash: str = ""


class TransferOwnershipRequest(VehicleIdRequest):
    new_owner_name: str
    new_owner_aadhar: str
    transfer_document_hash: str = ""


class CertificateUpdateRequest(VehicleIdRequest):
    status: CertificateStatus
    expiry: str
    document_hash: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value: Any) -> CertificateStatus:
        return _parse_certificate_status(str(value))


class VehicleInfoUpdateRequest(VehicleIdRequest):
    """Partial details update; empty strings mean "unchanged"."""

    color: str = ""
    insurance_status: str = ""
    insurance_expiry: str = ""
    pollution_certificate: str = ""
    pollution_expiry: str = ""
    document_hash: str = ""

    @field_validator("insurance_status", "pollution_certificate")
    @classmethod
    def _known_status_or_blank(cls, value: str) -> str:
        if value:
            _parse_certificate_status(value)
        return value


class TheftReportRequest(VehicleIdRequest):
    reporting_authority: str
    case_number: str


class RecoveryRequest(VehicleIdRequest):
    recovery_authority: str
    recovery_notes: str = ""


class VerifyVehicleRequest(VehicleIdRequest):
    chassis_number: str
    engine_number: str
