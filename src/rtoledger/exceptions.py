"""Custom exception hierarchy for rtoledger."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure categories callers can branch on without parsing messages."""

    NOT_FOUND = "NotFound"
    DUPLICATE_ID = "DuplicateId"
    DUPLICATE_CHASSIS = "DuplicateChassis"
    DUPLICATE_REGISTRATION = "DuplicateRegistration"
    INVALID_INSURANCE = "InvalidInsurance"
    INVALID_POLLUTION = "InvalidPollution"
    NOT_STOLEN = "NotStolen"
    ALREADY_STOLEN = "AlreadyStolen"
    VEHICLE_STOLEN = "VehicleStolen"
    INVALID_ARGUMENT = "InvalidArgument"
    UNKNOWN_OPERATION = "UnknownOperation"
    INVALID_KEY = "InvalidKey"
    CORRUPT_RECORD = "CorruptRecord"
    MVCC_CONFLICT = "MvccConflict"
    TRANSACTION_CLOSED = "TransactionClosed"
    CONFIG = "Config"


class RtoLedgerError(Exception):
    """Base exception for all rtoledger errors."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, *, vehicle_id: str = "") -> None:
        self.vehicle_id = vehicle_id
        super().__init__(message)


class ConfigError(RtoLedgerError):
    """Invalid or missing configuration."""

    kind = ErrorKind.CONFIG


class InvalidArgumentError(RtoLedgerError):
    """Operation arguments failed validation before reaching the store."""

    kind = ErrorKind.INVALID_ARGUMENT


class UnknownOperationError(InvalidArgumentError):
    """The invocation named an operation the registry does not define."""

    kind = ErrorKind.UNKNOWN_OPERATION

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Unknown operation {operation!r}")


class VehicleNotFoundError(RtoLedgerError):
    """The referenced vehicle is not on the ledger."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, vehicle_id: str) -> None:
        super().__init__(f"Vehicle with ID {vehicle_id} does not exist", vehicle_id=vehicle_id)


class RegistrationError(RtoLedgerError):
    """A registration precondition failed."""


class DuplicateVehicleIdError(RegistrationError):
    kind = ErrorKind.DUPLICATE_ID

    def __init__(self, vehicle_id: str) -> None:
        super().__init__(f"Vehicle with ID {vehicle_id} already exists", vehicle_id=vehicle_id)


class DuplicateChassisError(RegistrationError):
    kind = ErrorKind.DUPLICATE_CHASSIS

    def __init__(self, chassis_number: str, *, vehicle_id: str = "") -> None:
        self.chassis_number = chassis_number
        super().__init__(
            f"Vehicle with chassis number {chassis_number} already registered",
            vehicle_id=vehicle_id,
        )


class DuplicateRegistrationError(RegistrationError):
    """Registration number already carried by another vehicle.

    Only raised when ``LedgerConfig.unique_registration_number`` is enabled.
    """

    kind = ErrorKind.DUPLICATE_REGISTRATION

    def __init__(self, registration_number: str, *, vehicle_id: str = "") -> None:
        self.registration_number = registration_number
        super().__init__(
            f"Vehicle with registration number {registration_number} already registered",
            vehicle_id=vehicle_id,
        )


class InvalidInsuranceError(RegistrationError):
    kind = ErrorKind.INVALID_INSURANCE

    def __init__(self, *, vehicle_id: str = "") -> None:
        super().__init__("Valid insurance is required for vehicle registration", vehicle_id=vehicle_id)


class InvalidPollutionError(RegistrationError):
    kind = ErrorKind.INVALID_POLLUTION

    def __init__(self, *, vehicle_id: str = "") -> None:
        super().__init__(
            "Valid pollution certificate is required for vehicle registration",
            vehicle_id=vehicle_id,
        )


class StatusTransitionError(RtoLedgerError):
    """A theft/recovery operation is not allowed from the current status."""


class NotStolenError(StatusTransitionError):
    kind = ErrorKind.NOT_STOLEN

    def __init__(self, vehicle_id: str) -> None:
        super().__init__(f"Vehicle {vehicle_id} is not marked as stolen", vehicle_id=vehicle_id)


class AlreadyStolenError(StatusTransitionError):
    """Repeat theft report while ``reject_repeat_theft_report`` is enabled."""

    kind = ErrorKind.ALREADY_STOLEN

    def __init__(self, vehicle_id: str) -> None:
        super().__init__(f"Vehicle {vehicle_id} is already reported as stolen", vehicle_id=vehicle_id)


class VehicleStolenError(StatusTransitionError):
    """Record change refused while ``freeze_stolen_vehicles`` is enabled."""

    kind = ErrorKind.VEHICLE_STOLEN

    def __init__(self, vehicle_id: str, *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(
            f"Vehicle {vehicle_id} is reported stolen; {operation or 'update'} is not permitted",
            vehicle_id=vehicle_id,
        )


class RecordDecodeError(RtoLedgerError):
    """A stored value could not be decoded as a vehicle record."""

    kind = ErrorKind.CORRUPT_RECORD


class StoreError(RtoLedgerError):
    """Failure reported by the record store."""


class InvalidKeyError(StoreError):
    """A key or composite-key component uses reserved characters."""

    kind = ErrorKind.INVALID_KEY


class MvccConflictError(StoreError):
    """Commit rejected: something this transaction read was changed concurrently.

    The transaction had no effect. Callers that want retry-on-conflict must
    re-invoke the whole operation.
    """

    kind = ErrorKind.MVCC_CONFLICT

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class TransactionClosedError(StoreError):
    """Transaction used after commit or discard."""

    kind = ErrorKind.TRANSACTION_CLOSED
