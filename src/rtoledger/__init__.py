"""rtoledger - Vehicle registration records on an append-only ledger."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rtoledger")
except PackageNotFoundError:
    __version__ = "0+local"
from rtoledger.client import OPERATION_NAMES, RtoLedgerClient
from rtoledger.config import LedgerConfig
from rtoledger.contract import VehicleRegistry
from rtoledger.exceptions import (
    AlreadyStolenError,
    ConfigError,
    DuplicateChassisError,
    DuplicateRegistrationError,
    DuplicateVehicleIdError,
    ErrorKind,
    InvalidArgumentError,
    InvalidInsuranceError,
    InvalidKeyError,
    InvalidPollutionError,
    MvccConflictError,
    NotStolenError,
    RecordDecodeError,
    RegistrationError,
    RtoLedgerError,
    StatusTransitionError,
    StoreError,
    TransactionClosedError,
    UnknownOperationError,
    VehicleNotFoundError,
    VehicleStolenError,
)
from rtoledger.index import IndexName
from rtoledger.models import (
    CertificateStatus,
    CertificateUpdate,
    HistoryEntry,
    RecoveryRecord,
    TheftReport,
    TransferRecord,
    Vehicle,
    VehicleStatus,
    VerificationResult,
)
from rtoledger.store import InMemoryLedger, KeyModification, LedgerTransaction, RecordStore

__all__ = [
    "__version__",
    "AlreadyStolenError",
    "CertificateStatus",
    "CertificateUpdate",
    "ConfigError",
    "DuplicateChassisError",
    "DuplicateRegistrationError",
    "DuplicateVehicleIdError",
    "ErrorKind",
    "HistoryEntry",
    "InMemoryLedger",
    "IndexName",
    "InvalidArgumentError",
    "InvalidInsuranceError",
    "InvalidKeyError",
    "InvalidPollutionError",
    "KeyModification",
    "LedgerConfig",
    "LedgerTransaction",
    "MvccConflictError",
    "NotStolenError",
    "OPERATION_NAMES",
    "RecordDecodeError",
    "RecordStore",
    "RecoveryRecord",
    "RegistrationError",
    "RtoLedgerClient",
    "RtoLedgerError",
    "StatusTransitionError",
    "StoreError",
    "TheftReport",
    "TransactionClosedError",
    "TransferRecord",
    "UnknownOperationError",
    "Vehicle",
    "VehicleNotFoundError",
    "VehicleRegistry",
    "VehicleStatus",
    "VehicleStolenError",
    "VerificationResult",
]
