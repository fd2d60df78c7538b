"""Data models for ledger records."""

from rtoledger.models._base import LedgerBaseModel, LedgerEnum, format_ledger_timestamp
from rtoledger.models.history import HistoryEntry, VerificationResult
from rtoledger.models.vehicle import (
    CertificateStatus,
    CertificateUpdate,
    RecoveryRecord,
    TheftReport,
    TransferRecord,
    Vehicle,
    VehicleStatus,
)

__all__ = [
    "CertificateStatus",
    "CertificateUpdate",
    "HistoryEntry",
    "LedgerBaseModel",
    "LedgerEnum",
    "RecoveryRecord",
    "TheftReport",
    "TransferRecord",
    "Vehicle",
    "VehicleStatus",
    "VerificationResult",
    "format_ledger_timestamp",
]
