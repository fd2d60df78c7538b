"""History and verification result models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rtoledger.models._base import LedgerBaseModel, format_ledger_timestamp
from rtoledger.models.vehicle import Vehicle


class HistoryEntry(LedgerBaseModel):
    """One committed mutation of a vehicle record, as delivered by the store."""

    tx_id: str
    timestamp: datetime
    is_delete: bool = False
    value: Vehicle | None = None
    """Full record snapshot after the transaction; ``None`` for deletions."""

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            "txId": self.tx_id,
            "timestamp": format_ledger_timestamp(self.timestamp),
            "isDelete": self.is_delete,
        }
        if not self.is_delete and self.value is not None:
            wire["value"] = self.value.to_wire()
        return wire


class VerificationResult(LedgerBaseModel):
    """Outcome of checking claimed chassis/engine numbers against the ledger."""

    verified: bool
    message: str

    def to_wire(self) -> dict[str, Any]:
        return {"verified": self.verified, "message": self.message}
