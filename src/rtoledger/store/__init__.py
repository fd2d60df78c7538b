"""Record store layer.

The registry consumes the :class:`RecordStore` protocol; the in-memory
ledger is the reference implementation of that contract.
"""

from rtoledger.store.base import KeyModification, RecordStore
from rtoledger.store.composite import (
    COMPOSITE_KEY_NAMESPACE,
    create_composite_key,
    is_composite_key,
    split_composite_key,
)
from rtoledger.store.memory import GENESIS_TX_ID, InMemoryLedger, LedgerTransaction

__all__ = [
    "COMPOSITE_KEY_NAMESPACE",
    "GENESIS_TX_ID",
    "InMemoryLedger",
    "KeyModification",
    "LedgerTransaction",
    "RecordStore",
    "create_composite_key",
    "is_composite_key",
    "split_composite_key",
]
