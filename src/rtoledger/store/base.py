"""Record store contract consumed by the registry.

The registry never talks to a ledger platform directly.  Each invocation
receives an object satisfying :class:`RecordStore`, bound to a single
transaction of the underlying platform, which guarantees:

* every read in the invocation observes one consistent snapshot;
* writes are buffered and become visible atomically at commit, and are
  *not* visible to reads made earlier in the same invocation;
* conflicting concurrent invocations are resolved by the platform (one
  commits, the others abort with no effect).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class KeyModification:
    """One committed write to a key, as kept in the key's history."""

    tx_id: str
    timestamp: datetime
    is_delete: bool
    value: bytes | None


class RecordStore(Protocol):
    async def get_state(self, key: str) -> bytes | None: ...

    async def put_state(self, key: str, value: bytes) -> None: ...

    async def get_state_by_range(self, start_key: str, end_key: str) -> list[tuple[str, bytes]]:
        """Key-ordered ``[start_key, end_key)``; empty bounds are open."""
        ...

    def create_composite_key(self, index_name: str, components: Sequence[str]) -> str: ...

    def split_composite_key(self, key: str) -> tuple[str, list[str]]: ...

    async def get_state_by_partial_composite_key(
        self,
        index_name: str,
        components: Sequence[str],
    ) -> list[tuple[str, bytes]]: ...

    async def get_history_for_key(self, key: str) -> list[KeyModification]:
        """Committed modifications of *key*, newest first."""
        ...
