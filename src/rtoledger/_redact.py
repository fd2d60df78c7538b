"""Helpers for safe logging of vehicle records.

Vehicle records carry the owner's national identity reference (Aadhar).
This module masks those fields before records are emitted to logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_IDENTITY_KEYS: frozenset[str] = frozenset(
    {
        "owneraadhar",
        "newowneraadhar",
        "owner_aadhar",
        "new_owner_aadhar",
        "aadhar",
    }
)

_VISIBLE_SUFFIX = 4
_MAX_DEPTH = 20


def mask_identity(value: str) -> str:
    """Mask all but the last four characters of an identity reference."""
    if len(value) <= _VISIBLE_SUFFIX:
        return "*" * len(value)
    return "*" * (len(value) - _VISIBLE_SUFFIX) + value[-_VISIBLE_SUFFIX:]


def _is_identity_key(key: str) -> bool:
    return key.lower() in _IDENTITY_KEYS


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for logs.

    Ledger models are redacted through their wire form, so a
    :class:`~rtoledger.models.vehicle.Vehicle` can be passed as is.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        # Raw world-state values; the sentinel of an index entry is one byte.
        return f"<bytes:{len(value)}b>"

    to_wire = getattr(value, "to_wire", None)
    if callable(to_wire):
        return redact_for_log(to_wire(), max_string=max_string, _depth=_depth + 1)

    if isinstance(value, Mapping):
        return {
            str(k): (
                mask_identity(v)
                if _is_identity_key(str(k)) and isinstance(v, str)
                else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            )
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
