"""Composite-key codec for secondary indexes.

A composite key is laid out as::

    \\x00 <index name> \\x00 <component> \\x00 <component> \\x00 ...

The leading namespace byte keeps every index entry apart from primary
records, which never contain it.  ``U+10FFFF`` is reserved as the exclusive
upper bound of prefix scans.
"""

from __future__ import annotations

from collections.abc import Sequence

from rtoledger.exceptions import InvalidKeyError

COMPOSITE_KEY_NAMESPACE = "\x00"
MAX_UNICODE_RUNE = "\U0010ffff"


def _validate_part(value: str, what: str) -> None:
    if not isinstance(value, str):
        raise InvalidKeyError(f"{what} must be a string, got {type(value).__name__}")
    if COMPOSITE_KEY_NAMESPACE in value or MAX_UNICODE_RUNE in value:
        raise InvalidKeyError(f"{what} {value!r} contains a reserved composite-key character")


def is_composite_key(key: str) -> bool:
    return COMPOSITE_KEY_NAMESPACE in key


def create_composite_key(index_name: str, components: Sequence[str]) -> str:
    _validate_part(index_name, "index name")
    if not index_name:
        raise InvalidKeyError("index name must be non-empty")
    parts = [COMPOSITE_KEY_NAMESPACE, index_name, COMPOSITE_KEY_NAMESPACE]
    for component in components:
        _validate_part(component, "key component")
        parts.append(component)
        parts.append(COMPOSITE_KEY_NAMESPACE)
    return "".join(parts)


def split_composite_key(key: str) -> tuple[str, list[str]]:
    """Inverse of :func:`create_composite_key`."""
    if not key.startswith(COMPOSITE_KEY_NAMESPACE) or not key.endswith(COMPOSITE_KEY_NAMESPACE) or len(key) < 3:
        raise InvalidKeyError(f"{key!r} is not a composite key")
    parts = key[1:-1].split(COMPOSITE_KEY_NAMESPACE)
    return parts[0], parts[1:]


def partial_key_range(index_name: str, components: Sequence[str]) -> tuple[str, str]:
    """``[start, end)`` covering every key that extends the given prefix."""
    start = create_composite_key(index_name, components)
    return start, start + MAX_UNICODE_RUNE
