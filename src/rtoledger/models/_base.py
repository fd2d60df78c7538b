"""Base model and enum for ledger records.

Every ledger model inherits from :class:`LedgerBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase wire keys map
  automatically to snake_case fields.
* ``populate_by_name`` so handlers can build models with field names.
* Frozen instances: a record snapshot is never mutated in place, each
  update produces a new model via ``model_copy``.

Status enums inherit from :class:`LedgerEnum` which adds an ``UNKNOWN``
member and a ``_missing_`` hook that returns ``UNKNOWN`` for any value
without a mapped member.
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def format_ledger_timestamp(value: datetime) -> str:
    """Render a commit timestamp as ISO-8601 UTC with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LedgerEnum(enum.StrEnum):
    """Base for closed string enums stored on the ledger.

    Every subclass **must** define ``UNKNOWN``.  Values without a mapped
    member resolve to ``UNKNOWN`` instead of raising ``ValueError``, so a
    record written by an older registry still decodes.
    """

    @classmethod
    def _missing_(cls, value: object) -> LedgerEnum:
        # pylint: disable=no-member
        unknown: LedgerEnum = cls.UNKNOWN  # type: ignore[attr-defined]
        return unknown


class LedgerBaseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
