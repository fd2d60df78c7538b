"""Ledger policy configuration for rtoledger."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rtoledger.exceptions import ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


_ENV_BOOL_FIELDS: dict[str, str] = {
    "RTO_UNIQUE_REGISTRATION_NUMBER": "unique_registration_number",
    "RTO_REJECT_REPEAT_THEFT_REPORT": "reject_repeat_theft_report",
    "RTO_FREEZE_STOLEN_VEHICLES": "freeze_stolen_vehicles",
}


@dataclasses.dataclass(frozen=True)
class LedgerConfig:
    """Registry policy switches.

    The defaults reproduce the behaviour of the registry as it was first
    deployed; each switch tightens one rule.

    Parameters
    ----------
    unique_registration_number : bool
        Refuse a registration whose registration number is already carried
        by another vehicle.  Off by default: only chassis numbers are unique.
    reject_repeat_theft_report : bool
        Refuse ``reportStolen`` on a vehicle already marked stolen instead
        of re-stamping the report fields.
    freeze_stolen_vehicles : bool
        Refuse ownership transfers and certificate updates while a vehicle
        is marked stolen.
    time_zone : str
        IANA time zone used to derive invocation dates
        (``registrationDate``, ``transferDate`` ...).
    """

    unique_registration_number: bool = False
    reject_repeat_theft_report: bool = False
    freeze_stolen_vehicles: bool = False
    time_zone: str = "UTC"

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown time zone {self.time_zone!r}") from exc

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)

    @classmethod
    def from_env(cls, **overrides: Any) -> LedgerConfig:
        """Create configuration from ``RTO_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        for env_key, field_name in _ENV_BOOL_FIELDS.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), False)

        tz_env = env.get("RTO_TIME_ZONE")
        if tz_env is not None and "time_zone" not in overrides:
            config_kwargs["time_zone"] = tz_env.strip()

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
