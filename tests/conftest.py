from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from rtoledger.client import RtoLedgerClient
from rtoledger.config import LedgerConfig
from rtoledger.models.vehicle import Vehicle
from rtoledger.store.memory import InMemoryLedger

FIXED_NOW = datetime(2026, 1, 15, 10, 30, tzinfo=UTC)
FIXED_DATE = "2026-01-15"


def _fixed_clock() -> datetime:
    return FIXED_NOW


def vehicle_args(**overrides: str) -> dict[str, str]:
    args = {
        "vehicle_id": "VEH2001",
        "make": "Maruti",
        "model": "Swift",
        "year": "2024",
        "color": "Red",
        "registration_number": "MH12AB0001",
        "chassis_number": "CH001",
        "engine_number": "EN001",
        "owner_name": "Ravi Kumar",
        "owner_aadhar": "1234-5678-9012",
        "insurance_status": "Valid",
        "insurance_expiry": "2027-01-14",
        "pollution_certificate": "Valid",
        "pollution_expiry": "2026-07-14",
        "document_hash": "QmRegistrationDocs",
    }
    args.update(overrides)
    return args


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger(clock=_fixed_clock)


@pytest.fixture
def config() -> LedgerConfig:
    return LedgerConfig()


@pytest.fixture
def client(ledger: InMemoryLedger, config: LedgerConfig) -> RtoLedgerClient:
    return RtoLedgerClient(ledger, config=config, clock=_fixed_clock)


@pytest.fixture
def register(client: RtoLedgerClient) -> Callable[..., Awaitable[Vehicle]]:
    """Register a vehicle in its own committed transaction."""

    async def _register(**overrides: Any) -> Vehicle:
        async with client.registry() as registry:
            return await registry.register_vehicle(**vehicle_args(**overrides))

    return _register
