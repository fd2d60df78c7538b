"""Invocation gateway for the vehicle registry.

Maps named operations taking string arguments onto
:class:`rtoledger.contract.VehicleRegistry`, runs each invocation in its
own ledger transaction and returns the result as JSON text.
"""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from rtoledger._redact import redact_for_log
from rtoledger.config import LedgerConfig
from rtoledger.contract import VehicleRegistry
from rtoledger.exceptions import InvalidArgumentError, RtoLedgerError, UnknownOperationError
from rtoledger.models.history import HistoryEntry, VerificationResult
from rtoledger.models.vehicle import Vehicle
from rtoledger.store.memory import InMemoryLedger

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class _Operation:
    method: str
    params: tuple[str, ...]
    mutating: bool


_OPERATIONS: dict[str, _Operation] = {
    "initLedger": _Operation("init_ledger", (), True),
    "registerVehicle": _Operation(
        "register_vehicle",
        (
            "vehicleId",
            "make",
            "model",
            "year",
            "color",
            "registrationNumber",
            "chassisNumber",
            "engineNumber",
            "ownerName",
            "ownerAadhar",
            "insuranceStatus",
            "insuranceExpiry",
            "pollutionCertificate",
            "pollutionExpiry",
            "documentHash",
        ),
        True,
    ),
    "getVehicleDetails": _Operation("get_vehicle_details", ("vehicleId",), False),
    "queryByRegistrationNumber": _Operation("query_by_registration_number", ("registrationNumber",), False),
    "queryByChassisNumber": _Operation("query_by_chassis_number", ("chassisNumber",), False),
    "transferOwnership": _Operation(
        "transfer_ownership",
        ("vehicleId", "newOwnerName", "newOwnerAadhar", "transferDocumentHash"),
        True,
    ),
    "updateInsurance": _Operation("update_insurance", ("vehicleId", "status", "expiry", "documentHash"), True),
    "updatePollutionCertificate": _Operation(
        "update_pollution_certificate",
        ("vehicleId", "status", "expiry", "documentHash"),
        True,
    ),
    "updateVehicleInfo": _Operation(
        "update_vehicle_info",
        (
            "vehicleId",
            "color",
            "insuranceStatus",
            "insuranceExpiry",
            "pollutionCertificate",
            "pollutionExpiry",
            "documentHash",
        ),
        True,
    ),
    "getVehicleHistory": _Operation("get_vehicle_history", ("vehicleId",), False),
    "reportStolen": _Operation("report_stolen", ("vehicleId", "reportingAuthority", "caseNumber"), True),
    "recoverVehicle": _Operation("recover_vehicle", ("vehicleId", "recoveryAuthority", "recoveryNotes"), True),
    "queryAllVehicles": _Operation("query_all_vehicles", (), False),
    "verifyVehicleInformation": _Operation(
        "verify_vehicle_information",
        ("vehicleId", "chassisNumber", "engineNumber"),
        False,
    ),
}

OPERATION_NAMES: frozenset[str] = frozenset(_OPERATIONS)


def _to_wire(result: Any) -> Any:
    if isinstance(result, (Vehicle, HistoryEntry, VerificationResult)):
        return result.to_wire()
    if isinstance(result, list):
        return [_to_wire(item) for item in result]
    return result


def encode_result(result: Any) -> str:
    """JSON text returned to the caller; ``None`` becomes an empty string."""
    if result is None:
        return ""
    return json.dumps(_to_wire(result), separators=(",", ":"), ensure_ascii=False)


class RtoLedgerClient:
    """Run registry operations against a ledger, one transaction per call.

    Usage::

        client = RtoLedgerClient()
        await client.invoke("initLedger")
        details = json.loads(await client.invoke("getVehicleDetails", "VEH1001"))
    """

    def __init__(
        self,
        ledger: InMemoryLedger | None = None,
        *,
        config: LedgerConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ledger = ledger if ledger is not None else InMemoryLedger(clock=clock)
        self._config = config or LedgerConfig()
        self._clock = clock

    async def __aenter__(self) -> RtoLedgerClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the client.  The in-memory ledger keeps its state."""
        _logger.debug("Client closed at ledger height %d", self._ledger.height)

    @property
    def ledger(self) -> InMemoryLedger:
        return self._ledger

    @contextlib.asynccontextmanager
    async def registry(self) -> AsyncIterator[VehicleRegistry]:
        """Registry bound to a fresh transaction, committed on clean exit."""
        async with self._ledger.transaction() as tx:
            yield VehicleRegistry(tx, config=self._config, clock=self._clock)

    async def invoke(self, operation: str, *args: str) -> str:
        """Run the named operation and return its JSON-encoded result."""
        spec = _OPERATIONS.get(operation)
        if spec is None:
            raise UnknownOperationError(operation)
        if len(args) != len(spec.params):
            raise InvalidArgumentError(
                f"{operation} expects {len(spec.params)} argument(s) "
                f"({', '.join(spec.params) or 'none'}), got {len(args)}"
            )
        for name, value in zip(spec.params, args, strict=True):
            if not isinstance(value, str):
                raise InvalidArgumentError(f"{operation}: argument {name} must be a string")

        _logger.debug(
            "Invoking %s with %s",
            operation,
            redact_for_log(dict(zip(spec.params, args, strict=True))),
        )
        try:
            async with self._ledger.transaction() as tx:
                registry = VehicleRegistry(tx, config=self._config, clock=self._clock)
                result = await getattr(registry, spec.method)(*args)
                if not spec.mutating:
                    # Queries are evaluated, never submitted.
                    tx.discard()
        except RtoLedgerError as exc:
            _logger.info("%s failed: %s (%s)", operation, exc, exc.kind)
            raise
        return encode_result(result)
