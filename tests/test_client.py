"""Named-operation dispatch and JSON results through RtoLedgerClient."""

from __future__ import annotations

import json

import pytest
from conftest import FIXED_DATE

from rtoledger.client import OPERATION_NAMES, RtoLedgerClient, encode_result
from rtoledger.exceptions import (
    DuplicateChassisError,
    ErrorKind,
    InvalidArgumentError,
    NotStolenError,
    UnknownOperationError,
)
from rtoledger.store.memory import InMemoryLedger

REGISTER_VEH2001 = (
    "VEH2001", "Maruti", "Swift", "2024", "Red", "MH12AB0001", "CH001", "EN001",
    "Ravi Kumar", "1234-5678-9012", "Valid", "2027-01-14", "Valid", "2026-07-14", "",
)


def test_operation_names() -> None:
    assert OPERATION_NAMES == {
        "initLedger",
        "registerVehicle",
        "getVehicleDetails",
        "queryByRegistrationNumber",
        "queryByChassisNumber",
        "transferOwnership",
        "updateInsurance",
        "updatePollutionCertificate",
        "updateVehicleInfo",
        "getVehicleHistory",
        "reportStolen",
        "recoverVehicle",
        "queryAllVehicles",
        "verifyVehicleInformation",
    }


def test_encode_result_none_is_empty() -> None:
    assert encode_result(None) == ""
    assert encode_result([]) == "[]"


@pytest.mark.asyncio
async def test_init_ledger_returns_empty_and_seeds(client: RtoLedgerClient) -> None:
    assert await client.invoke("initLedger") == ""

    details = json.loads(await client.invoke("getVehicleDetails", "VEH1001"))
    assert details["vehicleId"] == "VEH1001"
    assert details["make"] == "Toyota"
    assert details["status"] == "Active"


@pytest.mark.asyncio
async def test_init_ledger_twice_overwrites(client: RtoLedgerClient) -> None:
    await client.invoke("initLedger")
    await client.invoke("initLedger")

    vehicles = json.loads(await client.invoke("queryAllVehicles"))
    assert [v["vehicleId"] for v in vehicles] == ["VEH1001"]
    history = json.loads(await client.invoke("getVehicleHistory", "VEH1001"))
    assert len(history) == 2


@pytest.mark.asyncio
async def test_unknown_operation(client: RtoLedgerClient) -> None:
    with pytest.raises(UnknownOperationError) as exc_info:
        await client.invoke("deleteVehicle", "VEH1001")
    assert exc_info.value.kind is ErrorKind.UNKNOWN_OPERATION


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("operation", "args"),
    [
        ("initLedger", ("extra",)),
        ("getVehicleDetails", ()),
        ("registerVehicle", REGISTER_VEH2001[:-1]),
        ("reportStolen", ("VEH2001", "Police")),
    ],
)
async def test_wrong_argument_count(client: RtoLedgerClient, operation: str, args: tuple[str, ...]) -> None:
    with pytest.raises(InvalidArgumentError):
        await client.invoke(operation, *args)
    assert client.ledger.height == 0


@pytest.mark.asyncio
async def test_non_string_argument_rejected(client: RtoLedgerClient) -> None:
    with pytest.raises(InvalidArgumentError):
        await client.invoke("getVehicleDetails", 1001)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_queries_do_not_advance_ledger(client: RtoLedgerClient) -> None:
    await client.invoke("initLedger")
    height = client.ledger.height

    await client.invoke("getVehicleDetails", "VEH1001")
    await client.invoke("queryAllVehicles")
    await client.invoke("queryByChassisNumber", "MHYKZE81UFJ123456")
    await client.invoke("verifyVehicleInformation", "VEH1001", "x", "y")

    assert client.ledger.height == height


@pytest.mark.asyncio
async def test_verify_result_shape(client: RtoLedgerClient) -> None:
    await client.invoke("registerVehicle", *REGISTER_VEH2001)

    result = json.loads(await client.invoke("verifyVehicleInformation", "VEH2001", "CH001", "EN001"))
    assert result == {"verified": True, "message": "Vehicle VEH2001 information verified"}


@pytest.mark.asyncio
async def test_update_vehicle_info_via_invoke(client: RtoLedgerClient) -> None:
    await client.invoke("registerVehicle", *REGISTER_VEH2001)

    updated = json.loads(await client.invoke("updateVehicleInfo", "VEH2001", "Blue", "", "", "", "", ""))
    assert updated["color"] == "Blue"
    assert "insuranceUpdateDate" not in updated


@pytest.mark.asyncio
async def test_client_context_manager() -> None:
    ledger = InMemoryLedger()
    async with RtoLedgerClient(ledger) as client:
        await client.invoke("initLedger")
    assert ledger.height == 1


@pytest.mark.asyncio
async def test_registration_to_recovery_walkthrough(client: RtoLedgerClient) -> None:
    registered = json.loads(await client.invoke("registerVehicle", *REGISTER_VEH2001))
    assert registered["status"] == "Active"
    assert registered["registrationDate"] == FIXED_DATE
    assert registered["documentIPFSHash"] == ""

    duplicate = ("VEH2002", *REGISTER_VEH2001[1:])
    with pytest.raises(DuplicateChassisError):
        await client.invoke("registerVehicle", *duplicate)

    transferred = json.loads(await client.invoke("transferOwnership", "VEH2001", "Asha", "AADHAR123", ""))
    assert transferred["ownerName"] == "Asha"
    assert transferred["transferDate"] == FIXED_DATE

    history = json.loads(await client.invoke("getVehicleHistory", "VEH2001"))
    assert len(history) == 2
    assert history[0]["value"]["ownerName"] == "Asha"
    assert history[1]["value"]["ownerName"] == "Ravi Kumar"
    assert set(history[0]) == {"txId", "timestamp", "isDelete", "value"}

    stolen = json.loads(await client.invoke("reportStolen", "VEH2001", "Police", "FIR-77"))
    assert stolen["status"] == "Stolen"
    assert stolen["caseNumber"] == "FIR-77"

    recovered = json.loads(await client.invoke("recoverVehicle", "VEH2001", "Police", "found intact"))
    assert recovered["status"] == "Recovered"
    assert recovered["recoveryNotes"] == "found intact"

    with pytest.raises(NotStolenError):
        await client.invoke("recoverVehicle", "VEH2001", "Police", "again")

    by_registration = json.loads(await client.invoke("queryByRegistrationNumber", "MH12AB0001"))
    assert [v["vehicleId"] for v in by_registration] == ["VEH2001"]
    assert json.loads(await client.invoke("queryByChassisNumber", "CH404")) == []
