#!/usr/bin/env python3
"""Run a registration-to-recovery walkthrough against an in-memory ledger.

Registers a vehicle, shows a rejected duplicate chassis, transfers
ownership, reports the vehicle stolen, recovers it and prints the history
after each step.

Usage
-----
::

    python scripts/walkthrough.py
    python scripts/walkthrough.py --seed --verbose
    RTO_FREEZE_STOLEN_VEHICLES=1 python scripts/walkthrough.py

Options::

    --seed               Run initLedger first
    --json               Print raw JSON results only
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from rtoledger import LedgerConfig, RtoLedgerClient, RtoLedgerError  # noqa: E402

REGISTRATION = (
    "VEH2001", "Maruti", "Swift", "2024", "Red", "MH12AB0001", "CH001", "EN001",
    "Ravi Kumar", "1234-5678-9012", "Valid", "2027-01-14", "Valid", "2026-07-14", "",
)

STEPS: list[tuple[str, tuple[str, ...]]] = [
    ("registerVehicle", REGISTRATION),
    ("registerVehicle", ("VEH2002", *REGISTRATION[1:])),
    ("transferOwnership", ("VEH2001", "Asha", "AADHAR123", "")),
    ("getVehicleHistory", ("VEH2001",)),
    ("reportStolen", ("VEH2001", "Police", "FIR-77")),
    ("recoverVehicle", ("VEH2001", "Police", "found intact")),
    ("recoverVehicle", ("VEH2001", "Police", "again")),
    ("verifyVehicleInformation", ("VEH2001", "CH001", "EN001")),
    ("queryAllVehicles", ()),
]


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _summarise(result: Any) -> str:
    if isinstance(result, dict) and "vehicleId" in result:
        return f"{result['vehicleId']} owner={result['ownerName']} status={result['status']}"
    if isinstance(result, list):
        return f"{len(result)} item(s)"
    return json.dumps(result, ensure_ascii=False)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Walk a vehicle through its registry lifecycle.")
    parser.add_argument("--seed", action="store_true", help="Run initLedger first")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Print raw JSON results only")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    steps = [("initLedger", ()), *STEPS] if args.seed else STEPS

    async with RtoLedgerClient(config=LedgerConfig.from_env()) as client:
        for operation, op_args in steps:
            try:
                raw = await client.invoke(operation, *op_args)
            except RtoLedgerError as exc:
                if args.json_mode:
                    print(json.dumps({"operation": operation, "error": exc.kind, "message": str(exc)}))
                else:
                    print(_section(operation))
                    print(f"  rejected  : {exc.kind}: {exc}")
                continue

            if args.json_mode:
                print(raw)
                continue

            print(_section(operation))
            print(f"  result    : {_summarise(json.loads(raw)) if raw else '(empty)'}")

        if not args.json_mode:
            print(f"\nLedger height: {client.ledger.height}  last tx: {client.ledger.last_tx_id[:16]}")


if __name__ == "__main__":
    asyncio.run(main())
