"""Internal constants shared across the library."""

from __future__ import annotations

from typing import Any

DATE_FORMAT = "%Y-%m-%d"

# ------------------------------------------------------------------
# Records written by ``initLedger`` (wire format)
# ------------------------------------------------------------------

SAMPLE_VEHICLES: tuple[dict[str, Any], ...] = (
    {
        "vehicleId": "VEH1001",
        "make": "Toyota",
        "model": "Innova",
        "year": "2023",
        "color": "White",
        "registrationNumber": "MH01AB1234",
        "chassisNumber": "MHYKZE81UFJ123456",
        "engineNumber": "ENJK28374H2FJ123",
        "ownerName": "Rahul Sharma",
        "ownerAadhar": "xxxx-xxxx-1234",
        "registrationDate": "2023-10-15",
        "insuranceStatus": "Valid",
        "insuranceExpiry": "2024-10-15",
        "pollutionCertificate": "Valid",
        "pollutionExpiry": "2024-04-15",
        "status": "Active",
        "documentIPFSHash": "QmT78zSuBmuS4z925WZfrqQ1qHaJ56DQaTfyMUF7F8ff5o",
    },
)
