"""
tests/conftest.py
Shared fixtures: one March 2024 rotation with a Drilling side (Thunder Horse)
and a Production side (Mad Dog), in the camelCase shape the ingestion
layer hands over.
"""
import copy
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from reference_data.keywords import LOCATION_ALIASES
from records.models import LogisticsDataset

MARCH_2024 = {
    "vesselManifests": [
        {"manifestDate": "2024-03-04", "manifestNumber": "M-1", "transporter": "Fast Tiger",
         "finalDepartment": "Drilling", "mappedLocation": "Thunder Horse PDQ",
         "deckTons": 10, "rtTons": 5, "lifts": 12},
        {"manifestDate": "2024-03-11", "manifestNumber": "M-2", "transporter": "Harvey Power",
         "finalDepartment": "Drilling", "mappedLocation": "Thunder Horse Drilling",
         "deckTons": 20, "rtTons": 0, "lifts": 8},
        {"manifestDate": "2024-03-19", "manifestNumber": "M-3", "transporter": "Fast Tiger",
         "finalDepartment": "Drilling", "mappedLocation": "Thunder Horse PDQ",
         "deckTons": 0, "rtTons": 15, "lifts": 4},
        {"manifestDate": "2024-03-21", "manifestNumber": "M-4", "transporter": "HOS Commander",
         "finalDepartment": "Production", "mappedLocation": "Mad Dog Prod",
         "deckTons": 30, "rtTons": 6, "lifts": 10},
    ],
    "voyageEvents": [
        {"eventDate": "2024-03-04", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Port Fourchon", "parentEvent": "Transit", "portType": "Base", "finalHours": 10,
         "lcNumber": "9358"},
        {"eventDate": "2024-03-05", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Thunder Horse PDQ", "parentEvent": "Cargo Ops", "portType": "Rig", "finalHours": 8,
         "lcNumber": "9358"},
        {"eventDate": "2024-03-05", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Thunder Horse PDQ", "parentEvent": "Waiting on Installation", "portType": "Rig",
         "finalHours": 4, "lcNumber": "9358"},
        {"eventDate": "2024-03-06", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Thunder Horse PDQ", "parentEvent": "Transit", "portType": "Rig", "finalHours": 10,
         "lcNumber": "9358"},
        {"eventDate": "2024-03-21", "vessel": "HOS Commander", "voyageNumber": "V-318", "department": "Production",
         "location": "Mad Dog Prod", "parentEvent": "Waiting on Weather", "portType": "Rig", "finalHours": 6,
         "lcNumber": "7720"},
    ],
    "costAllocation": [
        {"monthYear": "Mar-24", "lcNumber": "9358", "rigLocation": "Thunder Horse Drilling",
         "department": "Drilling", "description": "Drilling support - well TH-12",
         "totalAllocatedDays": 12, "budgetedVesselCost": 400000, "totalCost": 396000,
         "vesselDailyRateUsed": 33000},
        {"monthYear": "Mar-24", "lcNumber": "7720", "rigLocation": "Mad Dog Prod",
         "department": "Production", "description": "Platform chemical supply",
         "totalAllocatedDays": 6, "budgetedVesselCost": 190000, "totalCost": 198000,
         "vesselDailyRateUsed": 33000},
    ],
    "bulkActions": [
        {"id": "BA-1", "startDate": "2024-03-04T06:00:00", "vesselName": "Harvey Power",
         "bulkType": "SBM", "action": "Load", "volumeBbls": 100,
         "atPort": "Port Fourchon", "destinationPort": "Thunder Horse PDQ"},
        {"id": "BA-2", "startDate": "2024-03-05T14:00:00", "vesselName": "Harvey Power",
         "bulkType": "SBM", "action": "Offload", "volumeBbls": 100,
         "atPort": "Thunder Horse PDQ", "destinationPort": "Thunder Horse PDQ"},
        {"id": "BA-3", "startDate": "2024-03-21T09:00:00", "vesselName": "HOS Commander",
         "bulkType": "Methanol", "action": "Offload", "volumeBbls": 200,
         "atPort": "Port Fourchon", "destinationPort": "Mad Dog Prod"},
    ],
    "voyageList": [
        {"voyageDate": "2024-03-04", "vessel": "Fast Tiger", "voyageNumber": "V-301",
         "voyagePurpose": "Drilling", "locations": "Fourchon -> Thunder Horse PDQ -> Fourchon",
         "durationHours": 32},
        {"voyageDate": "2024-03-20", "vessel": "HOS Commander", "voyageNumber": "V-318",
         "voyagePurpose": "Mixed", "locations": "Fourchon -> Mad Dog -> Thunder Horse -> Fourchon",
         "durationHours": 58},
    ],
}


@pytest.fixture
def raw() -> dict:
    return copy.deepcopy(MARCH_2024)


@pytest.fixture
def dataset(raw) -> LogisticsDataset:
    return LogisticsDataset.from_raw(raw)


@pytest.fixture
def aliases() -> dict[str, str]:
    return dict(LOCATION_ALIASES)
