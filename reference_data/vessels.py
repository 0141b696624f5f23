"""
reference_data/vessels.py
Vessel classification table (fleet list as chartered).
"""
from dataclasses import dataclass

from classification.enums import VesselType


@dataclass(frozen=True)
class VesselInfo:
    name: str
    company: str
    size_ft: int
    vessel_type: VesselType


VESSEL_CLASSIFICATIONS: tuple[VesselInfo, ...] = (
    VesselInfo("Amber",            "ECO",          280, VesselType.OSV),
    VesselInfo("Cajun IV",         "Jackson",      210, VesselType.FSV),
    VesselInfo("Charlie Comeaux",  "ECO",          299, VesselType.OSV),
    VesselInfo("Claire Candies",   "Otto Candies", 282, VesselType.OSV),
    VesselInfo("Dauphin Island",   "ECO",          312, VesselType.OSV),
    VesselInfo("Fantasy Island",   "ECO",          312, VesselType.SPECIALTY),
    VesselInfo("Fast Giant",       "ECO",          194, VesselType.FSV),
    VesselInfo("Fast Goliath",     "ECO",          194, VesselType.FSV),
    VesselInfo("Fast Hauler",      "ECO",          194, VesselType.FSV),
    VesselInfo("Fast Leopard",     "ECO",          201, VesselType.FSV),
    VesselInfo("Fast Lion",        "ECO",          190, VesselType.FSV),
    VesselInfo("Fast Tiger",       "ECO",          196, VesselType.FSV),
    VesselInfo("Gibson Lab",       "Laborde",      240, VesselType.SUPPORT),
    VesselInfo("Harvey Carrier",   "Harvey Gulf",  280, VesselType.OSV),
    VesselInfo("Harvey Champion",  "Harvey Gulf",  310, VesselType.OSV),
    VesselInfo("Harvey Freedom",   "Harvey Gulf",  310, VesselType.OSV),
    VesselInfo("Harvey Power",     "Harvey Gulf",  310, VesselType.OSV),
    VesselInfo("Harvey Provider",  "Harvey Gulf",  240, VesselType.SUPPORT),
    VesselInfo("Harvey Supporter", "Harvey Gulf",  310, VesselType.OSV),
    VesselInfo("HOS Black Foot",   "Hornbeck",     310, VesselType.OSV),
    VesselInfo("HOS Blackhawk",    "Hornbeck",     280, VesselType.OSV),
    VesselInfo("HOS Commander",    "Hornbeck",     320, VesselType.OSV),
    VesselInfo("HOS Mauser",       "Hornbeck",     280, VesselType.OSV),
    VesselInfo("HOS Panther",      "Hornbeck",     280, VesselType.OSV),
    VesselInfo("HOS Ruger",        "Hornbeck",     280, VesselType.OSV),
    VesselInfo("Lightning",        "Jackson",      252, VesselType.OSV),
    VesselInfo("Lucy",             "ECO",          270, VesselType.OSV),
    VesselInfo("Millie",           "ECO",          298, VesselType.OSV),
    VesselInfo("Pelican Island",   "ECO",          312, VesselType.OSV),
    VesselInfo("Persistence Lab",  "Laborde",      150, VesselType.SUPPORT),
    VesselInfo("Regulus",          "Tidewater",    272, VesselType.OSV),
    VesselInfo("Ship Island",      "ECO",          312, VesselType.OSV),
    VesselInfo("Squall",           "Jackson",      252, VesselType.OSV),
    VesselInfo("Tucker Candies",   "Otto Candies", 290, VesselType.OSV),
)
