"""
classification/enums.py
Closed category sets used across records, classifiers and aggregators.
"""
from enum import Enum


class ProjectType(str, Enum):
    DRILLING         = "Drilling"
    COMPLETIONS      = "Completions"
    P_AND_A          = "P&A"
    PRODUCTION       = "Production"
    MAINTENANCE      = "Maintenance"
    OPERATOR_SHARING = "Operator Sharing"
    OTHER            = "Other"


class VesselType(str, Enum):
    OSV       = "OSV"
    FSV       = "FSV"
    PSV       = "PSV"
    AHTS      = "AHTS"
    MSV       = "MSV"
    SPECIALTY = "Specialty"
    SUPPORT   = "Support"
    UNKNOWN   = "Unknown"


class FluidKind(str, Enum):
    DRILLING            = "drilling"
    COMPLETION          = "completion"
    PRODUCTION_CHEMICAL = "production-chemical"
    DIESEL              = "diesel"
    NONE                = "none"


class BulkFluidCategory(str, Enum):
    DRILLING                = "Drilling"
    COMPLETION_INTERVENTION = "Completion/Intervention"
    PRODUCTION_CHEMICAL     = "Production Chemical"
    UTILITY                 = "Utility"
    PETROLEUM               = "Petroleum"
    OTHER                   = "Other"


class ActivityCategory(str, Enum):
    PRODUCTIVE     = "Productive"
    NON_PRODUCTIVE = "Non-Productive"


class VoyagePurpose(str, Enum):
    DRILLING   = "Drilling"
    PRODUCTION = "Production"
    MIXED      = "Mixed"
    OTHER      = "Other"


class ActionKind(str, Enum):
    LOAD    = "load"
    OFFLOAD = "offload"
    OTHER   = "other"


class MovementType(str, Enum):
    FOURCHON_TO_OFFSHORE = "Fourchon-to-Offshore"
    OFFSHORE_TO_OFFSHORE = "Offshore-to-Offshore"
    VESSEL_TO_FACILITY   = "Vessel-to-Facility"
    OTHER                = "Other"


class FacilityType(str, Enum):
    PRODUCTION = "Production"
    DRILLING   = "Drilling"
    INTEGRATED = "Integrated"
