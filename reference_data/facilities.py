"""
reference_data/facilities.py
Master facility list: offshore installations and drilling rigs served from
the shore base, with the spelling variants seen in the source data.
"""
from dataclasses import dataclass, field

from classification.enums import FacilityType


@dataclass(frozen=True)
class Facility:
    location_name: str
    display_name: str
    facility_type: FacilityType
    parent_facility: str = ""
    aliases: tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True


MASTER_FACILITIES: tuple[Facility, ...] = (
    # Production
    Facility("Argos", "Argos", FacilityType.PRODUCTION),
    Facility("Atlantis PQ", "Atlantis", FacilityType.PRODUCTION, aliases=("Atlantis",)),
    Facility("Na Kika", "Na Kika", FacilityType.PRODUCTION, aliases=("NaKika",)),
    Facility(
        "Thunder Horse Prod", "Thunder Horse (Production)", FacilityType.PRODUCTION,
        parent_facility="Thunder Horse PDQ",
        aliases=("Thunder Horse Production", "THP"),
    ),
    Facility(
        "Mad Dog Prod", "Mad Dog (Production)", FacilityType.PRODUCTION,
        parent_facility="Mad Dog",
        aliases=("Mad Dog Production",),
    ),
    # Drilling
    Facility(
        "Thunder Horse Drilling", "Thunder Horse (Drilling)", FacilityType.DRILLING,
        parent_facility="Thunder Horse PDQ",
    ),
    Facility(
        "Mad Dog Drilling", "Mad Dog (Drilling)", FacilityType.DRILLING,
        parent_facility="Mad Dog",
    ),
    Facility("Ocean Blackhornet", "Ocean Blackhornet", FacilityType.DRILLING, aliases=("Ocean Black Hornet",)),
    Facility("Ocean BlackLion", "Ocean BlackLion", FacilityType.DRILLING, aliases=("Ocean Black Lion",)),
    Facility("Deepwater Invictus", "Deepwater Invictus", FacilityType.DRILLING, aliases=("Invictus",)),
    Facility("Island Venture", "Island Venture", FacilityType.DRILLING),
    Facility("Stena IceMAX", "Stena IceMAX", FacilityType.DRILLING, aliases=("IceMAX",)),
    Facility("Auriga", "Auriga", FacilityType.DRILLING),
    Facility("Island Intervention", "Island Intervention", FacilityType.DRILLING),
    Facility("C-Constructor", "C-Constructor", FacilityType.DRILLING, aliases=("C Constructor",)),
    # Integrated (drilling and production on one hull)
    Facility(
        "Thunder Horse PDQ", "Thunder Horse (Drill/Prod)", FacilityType.INTEGRATED,
        aliases=("Thunder Horse", "ThunderHorse"),
    ),
    Facility("Mad Dog", "Mad Dog (Drill/Prod)", FacilityType.INTEGRATED, aliases=("MadDog",)),
)
