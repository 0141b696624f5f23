"""
reference_data/store.py
Reference lookups: master facilities, vessel classifications, location aliases.

The built-in tables ship with the package.  A JSON file at
settings.reference_data_path may extend or override them:

    {
      "facilities": [{"location_name": "...", "display_name": "...",
                      "facility_type": "Drilling", "aliases": ["..."]}],
      "vessels":    [{"name": "...", "company": "...", "size_ft": 280,
                      "vessel_type": "OSV"}],
      "location_aliases": {"variant": "canonical"}
    }
"""
import json
from pathlib import Path
from typing import Any, Optional

from classification.enums import FacilityType, VesselType
from classification.locations import normalize_location, strip_location
from config.settings import settings
from monitoring import get_logger
from reference_data.facilities import MASTER_FACILITIES, Facility
from reference_data.keywords import KEYWORD_TABLE_VERSION, LOCATION_ALIASES
from reference_data.vessels import VESSEL_CLASSIFICATIONS, VesselInfo

log = get_logger(__name__)


class ReferenceStore:
    """
    Read-optimised access to the reference tables.
    Lazy-loads on first access and caches in memory.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path
        self._store: Optional[dict[str, Any]] = None

    # ── Public API ────────────────────────────────────────────────────────────

    @property
    def store(self) -> dict[str, Any]:
        if self._store is None:
            self._store = self._load()
        return self._store

    def reload(self) -> None:
        """Drop cached tables; the next lookup re-reads the override file."""
        self._store = None
        log.info("Reference store cache cleared, will reload on next access")

    @property
    def facilities(self) -> tuple[Facility, ...]:
        return self.store["facilities"]

    @property
    def vessels(self) -> tuple[VesselInfo, ...]:
        return self.store["vessels"]

    def get_facility(self, name: str) -> Optional[Facility]:
        """Exact match on any spelling first, then on the normalised name."""
        if not name:
            return None
        key = " ".join(name.lower().split())
        facility = self.store["facility_index"].get(key)
        if facility is not None:
            return facility
        normalized = normalize_location(name, self.alias_table())
        for facility in self.facilities:
            if normalize_location(facility.location_name, self.alias_table()) == normalized:
                return facility
        return None

    def facilities_by_type(self, facility_type: FacilityType) -> list[Facility]:
        return [f for f in self.facilities if f.facility_type is facility_type and f.is_active]

    def get_vessel(self, name: str) -> Optional[VesselInfo]:
        if not name:
            return None
        return self.store["vessel_index"].get(" ".join(name.lower().split()))

    def vessel_type_table(self) -> dict[str, VesselType]:
        return {key: info.vessel_type for key, info in self.store["vessel_index"].items()}

    def alias_table(self) -> dict[str, str]:
        return self.store["alias_table"]

    def count(self) -> dict[str, int]:
        return {"facilities": len(self.facilities), "vessels": len(self.vessels)}

    # ── Private ───────────────────────────────────────────────────────────────

    def _load(self) -> dict[str, Any]:
        facilities = list(MASTER_FACILITIES)
        vessels = list(VESSEL_CLASSIFICATIONS)
        extra_aliases: dict[str, str] = {}

        path = Path(self._path or settings.reference_data_path)
        if path.exists():
            with open(path) as f:
                data: dict[str, Any] = json.load(f)
            facilities = self._merge(facilities, [self._facility(row) for row in data.get("facilities", [])],
                                     key=lambda fac: fac.location_name.lower())
            vessels = self._merge(vessels, [self._vessel(row) for row in data.get("vessels", [])],
                                  key=lambda v: v.name.lower())
            extra_aliases = {
                strip_location(k): strip_location(v)
                for k, v in data.get("location_aliases", {}).items()
            }
            log.info("Reference overrides loaded", path=str(path),
                     facilities=len(data.get("facilities", [])), vessels=len(data.get("vessels", [])))
        else:
            log.debug("No reference override file, using built-in tables", path=str(path))

        alias_table = self._build_aliases(facilities, extra_aliases)
        facility_index: dict[str, Facility] = {}
        for facility in facilities:
            for spelling in (facility.location_name, facility.display_name, *facility.aliases):
                facility_index.setdefault(" ".join(spelling.lower().split()), facility)

        log.info(
            "Reference store ready",
            facilities=len(facilities),
            vessels=len(vessels),
            aliases=len(alias_table),
            keyword_tables=KEYWORD_TABLE_VERSION,
        )
        return {
            "facilities": tuple(facilities),
            "vessels": tuple(vessels),
            "facility_index": facility_index,
            "vessel_index": {" ".join(v.name.lower().split()): v for v in vessels},
            "alias_table": alias_table,
        }

    @staticmethod
    def _build_aliases(facilities: list[Facility], extra: dict[str, str]) -> dict[str, str]:
        table = dict(LOCATION_ALIASES)
        for facility in facilities:
            canonical = normalize_location(facility.location_name)
            if not canonical:
                continue
            for spelling in (facility.location_name, facility.display_name, *facility.aliases):
                stripped = strip_location(spelling)
                if stripped:
                    table.setdefault(stripped, canonical)
        table.update(extra)
        return table

    @staticmethod
    def _merge(base: list, overrides: list, key) -> list:
        merged = {key(item): item for item in base}
        for item in overrides:
            merged[key(item)] = item
        return list(merged.values())

    @staticmethod
    def _facility(row: dict[str, Any]) -> Facility:
        return Facility(
            location_name=row["location_name"],
            display_name=row.get("display_name") or row["location_name"],
            facility_type=FacilityType(row.get("facility_type", "Production")),
            parent_facility=row.get("parent_facility", ""),
            aliases=tuple(row.get("aliases", [])),
            is_active=bool(row.get("is_active", True)),
        )

    @staticmethod
    def _vessel(row: dict[str, Any]) -> VesselInfo:
        return VesselInfo(
            name=row["name"],
            company=row.get("company", ""),
            size_ft=int(row.get("size_ft", 0)),
            vessel_type=VesselType(row.get("vessel_type", "Unknown")),
        )


reference_store = ReferenceStore()
