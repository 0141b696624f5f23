"""
classification/vessel_type.py
Vessel type from the classification table, falling back to name keywords.
"""
from typing import Mapping, Optional

from classification.enums import VesselType
from reference_data.keywords import VESSEL_TYPE_KEYWORDS


def classify_vessel_type(
    name: Optional[str],
    table: Optional[Mapping[str, VesselType]] = None,
) -> VesselType:
    """
    Args:
        name:  Vessel name as it appears on manifests / events.
        table: lower-cased vessel name -> VesselType.  Defaults to the
               reference store's vessel classification table.
    """
    if not isinstance(name, str) or not name.strip():
        return VesselType.UNKNOWN

    key = " ".join(name.lower().split())
    if table is None:
        from reference_data.store import reference_store
        table = reference_store.vessel_type_table()

    known = table.get(key)
    if known is not None:
        return known

    padded = f" {key} "
    for vessel_type, keywords in VESSEL_TYPE_KEYWORDS:
        if any(kw in padded for kw in keywords):
            return vessel_type
    return VesselType.UNKNOWN
