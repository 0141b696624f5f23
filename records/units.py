"""
records/units.py
Volume unit conversion. Barrels are the only unit stored on records;
gallons exist solely at the ingestion boundary and in display helpers.
"""

GALLONS_PER_BARREL: float = 42.0


def gallons_to_barrels(gallons: float) -> float:
    return (gallons or 0.0) / GALLONS_PER_BARREL


def barrels_to_gallons(barrels: float) -> float:
    return (barrels or 0.0) * GALLONS_PER_BARREL
