"""
tests/test_classification.py
Keyword classifiers: project type, vessel type, fluids, activity, locations.
Run with: pytest tests/ -v
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from classification.activity import classify_action, classify_activity
from classification.enums import (
    ActionKind,
    ActivityCategory,
    BulkFluidCategory,
    FluidKind,
    MovementType,
    ProjectType,
    VesselType,
)
from classification.fluids import classify_bulk_fluid, classify_fluid, fluid_department
from classification.locations import (
    classify_movement_type,
    is_base_location,
    is_offshore_location,
    locations_match,
    normalize_location,
)
from classification.project_type import classify_project_type
from classification.vessel_type import classify_vessel_type
from records.models import BulkAction


# Project type

class TestProjectType:

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_is_other(self, text):
        assert classify_project_type(text, text) is ProjectType.OTHER

    def test_explicit_value_wins(self):
        assert classify_project_type("Drilling support", explicit_type="completions") is ProjectType.COMPLETIONS

    def test_unknown_explicit_value_falls_back_to_keywords(self):
        assert classify_project_type("Drilling support", explicit_type="Exploration") is ProjectType.DRILLING

    @pytest.mark.parametrize("description,expected", [
        ("Plug and abandon well MC-778", ProjectType.P_AND_A),
        ("Well workover campaign", ProjectType.COMPLETIONS),
        ("Drilling support - well TH-12", ProjectType.DRILLING),
        ("Platform chemical supply", ProjectType.PRODUCTION),
        ("Annual inspection", ProjectType.MAINTENANCE),
        ("Joint venture vessel", ProjectType.OPERATOR_SHARING),
    ])
    def test_keyword_groups(self, description, expected):
        assert classify_project_type(description) is expected

    def test_priority_order(self):
        # "plug" (P&A) outranks "drill"
        assert classify_project_type("Drill out cement plug") is ProjectType.P_AND_A

    def test_cost_element_is_searched(self):
        assert classify_project_type("Vessel charter", "Completion services") is ProjectType.COMPLETIONS

    @pytest.mark.parametrize("text", ["zzz", "12345", "Mad Dog", "random text with no keywords"])
    def test_always_in_closed_set(self, text):
        assert classify_project_type(text) in set(ProjectType)


# Vessel type

class TestVesselType:

    def test_table_lookup_is_case_insensitive(self):
        table = {"mystery": VesselType.AHTS}
        assert classify_vessel_type("  MYSTERY ", table) is VesselType.AHTS

    @pytest.mark.parametrize("name,expected", [
        ("Fast Jaguar", VesselType.FSV),
        ("HOS Renaissance", VesselType.OSV),
        ("Ocean PSV 12", VesselType.PSV),
        ("Gulf Support", VesselType.SUPPORT),
    ])
    def test_name_keywords(self, name, expected):
        assert classify_vessel_type(name, table={}) is expected

    def test_keyword_needs_word_boundary(self):
        assert classify_vessel_type("Breakfast", table={}) is VesselType.UNKNOWN

    @pytest.mark.parametrize("name", ["", None, "Nameless"])
    def test_unknown(self, name):
        assert classify_vessel_type(name, table={}) is VesselType.UNKNOWN

    def test_reference_table_default(self):
        assert classify_vessel_type("Gibson Lab") is VesselType.SUPPORT
        assert classify_vessel_type("Fantasy Island") is VesselType.SPECIALTY


# Fluids

class TestFluids:

    def test_drilling_fluid(self):
        result = classify_bulk_fluid("SBM")
        assert result.category is BulkFluidCategory.DRILLING
        assert result.specific_type == "SBM"
        assert result.is_drilling_fluid

    def test_completion_fluid(self):
        result = classify_bulk_fluid("Calcium Bromide", "11.6 ppg brine")
        assert result.category is BulkFluidCategory.COMPLETION_INTERVENTION
        assert result.specific_type == "Calcium Bromide"
        assert result.is_completion_fluid

    def test_production_chemical(self):
        result = classify_bulk_fluid("Methanol")
        assert result.is_production_chemical
        assert result.specific_type == "Methanol"

    def test_utility_and_petroleum(self):
        assert classify_bulk_fluid("Potable Water").category is BulkFluidCategory.UTILITY
        assert classify_bulk_fluid("Diesel").category is BulkFluidCategory.PETROLEUM

    def test_blank(self):
        assert classify_bulk_fluid("", None).category is BulkFluidCategory.OTHER

    def test_flags_win_over_keywords(self):
        action = BulkAction(bulk_type="Methanol", is_drilling_fluid=True)
        assert classify_fluid(action) is FluidKind.DRILLING

    @pytest.mark.parametrize("bulk_type,expected", [
        ("OBM", FluidKind.DRILLING),
        ("KCL Brine", FluidKind.COMPLETION),
        ("Xylene", FluidKind.PRODUCTION_CHEMICAL),
        ("Diesel", FluidKind.DIESEL),
        ("", FluidKind.NONE),
    ])
    def test_fluid_kind(self, bulk_type, expected):
        assert classify_fluid(BulkAction(bulk_type=bulk_type)) is expected

    def test_department(self):
        assert fluid_department(BulkAction(bulk_type="Calcium Chloride")) == "Drilling"
        assert fluid_department(BulkAction(bulk_type="Diesel")) == "Production"


# Activity / actions

class TestActivity:

    @pytest.mark.parametrize("parent,expected", [
        ("Cargo Ops", ActivityCategory.PRODUCTIVE),
        ("Transit", ActivityCategory.PRODUCTIVE),
        ("Maneuvering", ActivityCategory.PRODUCTIVE),
        ("Waiting on Weather", ActivityCategory.NON_PRODUCTIVE),
        ("Waiting on Installation", ActivityCategory.NON_PRODUCTIVE),
        ("Something unheard of", ActivityCategory.NON_PRODUCTIVE),
        ("", ActivityCategory.NON_PRODUCTIVE),
    ])
    def test_parent_event_keywords(self, parent, expected):
        assert classify_activity(parent) is expected

    def test_explicit_category_wins(self):
        assert classify_activity("Transit", explicit="Non-Productive") is ActivityCategory.NON_PRODUCTIVE
        assert classify_activity("Waiting", explicit=ActivityCategory.PRODUCTIVE) is ActivityCategory.PRODUCTIVE

    @pytest.mark.parametrize("action,expected", [
        ("Offload", ActionKind.OFFLOAD),
        ("Discharge to rig", ActionKind.OFFLOAD),
        ("Load", ActionKind.LOAD),
        ("Loading at dock", ActionKind.LOAD),
        ("Backload", ActionKind.OTHER),
        ("Transfer", ActionKind.OTHER),
        (None, ActionKind.OTHER),
    ])
    def test_action_direction(self, action, expected):
        assert classify_action(action) is expected


# Locations

class TestLocations:

    def test_thunder_horse_variants_normalise_together(self):
        assert normalize_location("Thunder Horse PDQ") == "thunder horse"
        assert normalize_location("Thunder Horse Production") == "thunder horse"
        assert normalize_location("Thunder Horse (Drilling)") == "thunder horse"
        assert normalize_location('"Thunder  Horse Prod"') == "thunder horse"

    def test_aliases(self):
        assert normalize_location("Port Fourchon") == "fourchon"
        assert normalize_location("Ocean Black Hornet") == "ocean blackhornet"

    def test_custom_alias_table(self):
        assert normalize_location("TH", {"th": "thunder horse"}) == "thunder horse"
        assert normalize_location("TH", {}) == "th"

    def test_match_by_containment(self):
        assert locations_match("Mad Dog Prod", "Mad Dog")
        assert not locations_match("Mad Dog", "Atlantis PQ")

    @pytest.mark.parametrize("a,b", [("", ""), ("", "Mad Dog"), (None, "Mad Dog"), ("Mad Dog", "   ")])
    def test_blank_never_matches(self, a, b):
        assert not locations_match(a, b)

    def test_offshore_and_base(self):
        assert is_offshore_location("Stena IceMAX")
        assert not is_offshore_location("Port Fourchon")
        assert is_base_location("Port Fourchon")
        assert not is_base_location("Mad Dog")

    @pytest.mark.parametrize("origin,destination,expected", [
        ("Port Fourchon", "Thunder Horse PDQ", MovementType.FOURCHON_TO_OFFSHORE),
        ("Mad Dog", "Thunder Horse", MovementType.OFFSHORE_TO_OFFSHORE),
        ("Thunder Horse PDQ", "Thunder Horse Prod", MovementType.VESSEL_TO_FACILITY),
        ("Galveston", "Port Fourchon", MovementType.OTHER),
        ("", "", MovementType.OTHER),
    ])
    def test_movement_type(self, origin, destination, expected):
        assert classify_movement_type(origin, destination) is expected
