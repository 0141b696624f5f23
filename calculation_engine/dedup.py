"""
calculation_engine/dedup.py
Bulk fluid deduplication.

A single physical transfer of fluid usually appears twice in the bulk
action log: once when the vessel loads at the origin and once when it
offloads at the destination.  Summing both double-counts the fluid.

Pairing rules (applied per vessel + bulk type, in date order):
  1. An offload pairs with the earliest still-unmatched earlier load that
     started within settings.pairing_window_hours and whose route is
     adjacent (load destination ~ offload origin/port, load origin ~
     offload destination, or the same leg).  Missing location data on
     either side does not block a pair.
  2. A pair is one delivery operation carrying the offload volume.
  3. An offload with no load is a delivery at face value.
  4. A load with no offload is kept but is not a delivery (counts 0).
  5. Returns and unrecognised actions are standalone non-deliveries.

Only delivery operations contribute to total_fluid_volume, so the total
can never exceed the plain sum of offload volumes.
"""
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from classification.activity import classify_action
from classification.enums import ActionKind, FluidKind, MovementType
from classification.fluids import classify_fluid
from classification.locations import classify_movement_type, locations_match, normalize_location
from config.settings import settings
from filters.predicates import filter_records
from filters.scope import AggregationScope
from monitoring import DEDUP_RUNS, DUPLICATES_REMOVED, get_logger, timed
from records.models import BulkAction
from records.units import barrels_to_gallons

log = get_logger(__name__)

DEDUPLICATION_RULES = [
    "Load and offload of the same vessel and bulk type within the pairing window are one transfer",
    "Paired transfers are counted once, at the offload (delivery) leg",
    "Offloads without a matching load are counted at face value",
    "Loads without a matching offload are not counted",
    "Returns and unrecognised actions are not counted as deliveries",
]


# ─────────────────────────────────────────────────────────────────────────────
# Result types
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class FluidMovementOperation:
    operation_id: str
    vessel_name: str
    operation_date: Optional[datetime]
    origin_location: str
    destination_location: str
    bulk_type: str
    total_volume_bbls: float
    operations: tuple[BulkAction, ...]
    movement_type: MovementType
    is_delivery: bool
    fluid_kind: FluidKind = FluidKind.NONE
    notes: str = ""

    @property
    def total_volume_gals(self) -> float:
        return barrels_to_gallons(self.total_volume_bbls)


@dataclass
class DeduplicationResult:
    original_actions: int = 0
    consolidated_operations: list[FluidMovementOperation] = field(default_factory=list)
    duplicates_removed: int = 0
    total_volume_original: float = 0.0
    total_volume_consolidated: float = 0.0
    rules: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class FluidValidationResult:
    is_valid: bool
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    volume_discrepancy: Optional[float] = None


@dataclass
class BulkFluidMetrics:
    total_fluid_volume: float = 0.0
    delivery_operations: int = 0
    fluid_movements: list[FluidMovementOperation] = field(default_factory=list)
    deduplication_result: DeduplicationResult = field(default_factory=DeduplicationResult)
    movement_type_breakdown: dict[str, float] = field(default_factory=dict)
    fluid_kind_breakdown: dict[str, float] = field(default_factory=dict)
    drilling_fluid_volume: float = 0.0
    completion_fluid_volume: float = 0.0
    production_chemical_volume: float = 0.0
    record_count: int = 0

    @property
    def has_data(self) -> bool:
        return self.record_count > 0


# ─────────────────────────────────────────────────────────────────────────────
# Pairing helpers
# ─────────────────────────────────────────────────────────────────────────────
def _key(text: str) -> str:
    return " ".join((text or "").lower().split())


def _partition_key(action: BulkAction) -> tuple[str, str]:
    bulk = action.bulk_type or action.fluid_specific_type or action.bulk_description
    return _key(action.vessel_name), _key(bulk)


def _within_window(load: BulkAction, offload: BulkAction, window: timedelta) -> bool:
    if load.start_date is None or offload.start_date is None:
        return True
    gap = offload.start_date - load.start_date
    return timedelta(0) <= gap <= window


def _routes_adjacent(load: BulkAction, offload: BulkAction) -> bool:
    comparisons = [
        (load.destination, offload.origin),
        (load.destination, offload.at_port),
        (load.origin, offload.destination),
    ]
    known = [(a, b) for a, b in comparisons if a and b]
    if any(locations_match(a, b) for a, b in known):
        return True
    if load.origin and load.destination and offload.origin and offload.destination:
        if locations_match(load.origin, offload.origin) and locations_match(load.destination, offload.destination):
            return True
    return not known


def _sort_key(indexed: tuple[int, BulkAction]) -> tuple[datetime, int]:
    index, action = indexed
    return action.start_date or datetime.min, index


def _operation(
    actions: tuple[BulkAction, ...],
    volume: float,
    is_delivery: bool,
    origin: str,
    destination: str,
    notes: str,
    date_from: BulkAction,
) -> FluidMovementOperation:
    return FluidMovementOperation(
        operation_id="",
        vessel_name=date_from.vessel_name,
        operation_date=date_from.start_date,
        origin_location=origin,
        destination_location=destination,
        bulk_type=date_from.bulk_type or date_from.fluid_specific_type,
        total_volume_bbls=volume,
        operations=actions,
        movement_type=classify_movement_type(origin, destination),
        is_delivery=is_delivery,
        fluid_kind=classify_fluid(date_from),
        notes=notes,
    )


def _pair_partition(actions: list[BulkAction], window: timedelta, warnings: list[str]) -> list[FluidMovementOperation]:
    operations: list[FluidMovementOperation] = []
    pending_loads: list[BulkAction] = []

    for action in actions:
        kind = classify_action(action.action)
        if action.is_return:
            operations.append(_operation(
                (action,), action.volume_bbls, False, action.origin, action.destination,
                "Return to base", action,
            ))
            continue

        if kind is ActionKind.LOAD:
            pending_loads.append(action)
            continue

        if kind is ActionKind.OFFLOAD:
            match = next(
                (load for load in pending_loads
                 if _within_window(load, action, window) and _routes_adjacent(load, action)),
                None,
            )
            destination = action.destination or action.at_port
            if match is None:
                operations.append(_operation(
                    (action,), action.volume_bbls, True, action.origin, destination,
                    "Offload without a recorded load", action,
                ))
                continue

            pending_loads.remove(match)
            notes = "Load/offload pair"
            if abs(match.volume_bbls - action.volume_bbls) > settings.volume_tolerance_bbls:
                notes = "Load/offload pair, volumes differ"
                warnings.append(
                    f"{action.vessel_name} {action.bulk_type}: load {match.volume_bbls:,.2f} bbls "
                    f"vs offload {action.volume_bbls:,.2f} bbls, offload volume used"
                )
            operations.append(_operation(
                (match, action), action.volume_bbls, True,
                match.origin or action.origin, destination or match.destination,
                notes, action,
            ))
            continue

        operations.append(_operation(
            (action,), action.volume_bbls, False, action.origin, action.destination,
            f"Unrecognised action '{action.action}'", action,
        ))

    for load in pending_loads:
        operations.append(_operation(
            (load,), load.volume_bbls, False, load.origin, load.destination,
            "Load without a matching offload", load,
        ))
    return operations


def _number(operations: list[FluidMovementOperation]) -> list[FluidMovementOperation]:
    ordered = sorted(
        operations,
        key=lambda op: (op.operation_date or datetime.min, _key(op.vessel_name), _key(op.bulk_type)),
    )
    return [
        replace(op, operation_id=f"OP-{i:05d}")
        for i, op in enumerate(ordered, start=1)
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────
def _resolve_scope(scope: Optional[AggregationScope], department: str, month: Any, year: Any, location: Any) -> AggregationScope:
    if scope is not None:
        return scope
    return AggregationScope(month=month, year=year, department=department, location=location)


@timed("bulk_dedup")
def deduplicate_bulk_actions(
    bulk_actions: Iterable[BulkAction],
    department: str = "All",
    month: Any = None,
    year: Any = None,
    location: Optional[str] = None,
    *,
    scope: Optional[AggregationScope] = None,
) -> DeduplicationResult:
    """
    Filter bulk actions to the scope, pair loads with offloads and
    return the consolidated operations.

    Raises:
        pydantic.ValidationError: only for malformed month / year arguments.
    """
    scope = _resolve_scope(scope, department, month, year, location)
    actions = filter_records(bulk_actions, scope)
    window = timedelta(hours=settings.pairing_window_hours)
    warnings: list[str] = []

    partitions: dict[tuple[str, str], list[tuple[int, BulkAction]]] = defaultdict(list)
    for index, action in enumerate(actions):
        partitions[_partition_key(action)].append((index, action))

    operations: list[FluidMovementOperation] = []
    for key in sorted(partitions):
        ordered = [action for _, action in sorted(partitions[key], key=_sort_key)]
        operations.extend(_pair_partition(ordered, window, warnings))
    operations = _number(operations)

    result = DeduplicationResult(
        original_actions=len(actions),
        consolidated_operations=operations,
        duplicates_removed=len(actions) - len(operations),
        total_volume_original=round(sum(a.volume_bbls for a in actions), 4),
        total_volume_consolidated=round(sum(op.total_volume_bbls for op in operations if op.is_delivery), 4),
        rules=list(DEDUPLICATION_RULES),
        warnings=warnings,
    )

    DEDUP_RUNS.labels(department=scope.department or "All").inc()
    DUPLICATES_REMOVED.set(result.duplicates_removed)
    log.info(
        "Bulk actions deduplicated",
        scope=scope.label(),
        actions=result.original_actions,
        operations=len(operations),
        duplicates_removed=result.duplicates_removed,
        volume_bbls=result.total_volume_consolidated,
        warnings=len(warnings),
    )
    return result


def calculate_bulk_fluid_metrics(
    bulk_actions: Iterable[BulkAction],
    department: str = "All",
    month: Any = None,
    year: Any = None,
    location: Optional[str] = None,
    *,
    scope: Optional[AggregationScope] = None,
) -> BulkFluidMetrics:
    result = deduplicate_bulk_actions(
        bulk_actions, department, month, year, location, scope=scope,
    )
    deliveries = [op for op in result.consolidated_operations if op.is_delivery]

    movement_breakdown: dict[str, float] = defaultdict(float)
    kind_breakdown: dict[str, float] = defaultdict(float)
    for op in deliveries:
        movement_breakdown[op.movement_type.value] += op.total_volume_bbls
        kind_breakdown[op.fluid_kind.value] += op.total_volume_bbls

    return BulkFluidMetrics(
        total_fluid_volume=result.total_volume_consolidated,
        delivery_operations=len(deliveries),
        fluid_movements=deliveries,
        deduplication_result=result,
        movement_type_breakdown=dict(movement_breakdown),
        fluid_kind_breakdown=dict(kind_breakdown),
        drilling_fluid_volume=kind_breakdown.get(FluidKind.DRILLING.value, 0.0),
        completion_fluid_volume=kind_breakdown.get(FluidKind.COMPLETION.value, 0.0),
        production_chemical_volume=kind_breakdown.get(FluidKind.PRODUCTION_CHEMICAL.value, 0.0),
        record_count=result.original_actions,
    )


# ── Validation ────────────────────────────────────────────────────────────────

def validate_fluid_movements(operations: Iterable[FluidMovementOperation]) -> FluidValidationResult:
    issues: list[str] = []
    warnings: list[str] = []
    discrepancy_total = 0.0

    for op in operations:
        offloads = [a for a in op.operations if classify_action(a.action) is ActionKind.OFFLOAD]
        expected = sum(a.volume_bbls for a in (offloads or op.operations))
        discrepancy = abs(op.total_volume_bbls - expected)
        if discrepancy > settings.volume_tolerance_bbls:
            issues.append(
                f"Volume discrepancy in operation {op.operation_id}: consolidated "
                f"{op.total_volume_bbls:,.2f}, actions total {expected:,.2f}"
            )
            discrepancy_total += discrepancy

        if (op.origin_location and normalize_location(op.origin_location) == normalize_location(op.destination_location)
                and op.movement_type is not MovementType.VESSEL_TO_FACILITY):
            warnings.append(
                f"Operation {op.operation_id} has the same origin and destination "
                f"but is not a vessel-to-facility transfer"
            )
        if not op.destination_location and op.movement_type is not MovementType.OTHER:
            warnings.append(f"Operation {op.operation_id} missing destination location")

    return FluidValidationResult(
        is_valid=not issues,
        issues=issues,
        warnings=warnings,
        volume_discrepancy=round(discrepancy_total, 4) if discrepancy_total > 0 else None,
    )


# ── Filtering ─────────────────────────────────────────────────────────────────

def _is_drilling_side(action: BulkAction) -> bool:
    return classify_fluid(action) in (FluidKind.DRILLING, FluidKind.COMPLETION)


def get_drilling_fluid_movements(operations: Iterable[FluidMovementOperation]) -> list[FluidMovementOperation]:
    return [op for op in operations if any(_is_drilling_side(a) for a in op.operations)]


def get_production_fluid_movements(operations: Iterable[FluidMovementOperation]) -> list[FluidMovementOperation]:
    return [op for op in operations if any(not _is_drilling_side(a) for a in op.operations)]


def get_fluid_movements_by_location(
    operations: Iterable[FluidMovementOperation], location: str,
) -> list[FluidMovementOperation]:
    return [
        op for op in operations
        if locations_match(op.destination_location, location) or locations_match(op.origin_location, location)
    ]


# ── Reporting ─────────────────────────────────────────────────────────────────

def generate_deduplication_report(result: DeduplicationResult) -> str:
    lines = [
        "BULK FLUID DEDUPLICATION REPORT",
        "=" * 50,
        "",
        f"Original Actions:           {result.original_actions:,}",
        f"Consolidated Operations:    {len(result.consolidated_operations):,}",
        f"Duplicates Removed:         {result.duplicates_removed:,}",
        f"Volume Processed:           {result.total_volume_original:,.2f} bbls",
        f"Volume After Deduplication: {result.total_volume_consolidated:,.2f} bbls",
        "",
        "DEDUPLICATION RULES APPLIED:",
        *(f"  - {rule}" for rule in result.rules),
        "",
    ]
    if result.warnings:
        lines.append("WARNINGS:")
        lines.extend(f"  - {warning}" for warning in result.warnings)
        lines.append("")
    return "\n".join(lines)
