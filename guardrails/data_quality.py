"""
guardrails/data_quality.py
Data quality checks over a loaded dataset.

The aggregation engine absorbs bad rows silently (zeros, Unknown buckets,
non-matching dates).  These checks make that visible:
  1. VoyageEventValidator     : missing dates / parent events
  2. ManifestValidator        : manifests that carry nothing
  3. BulkActionValidator      : zero volumes, unknown actions, duplicate ids
  4. CostAllocationValidator  : allocation lines without an LC number
"""
from collections import Counter
from dataclasses import dataclass, field

from classification.activity import classify_action
from classification.enums import ActionKind
from monitoring import DATA_QUALITY_ISSUES, get_logger
from records.models import LogisticsDataset

log = get_logger(__name__)

# Findings listed per check before the message is truncated
_EXAMPLES = 3


@dataclass
class ValidationReport:
    passed: bool
    score: float
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)


def _finding(label: str, count: int, total: int, examples: list[str]) -> str:
    shown = ", ".join(examples[:_EXAMPLES])
    more = f" (e.g. {shown})" if shown else ""
    return f"{count} of {total} {label}{more}"


# ── 1. Voyage events ──────────────────────────────────────────────────────────

class VoyageEventValidator:

    def validate(self, dataset: LogisticsDataset) -> dict[str, list[str]]:
        missing_date = [f"{e.vessel} #{e.voyage_number}" for e in dataset.voyage_events if e.event_date is None]
        missing_parent = [f"{e.vessel} #{e.voyage_number}" for e in dataset.voyage_events if not e.parent_event]
        return {
            "event_missing_date": missing_date,
            "event_missing_parent_event": missing_parent,
        }


# ── 2. Manifests ──────────────────────────────────────────────────────────────

class ManifestValidator:

    def validate(self, dataset: LogisticsDataset) -> dict[str, list[str]]:
        empty = [
            m.manifest_number or m.transporter
            for m in dataset.vessel_manifests
            if not m.cargo_tons and not m.lifts and not m.wet_bulk_total_bbls
        ]
        missing_date = [m.manifest_number or m.transporter for m in dataset.vessel_manifests if m.manifest_date is None]
        return {"manifest_empty": empty, "manifest_missing_date": missing_date}


# ── 3. Bulk actions ───────────────────────────────────────────────────────────

class BulkActionValidator:

    def validate(self, dataset: LogisticsDataset) -> dict[str, list[str]]:
        actions = dataset.bulk_actions
        zero_volume = [a.action_id or a.vessel_name for a in actions if a.volume_bbls <= 0]
        unknown_action = [
            f"{a.action_id or a.vessel_name}: '{a.action}'"
            for a in actions
            if not a.is_return and classify_action(a.action) is ActionKind.OTHER
        ]
        id_counts = Counter(a.action_id for a in actions if a.action_id)
        duplicates = [action_id for action_id, n in sorted(id_counts.items()) if n > 1]
        return {
            "bulk_zero_volume": zero_volume,
            "bulk_unknown_action": unknown_action,
            "bulk_duplicate_id": duplicates,
        }


# ── 4. Cost allocations ───────────────────────────────────────────────────────

class CostAllocationValidator:

    def validate(self, dataset: LogisticsDataset) -> dict[str, list[str]]:
        missing_lc = [
            ca.description or ca.rig_location or ca.month_year
            for ca in dataset.cost_allocations if not ca.lc_number
        ]
        return {"cost_missing_lc": missing_lc}


# ── Orchestrator ──────────────────────────────────────────────────────────────

class DataQualityChecker:
    """
    Runs every validator and returns a single ValidationReport.
    Duplicate action ids are issues (they distort deduplication); every
    other finding is a warning.
    """

    ISSUE_CHECKS = frozenset({"bulk_duplicate_id"})

    _LABELS = {
        "event_missing_date":         "voyage events have no readable date",
        "event_missing_parent_event": "voyage events have no parent event",
        "manifest_empty":             "manifests carry no cargo, lifts or wet bulk",
        "manifest_missing_date":      "manifests have no readable date",
        "bulk_zero_volume":           "bulk actions have zero volume",
        "bulk_unknown_action":        "bulk actions are neither load nor offload",
        "bulk_duplicate_id":          "bulk action ids are duplicated",
        "cost_missing_lc":            "cost allocation lines have no LC number",
    }

    def __init__(self) -> None:
        self._validators = [
            VoyageEventValidator(),
            ManifestValidator(),
            BulkActionValidator(),
            CostAllocationValidator(),
        ]

    def check(self, dataset: LogisticsDataset) -> ValidationReport:
        findings: dict[str, list[str]] = {}
        for validator in self._validators:
            findings.update(validator.validate(dataset))

        totals = {
            "event": len(dataset.voyage_events),
            "manifest": len(dataset.vessel_manifests),
            "bulk": len(dataset.bulk_actions),
            "cost": len(dataset.cost_allocations),
        }
        issues: list[str] = []
        warnings: list[str] = []
        counts: dict[str, int] = {}

        for check, examples in findings.items():
            if not examples:
                continue
            counts[check] = len(examples)
            DATA_QUALITY_ISSUES.labels(check=check).inc(len(examples))
            message = _finding(self._LABELS[check], len(examples), totals[check.split("_")[0]], examples)
            (issues if check in self.ISSUE_CHECKS else warnings).append(message)

        for collection, skipped in dataset.metadata.get("skipped_rows", {}).items():
            warnings.append(f"{skipped} {collection} rows could not be read and were skipped")

        record_total = sum(totals.values())
        flagged = sum(counts.values())
        score = round(max(0.0, 1.0 - flagged / record_total), 3) if record_total else 1.0

        report = ValidationReport(
            passed=not issues,
            score=score,
            issues=issues,
            warnings=warnings,
            counts=counts,
        )
        log.info(
            "Data quality check",
            passed=report.passed,
            score=report.score,
            issues=len(issues),
            warnings=len(warnings),
        )
        return report
