"""
main.py
CLI entry point for the Offshore Logistics KPI Engine.

Usage:
  python main.py demo      --view drilling
  python main.py dashboard --data export.json --view cost --month Mar-25
  python main.py quality   --data export.json
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on sys.path when running directly
sys.path.insert(0, str(Path(__file__).parent))

# ── Reference dataset: one March 2024 rotation to Thunder Horse ───────────────
SAMPLE_DATA = {
    "vesselManifests": [
        {"manifestDate": "2024-03-04", "manifestNumber": "M-1001", "transporter": "Fast Tiger",
         "finalDepartment": "Drilling", "mappedLocation": "Thunder Horse PDQ",
         "deckTons": 10, "rtTons": 5, "lifts": 12, "remarks": "Casing and tools"},
        {"manifestDate": "2024-03-11", "manifestNumber": "M-1002", "transporter": "Harvey Power",
         "finalDepartment": "Drilling", "mappedLocation": "Thunder Horse Drilling",
         "deckTons": 20, "rtTons": 0, "lifts": 8, "wetBulkBbls": 400, "remarks": "Drilling mud"},
        {"manifestDate": "2024-03-19", "manifestNumber": "M-1003", "transporter": "Fast Tiger",
         "finalDepartment": "Drilling", "mappedLocation": "Thunder Horse PDQ",
         "deckTons": 0, "rtTons": 15, "lifts": 4, "remarks": "Backhaul"},
        {"manifestDate": "2024-03-21", "manifestNumber": "M-1004", "transporter": "HOS Commander",
         "finalDepartment": "Production", "mappedLocation": "Mad Dog Prod",
         "deckTons": 30, "rtTons": 6, "lifts": 10, "wetBulkGals": 8400, "remarks": "Methanol"},
    ],
    "voyageEvents": [
        {"eventDate": "2024-03-04", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Port Fourchon", "parentEvent": "Transit", "portType": "base", "finalHours": 10,
         "lcNumber": "9358"},
        {"eventDate": "2024-03-05", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Thunder Horse PDQ", "parentEvent": "Cargo Ops", "portType": "rig", "finalHours": 8,
         "lcNumber": "9358"},
        {"eventDate": "2024-03-05", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Thunder Horse PDQ", "parentEvent": "Waiting on Installation", "portType": "rig",
         "finalHours": 4, "lcNumber": "9358"},
        {"eventDate": "2024-03-06", "vessel": "Fast Tiger", "voyageNumber": "V-301", "department": "Drilling",
         "location": "Thunder Horse PDQ", "parentEvent": "Transit", "portType": "rig", "finalHours": 10,
         "lcNumber": "9358"},
        {"eventDate": "2024-03-21", "vessel": "HOS Commander", "voyageNumber": "V-318", "department": "Production",
         "location": "Mad Dog Prod", "parentEvent": "Waiting on Weather", "portType": "rig", "finalHours": 6,
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

# CLI view names -> engine entry points
VIEWS = {
    "drilling":   "drilling",
    "production": "production",
    "cost":       "cost_allocation",
    "voyage":     "voyage_analytics",
    "bulk":       "bulk_actions",
    "kpis":       "kpis",
}


def _load_raw(data_path: Optional[str]) -> dict:
    if not data_path:
        return SAMPLE_DATA
    path = Path(data_path)
    if not path.exists():
        raise SystemExit(f"Data file not found: {path}")
    return json.loads(path.read_text())


def _scope_args(args: argparse.Namespace) -> dict:
    return {
        "month": args.month,
        "year": args.year,
        "department": args.department,
        "location": args.location,
        "project_type": args.project_type,
    }


# ── Dashboard mode ────────────────────────────────────────────────────────────

def run_dashboard(view: str, data_path: Optional[str] = None, scope: Optional[dict] = None) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    from calculation_engine.engine import DashboardEngine
    from guardrails.data_quality import DataQualityChecker
    from records.models import LogisticsDataset

    console = Console()
    dataset = LogisticsDataset.from_raw(_load_raw(data_path))
    engine = DashboardEngine()
    result = engine.run_view(VIEWS[view], dataset, scope or {})
    report = DataQualityChecker().check(dataset)

    console.print(f"\n[bold blue]═══ {view.upper()} DASHBOARD  ·  {result.scope.label()} ═══[/bold blue]\n")
    for name, count in dataset.counts().items():
        console.print(f"  [bold]{name.replace('_', ' ').title():<18}[/bold] {count:>6,}")
    console.print()

    if not result.has_data:
        console.print("  [yellow]No records match this scope.[/yellow]\n")

    table = Table(title="KPIs", box=box.ROUNDED, show_lines=False)
    table.add_column("KPI", style="cyan", width=28)
    table.add_column("Value", justify="right", width=16)
    table.add_column("Unit", width=9)
    table.add_column("Trend", justify="right", width=10)
    table.add_column("Previous", justify="right", style="dim", width=16)

    for name, kpi in result.kpis.items():
        style = "green" if kpi.is_positive else ("red" if kpi.trend else "white")
        trend = f"[{style}]{kpi.trend:+.1f}%[/{style}]" + (" *" if kpi.is_estimated else "")
        previous = "" if kpi.previous_value is None else f"{kpi.previous_value:,.2f}"
        table.add_row(name.replace("_", " ").title(), f"{kpi.value:,.2f}", kpi.unit, trend, previous)
    console.print(table)
    if result.calculation_metadata.get("estimated_kpis"):
        console.print("  [dim]* trend against an estimated baseline (no prior-period records)[/dim]")

    # Breakdowns
    for name, breakdown in result.breakdowns.items():
        if not breakdown:
            continue
        console.print(f"\n  [bold]{name.replace('_', ' ').title()}:[/bold]")
        for key, value in breakdown.items():
            shown = f"{value:>14,.2f}" if isinstance(value, (int, float)) else str(value)
            console.print(f"    • {key:<40} {shown}")

    if "deduplication_report" in result.calculation_metadata:
        console.print()
        console.print(result.calculation_metadata["deduplication_report"])

    _print_quality(console, report)
    for warning in result.warnings:
        console.print(f"  [yellow]⚠  {warning}[/yellow]")
    console.print()


def _print_quality(console, report) -> None:
    status = "[green]PASSED[/green]" if report.passed else "[red]FLAGGED[/red]"
    console.print(f"\n  [bold]Data Quality:[/bold] {status}  (score {report.score:.0%})")
    for issue in report.issues:
        console.print(f"  [red]✗  {issue}[/red]")
    for warning in report.warnings:
        console.print(f"  [yellow]⚠  {warning}[/yellow]")


# ── Quality mode ──────────────────────────────────────────────────────────────

def run_quality(data_path: Optional[str] = None) -> None:
    from rich.console import Console

    from guardrails.data_quality import DataQualityChecker
    from records.models import LogisticsDataset

    dataset = LogisticsDataset.from_raw(_load_raw(data_path))
    _print_quality(Console(), DataQualityChecker().check(dataset))


def build_parser() -> argparse.ArgumentParser:
    from config.settings import settings

    parser = argparse.ArgumentParser(prog="logistics-kpi", description=settings.project_title)
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.project_version}")
    parser.add_argument("--metrics", action="store_true", help="Expose Prometheus metrics while running")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_scope(p: argparse.ArgumentParser) -> None:
        p.add_argument("--view", choices=sorted(VIEWS), default="drilling")
        p.add_argument("--month", default=None, help="3, Mar, Mar-25 or YTD")
        p.add_argument("--year", type=int, default=None)
        p.add_argument("--department", choices=settings.departments, default=None,
                       help="Ignored by the drilling and production views, which pin their own")
        p.add_argument("--location", default=None)
        p.add_argument("--project-type", dest="project_type", default=None)

    add_scope(sub.add_parser("demo", help="Run a dashboard over the built-in sample dataset"))

    dashboard = sub.add_parser("dashboard", help="Run a dashboard over a JSON export")
    dashboard.add_argument("--data", required=True, help="JSON file with the five record collections")
    add_scope(dashboard)

    quality = sub.add_parser("quality", help="Data quality report for a JSON export")
    quality.add_argument("--data", default=None)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.metrics:
        from config.settings import settings
        from monitoring import start_metrics_server
        start_metrics_server(settings.metrics_port)

    if args.command == "quality":
        run_quality(args.data)
    else:
        run_dashboard(args.view, getattr(args, "data", None), _scope_args(args))


if __name__ == "__main__":
    main()
