"""Command-line access to the worker table: stats, exports, reports, verification."""
import argparse
import sys
from pathlib import Path

from workerverify.core.config import Settings, load_settings
from workerverify.core.errors import PortalError
from workerverify.core.logging import configure_logging
from workerverify.processing.aggregation import compute_stats, factory_keys
from workerverify.processing.matcher import policy_for
from workerverify.processing.pipeline import (
    LISTING_SINKS,
    REPORT_FORMATS,
    export_progress,
    load_records,
    run_export,
)
from workerverify.processing.verification import VerificationFlow, VerificationStatus
from workerverify.processing.views import DashboardFilters, StatusFilter
from workerverify.store.client import WorkerStore
from workerverify.store.loader import count_stats


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per operation."""

    parser = argparse.ArgumentParser(description="Worker verification portal tools")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    commands = parser.add_subparsers(dest="command", required=True)

    stats = commands.add_parser("stats", help="Print verification counts per factory")
    stats.add_argument(
        "--remote",
        action="store_true",
        help="Use exact count queries against the store instead of the loaded list",
    )

    export = commands.add_parser("export", help="Export the filtered worker listing")
    export.add_argument(
        "--status",
        choices=[choice.value for choice in StatusFilter],
        default=StatusFilter.ALL.value,
    )
    export.add_argument("--factory", help="Only workers of this factory")
    export.add_argument("--department", help="Only workers of this department")
    export.add_argument("--search", default="", help="Case-insensitive name or NIK substring")
    export.add_argument(
        "--output",
        type=Path,
        default=Path("output/workers-data.csv"),
        help="File to write the listing to",
    )
    export.add_argument(
        "--sink",
        choices=LISTING_SINKS,
        default="csv",
        help="Listing format; 'sheets' also pushes the rows to Google Sheets",
    )
    export.add_argument("--spreadsheet-id", help="Spreadsheet ID for the sheets sink; defaults to GOOGLE_SHEETS_SPREADSHEET_ID")
    export.add_argument("--worksheet", help="Worksheet title; defaults to GOOGLE_SHEETS_WORKSHEET")
    export.add_argument(
        "--service-account",
        type=Path,
        help="Path to a Google service account JSON key used for Sheets pushes",
    )

    report = commands.add_parser("report", help="Write the verification progress report")
    report.add_argument("--format", choices=REPORT_FORMATS, default="pdf", dest="fmt")
    report.add_argument("--output", type=Path, default=Path("output/verification-progress.pdf"))

    verify = commands.add_parser("verify", help="Verify one worker by NIK/KTP")
    verify.add_argument("--factory", required=True)
    verify.add_argument("--id", required=True, dest="identifier", help="Full NIK/KTP or a short suffix")
    return parser


def _warn_if_incomplete(complete: bool) -> None:
    if not complete:
        print("Warning: the worker list is incomplete.", file=sys.stderr)


def _cmd_stats(args: argparse.Namespace, settings: Settings, store: WorkerStore) -> int:
    result = load_records(store, settings)
    factories = factory_keys(result.records)
    stats = count_stats(store, factories) if args.remote else compute_stats(result.records, factories)

    print(f"{'':<12}{'Overall':>10}" + "".join(f"{'Factory ' + f:>12}" for f in factories))
    for label, breakdown in (("Total", stats.total), ("Verified", stats.verified), ("Unverified", stats.unverified)):
        cells = "".join(f"{breakdown.by_factory.get(f, 0):>12}" for f in factories)
        print(f"{label:<12}{breakdown.overall:>10}{cells}")
    _warn_if_incomplete(result.complete)
    return 0


def _cmd_export(args: argparse.Namespace, settings: Settings, store: WorkerStore) -> int:
    filters = DashboardFilters(
        status=StatusFilter(args.status),
        factory=args.factory,
        department=args.department,
        search=args.search,
    )
    output_path = run_export(
        store,
        settings,
        filters,
        args.output,
        sink=args.sink,
        spreadsheet_id=args.spreadsheet_id,
        worksheet_title=args.worksheet,
        service_account_path=args.service_account,
    )
    print(f"Wrote {output_path}")
    return 0


def _cmd_report(args: argparse.Namespace, settings: Settings, store: WorkerStore) -> int:
    result = load_records(store, settings)
    output_path = export_progress(result.records, args.output, settings, fmt=args.fmt)
    print(f"Wrote {output_path}")
    _warn_if_incomplete(result.complete)
    return 0


def _cmd_verify(args: argparse.Namespace, settings: Settings, store: WorkerStore) -> int:
    result = load_records(store, settings)
    flow = VerificationFlow(
        store,
        policy=policy_for(settings.match_policy, settings.match_case_sensitive),
        delay=0,
        guard=settings.update_guard,
    )
    state = flow.submit(result.records, args.factory, args.identifier)
    if state.status != VerificationStatus.SUCCESS:
        print(state.error, file=sys.stderr)
        return 1
    worker = state.worker
    print(f"Verified {worker.name} ({worker.department}, Factory {worker.factory}) NIK {worker.nik}")
    return 0


COMMANDS = {
    "stats": _cmd_stats,
    "export": _cmd_export,
    "report": _cmd_report,
    "verify": _cmd_verify,
}


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the ``workerverify`` console script."""

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = load_settings()
    try:
        store = WorkerStore.from_settings(settings)
        return COMMANDS[args.command](args, settings, store)
    except (PortalError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
