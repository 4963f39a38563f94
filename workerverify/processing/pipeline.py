"""Load -> filter -> rows -> sink orchestration shared by the CLI and dashboard."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from workerverify.core.config import Settings
from workerverify.core.models import WorkerRecord
from workerverify.processing.aggregation import compute_series, factory_keys
from workerverify.processing.views import DashboardFilters, apply_filters
from workerverify.reporting.sinks import push_to_google_sheets, write_csv, write_excel, write_pdf
from workerverify.reporting.templates import (
    EXPORT_HEADERS,
    records_to_export_rows,
    series_headers,
    series_to_report_rows,
)
from workerverify.store.loader import LoadResult, PagedSource, load_all

SHEETS_SERVICE_ACCOUNT_FALLBACK = Path("secrets/service_account.json")

LISTING_SUBTITLE = "Workers Data Report"
PROGRESS_SUBTITLE = "Verification Progress Over Time Report"
LISTING_SINKS = ("csv", "excel", "pdf", "sheets")
REPORT_FORMATS = ("excel", "pdf", "csv")


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetsTarget:
    spreadsheet_id: str
    worksheet_title: str
    service_account_path: Path


def resolve_sheets_target(
    settings: Settings,
    spreadsheet_id: Optional[str] = None,
    worksheet_title: Optional[str] = None,
    service_account_path: Optional[Path] = None,
) -> SheetsTarget:
    """Combine explicit Sheets options with the GOOGLE_SHEETS_* settings.

    Explicit arguments win. The service account falls back to
    ``secrets/service_account.json`` when neither source names one.
    """

    spreadsheet_id = spreadsheet_id or settings.sheets_spreadsheet_id
    if not spreadsheet_id:
        raise ValueError(
            "The sheets sink needs a spreadsheet_id; pass --spreadsheet-id or set GOOGLE_SHEETS_SPREADSHEET_ID."
        )

    account = service_account_path or (
        Path(settings.sheets_service_account) if settings.sheets_service_account else SHEETS_SERVICE_ACCOUNT_FALLBACK
    )
    if not account.exists():
        raise ValueError(
            f"Google service account key {account} not found; pass --service-account "
            "or set GOOGLE_SHEETS_SERVICE_ACCOUNT."
        )

    return SheetsTarget(
        spreadsheet_id=spreadsheet_id,
        worksheet_title=worksheet_title or settings.sheets_worksheet,
        service_account_path=account,
    )


def load_records(store: PagedSource, settings: Settings) -> LoadResult:
    """Fetch the full table and surface partial-load alerts in the log."""

    result = load_all(store, page_size=settings.store_page_size)
    if result.alerts:
        logger.warning("Encountered %d alerts while loading workers", len(result.alerts))
        for alert in result.alerts:
            logger.warning("Alert: %s", alert)
    return result


def export_listing(
    records: Sequence[WorkerRecord],
    filters: DashboardFilters,
    output_path: Path,
    settings: Settings,
    sink: str = "csv",
    spreadsheet_id: str | None = None,
    worksheet_title: str | None = None,
    service_account_path: Path | None = None,
) -> Path:
    """Filter the collection and write the listing to the chosen sink.

    The ``sheets`` sink writes the CSV copy to ``output_path`` and then replaces
    the target worksheet; no other sink touches Google Sheets.
    """

    if sink not in LISTING_SINKS:
        raise ValueError(f"Unknown sink {sink!r}; expected one of {', '.join(LISTING_SINKS)}")
    sheets_target = (
        resolve_sheets_target(settings, spreadsheet_id, worksheet_title, service_account_path)
        if sink == "sheets"
        else None
    )

    filtered = apply_filters(records, filters)
    rows = records_to_export_rows(filtered, settings.export_date_format)
    logger.info("Exporting %d of %d workers to %s", len(rows), len(records), sink)

    if sink == "excel":
        write_excel(rows, output_path, EXPORT_HEADERS, title=settings.organization_name, subtitle=LISTING_SUBTITLE)
    elif sink == "pdf":
        write_pdf(rows, output_path, EXPORT_HEADERS, title=settings.organization_name, subtitle=LISTING_SUBTITLE)
    else:
        write_csv(rows, output_path, EXPORT_HEADERS)
        if sheets_target is not None:
            written = push_to_google_sheets(
                rows,
                EXPORT_HEADERS,
                spreadsheet_id=sheets_target.spreadsheet_id,
                worksheet_title=sheets_target.worksheet_title,
                service_account_path=sheets_target.service_account_path,
            )
            logger.warning(
                "Pushed %d worker rows with identity numbers to Google Sheets document %s (worksheet %s)",
                written,
                sheets_target.spreadsheet_id,
                sheets_target.worksheet_title,
            )
    logger.info("Wrote %s output to %s", sink, output_path)
    return output_path


def export_progress(records: Sequence[WorkerRecord], output_path: Path, settings: Settings, fmt: str = "pdf") -> Path:
    """Write the verification-over-time report with a closing total row."""

    if fmt not in REPORT_FORMATS:
        raise ValueError(f"Unknown report format {fmt!r}; expected one of {', '.join(REPORT_FORMATS)}")

    factories = factory_keys(records)
    series = compute_series(records, factories)
    headers = series_headers(factories)
    rows = series_to_report_rows(series, factories)

    if fmt == "pdf":
        write_pdf(rows, output_path, headers, title=settings.organization_name, subtitle=PROGRESS_SUBTITLE, total_row=True)
    elif fmt == "excel":
        write_excel(
            rows,
            output_path,
            headers,
            title=settings.organization_name,
            subtitle=PROGRESS_SUBTITLE,
            sheet_title="Verification Progress",
            total_row=True,
        )
    else:
        write_csv(rows, output_path, headers)
    logger.info("Wrote progress report (%d dates) to %s", len(series), output_path)
    return output_path


def run_export(
    store: PagedSource,
    settings: Settings,
    filters: DashboardFilters,
    output_path: Path,
    sink: str = "csv",
    **sheets_options: Any,
) -> Path:
    """Load workers from the store, then export the filtered listing."""

    logger.info("Export starting for table %s", settings.table)
    result = load_records(store, settings)
    if not result.records:
        message = (
            f"No workers loaded from table {settings.table}. "
            "Verify STORE_URL, STORE_KEY, and WORKER_TABLE."
        )
        logger.error(message)
        raise ValueError(message)
    if not result.complete:
        logger.warning("Exporting from an incomplete worker list")
    return export_listing(result.records, filters, output_path, settings, sink=sink, **sheets_options)

