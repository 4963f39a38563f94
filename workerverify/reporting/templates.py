"""Row templates handed to the export encoders."""
from typing import Any, Dict, Iterable, List, Sequence

from workerverify.core.models import SeriesRow, WorkerRecord
from workerverify.processing.aggregation import series_totals

DEFAULT_DATE_FORMAT = "%d/%m/%Y"

EXPORT_HEADERS = [
    "No",
    "Name",
    "NIK",
    "Department",
    "Factory",
    "Status",
    "Verified Date",
]

VERIFIED_LABEL = "Verified"
UNVERIFIED_LABEL = "Unverified"


def factory_label(factory: str) -> str:
    return f"Factory {factory}"


def status_label(verified: bool) -> str:
    return VERIFIED_LABEL if verified else UNVERIFIED_LABEL


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def record_to_export_row(record: WorkerRecord, number: int, date_format: str = DEFAULT_DATE_FORMAT) -> Dict[str, Any]:
    """Convert a worker into the listing export dictionary."""

    return {
        "No": number,
        "Name": _clean_text(record.name),
        "NIK": record.nik,
        "Department": _clean_text(record.department),
        "Factory": factory_label(record.factory),
        "Status": status_label(record.verified),
        "Verified Date": record.verified_at.strftime(date_format) if record.verified_at else "N/A",
    }


def records_to_export_rows(records: Iterable[WorkerRecord], date_format: str = DEFAULT_DATE_FORMAT) -> List[Dict[str, Any]]:
    """Number the filtered records from 1 and convert each to an export row."""

    return [record_to_export_row(record, index, date_format) for index, record in enumerate(records, start=1)]


def series_headers(factories: Sequence[str]) -> List[str]:
    return ["No", "Date", *[factory_label(factory) for factory in factories], "Total"]


def series_to_report_rows(series: Sequence[SeriesRow], factories: Sequence[str]) -> List[Dict[str, Any]]:
    """Progress report rows, one per date, closed by a ``Total`` row."""

    rows: List[Dict[str, Any]] = []
    for index, entry in enumerate(series, start=1):
        row: Dict[str, Any] = {"No": index, "Date": entry.date}
        for factory in factories:
            row[factory_label(factory)] = entry.counts.get(factory, 0)
        row["Total"] = sum(entry.counts.get(factory, 0) for factory in factories)
        rows.append(row)

    totals = series_totals(series)
    total_row: Dict[str, Any] = {"No": "", "Date": "Total"}
    for factory in factories:
        total_row[factory_label(factory)] = totals.get(factory, 0)
    total_row["Total"] = sum(totals.get(factory, 0) for factory in factories)
    rows.append(total_row)
    return rows
