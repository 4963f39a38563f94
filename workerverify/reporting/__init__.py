"""Export row templates and sinks."""
from workerverify.reporting.sinks import (
    ensure_output_dir,
    excel_bytes,
    pdf_bytes,
    push_to_google_sheets,
    write_csv,
    write_excel,
    write_pdf,
)
from workerverify.reporting.templates import (
    EXPORT_HEADERS,
    record_to_export_row,
    records_to_export_rows,
    series_headers,
    series_to_report_rows,
)

__all__ = [
    "EXPORT_HEADERS",
    "ensure_output_dir",
    "excel_bytes",
    "pdf_bytes",
    "push_to_google_sheets",
    "record_to_export_row",
    "records_to_export_rows",
    "series_headers",
    "series_to_report_rows",
    "write_csv",
    "write_excel",
    "write_pdf",
]
