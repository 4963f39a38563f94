"""Export destinations for worker listings and progress reports."""
from __future__ import annotations

import csv
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence
from xml.sax.saxutils import escape

COLUMN_WIDTHS = {
    "No": 5,
    "Name": 25,
    "NIK": 15,
    "Department": 20,
    "Factory": 10,
    "Status": 12,
    "Verified Date": 15,
    "Date": 12,
    "Total": 10,
}

TITLE_FILL = "2D5F8F"
SUBTITLE_FILL = "4A90E2"
HEADER_FILL = "5BA0F2"
VERIFIED_FILL = "D4EDDA"
UNVERIFIED_FILL = "F8D7DA"
TOTAL_FILL = "C8C8C8"


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path, headers: Sequence[str]) -> None:
    """Write export rows to a CSV file with the given column order."""

    rows = list(rows)
    ensure_output_dir(output_path)
    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=list(headers))
        writer.writeheader()
        writer.writerows(rows)


def excel_bytes(
    rows: Iterable[Dict[str, Any]],
    headers: Sequence[str],
    title: str,
    subtitle: str,
    sheet_title: str = "Workers Data",
    total_row: bool = False,
) -> bytes:
    """Build a styled workbook: title, subtitle, blank row, header row, data."""

    try:
        from openpyxl import Workbook
        from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
        from openpyxl.utils import get_column_letter
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel sinks") from exc

    rows = list(rows)
    headers = list(headers)
    width = len(headers)
    thin = Side(style="thin", color="000000")
    border = Border(top=thin, bottom=thin, left=thin, right=thin)
    centered = Alignment(horizontal="center", vertical="center")

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    for row_index, (text, size, fill, bold) in enumerate(
        ((title, 16, TITLE_FILL, True), (subtitle, 12, SUBTITLE_FILL, False)), start=1
    ):
        cell = sheet.cell(row=row_index, column=1, value=text)
        cell.font = Font(bold=bold, size=size, color="FFFFFF")
        cell.fill = PatternFill("solid", fgColor=fill)
        cell.alignment = centered
        cell.border = border
        sheet.merge_cells(start_row=row_index, start_column=1, end_row=row_index, end_column=width)

    header_row = 4
    for column, header in enumerate(headers, start=1):
        cell = sheet.cell(row=header_row, column=column, value=header)
        cell.font = Font(bold=True, size=11, color="FFFFFF")
        cell.fill = PatternFill("solid", fgColor=HEADER_FILL)
        cell.alignment = centered
        cell.border = border

    for offset, row in enumerate(rows, start=1):
        is_total = total_row and offset == len(rows)
        for column, header in enumerate(headers, start=1):
            value = row.get(header, "")
            cell = sheet.cell(row=header_row + offset, column=column, value=value)
            cell.font = Font(size=10, bold=is_total)
            cell.alignment = Alignment(horizontal="left", vertical="center")
            cell.border = border
            if is_total:
                cell.fill = PatternFill("solid", fgColor=TOTAL_FILL)
            elif header == "Status":
                cell.fill = PatternFill("solid", fgColor=VERIFIED_FILL if value == "Verified" else UNVERIFIED_FILL)

    for column, header in enumerate(headers, start=1):
        sheet.column_dimensions[get_column_letter(column)].width = COLUMN_WIDTHS.get(header, 12)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path, headers: Sequence[str], **options: Any) -> None:
    """Write rows to an Excel workbook using openpyxl."""

    ensure_output_dir(output_path)
    output_path.write_bytes(excel_bytes(rows, headers, **options))


def pdf_bytes(
    rows: Iterable[Dict[str, Any]],
    headers: Sequence[str],
    title: str,
    subtitle: str,
    total_row: bool = False,
) -> bytes:
    """Render rows as a paginated A4 table report with reportlab."""

    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import getSampleStyleSheet
        from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("reportlab is required for PDF sinks") from exc

    rows = list(rows)
    headers = list(headers)
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=subtitle, leftMargin=36, rightMargin=36)
    styles = getSampleStyleSheet()

    data: List[List[str]] = [headers]
    data.extend([str(row.get(header, "")) for header in headers] for row in rows)

    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.Color(41 / 255, 128 / 255, 185 / 255)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ]
    for index in range(2, len(data), 2):
        commands.append(("BACKGROUND", (0, index), (-1, index), colors.Color(245 / 255, 245 / 255, 245 / 255)))
    if total_row and rows:
        commands.append(("BACKGROUND", (0, -1), (-1, -1), colors.Color(200 / 255, 200 / 255, 200 / 255)))
        commands.append(("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"))

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(commands))
    doc.build(
        [
            Paragraph(escape(title), styles["Title"]),
            Paragraph(escape(subtitle), styles["Heading3"]),
            Spacer(1, 12),
            table,
        ]
    )
    return buffer.getvalue()


def write_pdf(rows: Iterable[Dict[str, Any]], output_path: Path, headers: Sequence[str], **options: Any) -> None:
    ensure_output_dir(output_path)
    output_path.write_bytes(pdf_bytes(rows, headers, **options))


def push_to_google_sheets(
    rows: Iterable[Dict[str, Any]],
    headers: Sequence[str],
    spreadsheet_id: str,
    worksheet_title: str,
    service_account_path: Path,
) -> int:
    """Replace a worksheet's contents with ``headers`` plus ``rows``.

    The worksheet is created when the spreadsheet does not have it yet. An
    empty ``rows`` still rewrites the header so stale workers do not linger.
    Returns the number of data rows written.
    """

    try:
        import gspread
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("gspread is required for Google Sheets sinks") from exc

    values = [list(headers)] + [[row.get(header, "") for header in headers] for row in rows]
    spreadsheet = gspread.service_account(filename=str(service_account_path)).open_by_key(spreadsheet_id)
    try:
        worksheet = spreadsheet.worksheet(worksheet_title)
    except gspread.WorksheetNotFound:
        worksheet = spreadsheet.add_worksheet(title=worksheet_title, rows=len(values), cols=len(headers))
    worksheet.clear()
    worksheet.append_rows(values, value_input_option="RAW")
    return len(values) - 1
