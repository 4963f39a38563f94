"""Passkey-gated dashboard: counts, progress chart, filtered listing, exports."""
from typing import List

import streamlit as st

from workerverify.core.config import Settings
from workerverify.core.models import SeriesRow, VerificationStats, WorkerRecord
from workerverify.core.session import DashboardSession
from workerverify.processing.aggregation import compute_series, compute_stats, factory_keys
from workerverify.processing.pipeline import LISTING_SUBTITLE, PROGRESS_SUBTITLE
from workerverify.processing.views import (
    DashboardFilters,
    ListingState,
    StatusFilter,
    apply_filters,
    department_options,
    paginate,
    reconcile_filters,
)
from workerverify.reporting.sinks import excel_bytes, pdf_bytes
from workerverify.reporting.templates import (
    EXPORT_HEADERS,
    factory_label,
    record_to_export_row,
    records_to_export_rows,
    series_headers,
    series_to_report_rows,
)
from workerverify.store.client import WorkerStore
from workerverify.ui.common import load_session_records, reload_records, rerun_app, warn_if_incomplete

ALL = "All"


def _stat_cards(stats: VerificationStats, factories: List[str]) -> None:
    """Render the total/verified/unverified cards with per-factory captions."""

    columns = st.columns(3)
    for column, (label, breakdown) in zip(
        columns,
        (("Total workers", stats.total), ("Verified", stats.verified), ("Unverified", stats.unverified)),
    ):
        column.metric(label, breakdown.overall)
        column.caption(" | ".join(f"{factory_label(f)}: {breakdown.by_factory.get(f, 0)}" for f in factories))

    ratio = stats.verified.overall / stats.total.overall if stats.total.overall else 0
    st.progress(ratio)
    st.caption(f"{stats.verified.overall} of {stats.total.overall} workers verified")


def _progress_chart(series: List[SeriesRow], factories: List[str], settings: Settings) -> None:
    st.subheader("Verification progress over time")
    if not series:
        st.info("No verifications recorded yet.")
        return

    labels = [factory_label(f) for f in factories]
    chart_rows = [
        {"date": row.date, **{factory_label(f): row.counts.get(f, 0) for f in factories}} for row in series
    ]
    st.line_chart(chart_rows, x="date", y=labels)

    report_rows = series_to_report_rows(series, factories)
    headers = series_headers(factories)
    cols = st.columns(2)
    cols[0].download_button(
        "Export progress PDF",
        data=pdf_bytes(report_rows, headers, title=settings.organization_name, subtitle=PROGRESS_SUBTITLE, total_row=True),
        file_name="verification-progress.pdf",
        mime="application/pdf",
    )
    cols[1].download_button(
        "Export progress Excel",
        data=excel_bytes(
            report_rows,
            headers,
            title=settings.organization_name,
            subtitle=PROGRESS_SUBTITLE,
            sheet_title="Verification Progress",
            total_row=True,
        ),
        file_name="verification-progress.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def _read_filters(records: List[WorkerRecord], factories: List[str]) -> DashboardFilters:
    """Render the filter widgets and return the reconciled filters."""

    st.session_state.setdefault("filter_department", ALL)
    factory_choice = st.session_state.get("filter_factory", ALL)
    current = DashboardFilters(
        factory=None if factory_choice == ALL else factory_choice,
        department=None if st.session_state["filter_department"] == ALL else st.session_state["filter_department"],
    )
    if reconcile_filters(records, current).department is None:
        st.session_state["filter_department"] = ALL

    cols = st.columns([1, 1, 1, 1.5])
    status = cols[0].selectbox(
        "Status",
        options=[choice.value for choice in StatusFilter],
        format_func=str.capitalize,
        key="filter_status",
    )
    factory = cols[1].selectbox(
        "Factory",
        options=[ALL, *factories],
        format_func=lambda value: value if value == ALL else factory_label(value),
        key="filter_factory",
    )
    department = cols[2].selectbox(
        "Department",
        options=[ALL, *department_options(records, None if factory == ALL else factory)],
        key="filter_department",
    )
    search = cols[3].text_input("Search name or NIK", key="filter_search")

    return DashboardFilters(
        status=StatusFilter(status),
        factory=None if factory == ALL else factory,
        department=None if department == ALL else department,
        search=search.strip(),
    )


def _worker_listing(records: List[WorkerRecord], factories: List[str], settings: Settings) -> None:
    st.subheader("Worker data")
    filters = _read_filters(records, factories)

    listing: ListingState = st.session_state.get("listing_state", ListingState())
    listing = listing.with_filters(filters)
    filtered = apply_filters(records, filters)
    page = paginate(filtered, settings.dashboard_page_size, listing.page)
    st.session_state.listing_state = listing.with_page(page.number)

    if page.items:
        rows = [
            record_to_export_row(record, page.start_index + offset, settings.export_date_format)
            for offset, record in enumerate(page.items, start=1)
        ]
        st.dataframe(rows, use_container_width=True, hide_index=True, column_order=EXPORT_HEADERS)
    else:
        st.info("No workers match the current filters.")

    nav = st.columns([1, 2, 1])
    if nav[0].button("⬅️", disabled=page.number <= 1, help="Previous page"):
        st.session_state.listing_state = listing.with_page(page.number - 1)
        rerun_app()
    nav[1].markdown(
        f"<p style='text-align:center;'>Showing {len(page.items)} of {page.total_items} workers<br />"
        f"Page {page.number} of {max(page.total_pages, 1)}</p>",
        unsafe_allow_html=True,
    )
    if nav[2].button("➡️", disabled=page.number >= page.total_pages, help="Next page"):
        st.session_state.listing_state = listing.with_page(page.number + 1)
        rerun_app()

    export_rows = records_to_export_rows(filtered, settings.export_date_format)
    cols = st.columns(2)
    cols[0].download_button(
        "Export PDF",
        data=pdf_bytes(export_rows, EXPORT_HEADERS, title=settings.organization_name, subtitle=LISTING_SUBTITLE),
        file_name="workers-data.pdf",
        mime="application/pdf",
    )
    cols[1].download_button(
        "Export Excel",
        data=excel_bytes(export_rows, EXPORT_HEADERS, title=settings.organization_name, subtitle=LISTING_SUBTITLE),
        file_name="workers-data.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def render_dashboard(session: DashboardSession, store: WorkerStore, settings: Settings) -> None:
    """Render the dashboard for an active ``session``."""

    header = st.columns([4, 1, 1])
    header[0].title("Verification Dashboard")
    if header[1].button("Reload data", type="secondary"):
        reload_records()
        rerun_app()
    if header[2].button("Back to portal", type="secondary"):
        st.session_state.view = "portal"
        rerun_app()
    if session.expires_at:
        st.caption(f"Session expires {session.expires_at:%d/%m/%Y %H:%M} UTC")

    records = load_session_records(store, settings)
    warn_if_incomplete()
    factories = factory_keys(records)

    _stat_cards(compute_stats(records, factories), factories)
    if st.toggle("Show chart", value=True):
        _progress_chart(compute_series(records, factories), factories, settings)
    _worker_listing(records, factories, settings)
