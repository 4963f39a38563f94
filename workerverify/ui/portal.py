"""Worker-facing verification view."""
from typing import List, Optional

import streamlit as st

from workerverify.core.config import Settings
from workerverify.core.errors import TransportError
from workerverify.core.models import WorkerRecord
from workerverify.core.session import open_session
from workerverify.processing.aggregation import factory_keys
from workerverify.processing.matcher import policy_for
from workerverify.processing.verification import VerificationFlow, VerificationStatus, replace_record
from workerverify.reporting.templates import factory_label, status_label
from workerverify.store.client import WorkerStore, fetch_document
from workerverify.ui.common import load_session_records, rerun_app, warn_if_incomplete


def _verification_flow(store: WorkerStore, settings: Settings) -> VerificationFlow:
    if "verification_flow" not in st.session_state:
        st.session_state.verification_flow = VerificationFlow(
            store,
            policy=policy_for(settings.match_policy, settings.match_case_sensitive),
            delay=settings.verify_delay,
            guard=settings.update_guard,
        )
    return st.session_state.verification_flow


def _handbook_bytes(settings: Settings) -> Optional[bytes]:
    """Download the handbook once per session; ``None`` when unavailable."""

    if "handbook" not in st.session_state:
        try:
            st.session_state.handbook = fetch_document(settings.handbook_url, timeout=settings.store_timeout)
        except TransportError:
            st.session_state.handbook = None
    return st.session_state.handbook


def _verification_form(records: List[WorkerRecord], flow: VerificationFlow) -> None:
    st.title("Worker Verification")
    st.caption("Enter your NIK/KTP to verify and access documents")

    factories = factory_keys(records)
    with st.form("verify_form"):
        factory = st.radio(
            "Select Factory",
            options=factories,
            index=None,
            format_func=factory_label,
            horizontal=True,
        )
        identifier = st.text_input("NIK/KTP", placeholder="Enter full NIK or KTP")
        st.caption("Only registered workers can access this document.")
        submitted = st.form_submit_button("Verify and Access Document", type="primary", use_container_width=True)

    if flow.state.status == VerificationStatus.ERROR and flow.state.error:
        st.error(flow.state.error)

    if submitted:
        with st.spinner("Verifying your credentials..."):
            state = flow.submit(records, factory, identifier)
        if state.status == VerificationStatus.SUCCESS:
            st.session_state.records = replace_record(records, state.worker)
        rerun_app()


def _worker_details(worker: WorkerRecord, flow: VerificationFlow, settings: Settings) -> None:
    st.title("Worker Information")
    st.caption("Details of the verified worker")

    left, right = st.columns(2)
    with left:
        st.metric("Name", worker.name)
        st.metric("Department", worker.department)
        st.markdown(f"**NIK**  \n`{worker.nik}`")
        st.markdown(f"**KTP**  \n`{worker.ktp}`")
    with right:
        st.metric("Factory", factory_label(worker.factory))
        verified_at = worker.verified_at.strftime("%d/%m/%Y %H:%M:%S") if worker.verified_at else "N/A"
        st.metric("Verified Date", verified_at)
        badge = "🟢" if worker.verified else "🔴"
        st.markdown(f"**Status**  \n{badge} {status_label(worker.verified)}")

    st.divider()
    st.subheader("Document")
    if settings.handbook_url:
        handbook = _handbook_bytes(settings)
        if handbook:
            st.download_button(
                "Download PDF",
                data=handbook,
                file_name="handbook.pdf",
                mime="application/pdf",
            )
        else:
            st.link_button("Open handbook", settings.handbook_url)
    else:
        st.info("No handbook is configured.")

    st.divider()
    if st.button("E X I T", type="secondary"):
        flow.reset()
        rerun_app()


def _passkey_gate(settings: Settings) -> None:
    with st.sidebar.expander("Dashboard"):
        passkey = st.text_input("Passkey", type="password", key="passkey_input")
        if st.button("Submit", key="passkey_submit"):
            session = open_session(passkey, settings)
            if session is None:
                st.error("Invalid passkey. Please try again.")
                return
            st.session_state.dashboard_session = session
            st.session_state.view = "dashboard"
            st.session_state.pop("passkey_input", None)
            rerun_app()


def render_portal(store: WorkerStore, settings: Settings) -> None:
    """Render the verification form or, after success, the worker's details."""

    records = load_session_records(store, settings)
    warn_if_incomplete()
    flow = _verification_flow(store, settings)

    if flow.state.status == VerificationStatus.SUCCESS and flow.state.worker:
        _worker_details(flow.state.worker, flow, settings)
    else:
        _verification_form(records, flow)

    _passkey_gate(settings)
