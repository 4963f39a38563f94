"""Session-scoped helpers shared by the portal and dashboard views."""
from typing import List

import streamlit as st

from workerverify.core.config import Settings
from workerverify.core.models import WorkerRecord
from workerverify.processing.pipeline import load_records
from workerverify.store.client import WorkerStore


def rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def session_store(settings: Settings) -> WorkerStore:
    """One HTTP client per browser session."""

    if "store" not in st.session_state:
        st.session_state.store = WorkerStore.from_settings(settings)
    return st.session_state.store


def load_session_records(store: WorkerStore, settings: Settings) -> List[WorkerRecord]:
    """Load the worker table once per session to keep the app responsive."""

    if "records" not in st.session_state:
        with st.spinner("Loading workers..."):
            result = load_records(store, settings)
        st.session_state.records = result.records
        st.session_state.records_complete = result.complete
        st.session_state.load_alerts = result.alerts
    return st.session_state.records


def warn_if_incomplete() -> None:
    if not st.session_state.get("records_complete", True):
        st.warning(
            "Some workers could not be loaded; counts and lookups may be incomplete. "
            "Reload to try again."
        )


def reload_records() -> None:
    for key in ("records", "records_complete", "load_alerts"):
        st.session_state.pop(key, None)
