"""Streamlit entry point: the worker portal plus the passkey-gated dashboard."""
from pathlib import Path

import streamlit as st

# Allow running via "streamlit run workerverify/ui/app.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from workerverify.core.config import load_settings
from workerverify.core.logging import configure_logging
from workerverify.core.session import session_is_valid
from workerverify.ui.common import session_store
from workerverify.ui.dashboard import render_dashboard
from workerverify.ui.portal import render_portal


def main() -> None:
    """Route between the portal and the dashboard for this browser session."""

    configure_logging()
    st.set_page_config(page_title="Worker Verification", layout="wide")
    settings = load_settings()

    try:
        store = session_store(settings)
    except ValueError as exc:
        st.error(str(exc))
        return

    if st.session_state.get("view") == "dashboard":
        session = st.session_state.get("dashboard_session")
        if session_is_valid(session):
            render_dashboard(session, store, settings)
            return
        st.session_state.pop("dashboard_session", None)
        st.session_state.view = "portal"
        st.warning("Your dashboard session has expired. Enter the passkey again.")

    render_portal(store, settings)


if __name__ == "__main__":
    main()
