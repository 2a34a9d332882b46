# app.py
import asyncio
import logging

import streamlit as st

from tax_lookup import config
from tax_lookup.loader import DatasetStore
from tax_lookup.models import LoadingState, MessageType
from tax_lookup.report import format_currency, format_number, render_text_report
from tax_lookup.session import SessionGate
from tax_lookup.state import LookupController

logging.basicConfig(level=logging.INFO)

st.set_page_config(
    page_title="Tax Invoice Lookup",
    layout="wide",
    page_icon="🧾",
)

# st.session_state is scoped to this browser tab
gate = SessionGate(st.session_state)


def _controller() -> LookupController:
    if "controller" not in st.session_state:
        st.session_state["controller"] = LookupController(DatasetStore(), gate)
    ctrl = st.session_state["controller"]
    ctrl.gate = gate
    return ctrl


@st.dialog("AI insight unavailable")
def config_alert(ctrl: LookupController):
    st.write(
        f"No **{config.GEMINI_API_KEY_ENV}** found on the server. "
        "Set the environment variable to use AI analysis."
    )
    if st.button("Got it"):
        ctrl.dismiss_config_alert()
        st.rerun()


# ============================================================
# LOGIN SCREEN
# ============================================================
if not gate.is_authenticated:
    st.title("🔒 Tax Invoice Lookup")
    st.caption("Internal access portal")

    with st.form("login", clear_on_submit=True):
        password = st.text_input("Access password", type="password")
        submitted = st.form_submit_button("Verify")

    if submitted:
        if _controller().login(password).authenticated:
            st.rerun()

    if gate.consume_login_error():
        st.error("Wrong password!")
    st.stop()


ctrl = _controller()
if not ctrl.state.load_attempted:
    with st.spinner("Loading tax data..."):
        asyncio.run(ctrl.load())


# ============================================================
# SIDEBAR → STATS + LOGOUT
# ============================================================
stats = ctrl.state.stats
st.sidebar.header("📊 Dataset")
st.sidebar.metric("Businesses", format_number(stats.total_records))
st.sidebar.metric("Invoices", format_number(stats.total_invoices))

if st.sidebar.button("Reload data"):
    with st.spinner("Loading tax data..."):
        asyncio.run(ctrl.load())

if st.sidebar.button("Log out"):
    ctrl.logout()
    st.rerun()


# ============================================================
# SEARCH
# ============================================================
st.title("🧾 Tax Invoice Lookup")

with st.form("search"):
    term = st.text_input("Tax ID", value=ctrl.state.search_term, placeholder="Enter a tax ID...")
    do_search = st.form_submit_button(
        "Search", disabled=ctrl.state.loading == LoadingState.SEARCHING
    )

if do_search and term.strip():
    with st.spinner("Searching..."):
        asyncio.run(ctrl.search(term))

msg = ctrl.state.message
if msg.text:
    if msg.type == MessageType.ERROR:
        st.error(msg.text)
    else:
        st.success(msg.text)


# ============================================================
# RESULT + AI INSIGHT
# ============================================================
record = ctrl.state.search_result
if record is not None:
    left, right = st.columns([2, 1])

    with left:
        st.subheader(record.name)
        st.caption(f"Tax ID {record.tax_id} · Tax office {record.authority_code}")
        c1, c2, c3 = st.columns(3)
        c1.metric("Invoices", format_number(record.invoice_count))
        c2.metric("Tax amount", format_currency(record.tax_amount))
        c3.metric("Gross amount", format_currency(record.total_amount))

        st.download_button(
            "Export report",
            data=render_text_report(record, ctrl.state.ai_insight),
            file_name=f"report_{record.tax_id}.txt",
            mime="text/plain",
        )

    with right:
        st.subheader("🤖 AI insight")
        if ctrl.state.ai_insight:
            st.markdown(f"> {ctrl.state.ai_insight}")
        elif st.button(
            "Generate AI insight",
            disabled=ctrl.state.loading == LoadingState.AI_ANALYZING,
        ):
            with st.spinner("Analyzing..."):
                asyncio.run(ctrl.request_insight())
            st.rerun()

if ctrl.state.show_config_alert:
    config_alert(ctrl)
