import logging
import sys
from datetime import datetime
from pathlib import Path

import streamlit as st

# Add current directory to path
sys.path.append(str(Path(__file__).parent))

from api_client import FinanceAPI
from config import API_URL, LOG_FORMAT, LOG_LEVEL
from dashboard import expense_chart, summary_card, transaction_form, transaction_list
from state import FinanceController

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

# --- Configuration ---
st.set_page_config(page_title="Home Finance Manager", layout="centered", page_icon="💰")

# --- Client State ---
if "controller" not in st.session_state:
    controller = FinanceController(FinanceAPI(API_URL))
    # The first fetch runs after this render so the loading placeholders show.
    controller.state.loading = True
    st.session_state.controller = controller
    st.session_state.editing_id = None

controller: FinanceController = st.session_state.controller
state = controller.state


def close_editor(txn_id: int):
    st.session_state.editing_id = None
    for name in [k for k in st.session_state if str(k).startswith(f"edit_transaction_{txn_id}_")]:
        del st.session_state[name]


def edit_panel(txn_id: int):
    txn = controller.find(txn_id)
    if txn is None:
        st.warning("This transaction no longer exists.")
        close_editor(txn_id)
        return

    with st.container(border=True):
        st.markdown(f"**✏️ Edit Transaction** · {txn.description}")
        payload, cancelled = transaction_form(
            f"edit_transaction_{txn_id}",
            initial=txn,
            submit_label="Save Changes",
            cancellable=True,
        )
        if cancelled:
            close_editor(txn_id)
            st.rerun()
        if payload is not None:
            with st.spinner("Saving..."):
                saved = controller.update(txn_id, payload)
            if saved:
                close_editor(txn_id)
                st.rerun()
            st.error(state.last_error)


# Sidebar
with st.sidebar:
    st.header("Session")
    st.caption(f"API: `{API_URL}`")
    if st.button("🔄 Reload data", use_container_width=True):
        controller.close()
        del st.session_state["controller"]
        st.rerun()

# --- Main App ---
st.title("💰 Home Finance Manager")
st.caption(datetime.now().strftime("%B %Y"))

if state.last_error and st.session_state.get("editing_id") is None:
    st.warning(f"{state.last_error}. Showing the last data loaded.")

summary_card(state.summary, loading=state.loading)

fig = expense_chart(controller.current_month_transactions())
if fig is not None:
    st.plotly_chart(fig, use_container_width=True)

st.subheader("➕ Add New Transaction")
new_payload, _ = transaction_form("add_transaction")
if new_payload is not None:
    with st.spinner("Adding..."):
        controller.add(new_payload)
    st.rerun()

st.subheader("Transactions")
if st.session_state.get("editing_id") is not None:
    edit_panel(st.session_state.editing_id)

action = transaction_list(state.transactions, loading=state.loading)
if action is not None:
    kind, txn_id = action
    if kind == "delete":
        with st.spinner("Deleting..."):
            controller.delete(txn_id)
    else:
        st.session_state.editing_id = txn_id
    st.rerun()

if state.loading:
    controller.refresh()
    st.rerun()
