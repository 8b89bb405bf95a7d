# dashboard.py — summary card, category chart, transaction list and form

import math
from typing import List, Optional, Tuple

import streamlit as st
import plotly.express as px
import pandas as pd

from schemas import CATEGORIES, Summary, TransactionIn, TransactionOut
from state import transactions_to_df

PAGE_SIZE_OPTIONS = [5, 10, 25]
TYPE_LABELS = {"income": "Income", "expense": "Expense"}


# --- Formatting ---

def format_currency(value: float) -> str:
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"

def format_category(category: str) -> str:
    """'eating-out' -> 'Eating Out'"""
    return " ".join(word[:1].upper() + word[1:] for word in category.split("-"))

def format_amount(txn: TransactionOut) -> str:
    sign = "+" if txn.type == "income" else "-"
    return f"{sign}${abs(txn.amount):,.2f}"

def format_date(value: str) -> str:
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return value
    return ts.strftime("%Y-%m-%d")


# --- Derivations ---

def category_totals(transactions: List[TransactionOut]) -> pd.DataFrame:
    """
    Expense totals per category, largest first.

    Income rows are ignored; amounts are summed as magnitudes and rounded
    to cents.
    """
    df = transactions_to_df(transactions)
    spend_df = df[df["Type"] == "expense"].copy()
    if spend_df.empty:
        return pd.DataFrame(columns=["Category", "Amount"])

    spend_df["Amount"] = spend_df["Amount"].astype(float).abs()
    by_cat = spend_df.groupby("Category", sort=False)["Amount"].sum().round(2)
    by_cat = by_cat.sort_values(ascending=False, kind="stable").reset_index()
    return by_cat

def page_count(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))

def paginate(items: list, page: int, page_size: int) -> list:
    """Zero-based page slice."""
    start = page * page_size
    return items[start:start + page_size]

def is_submittable(description: Optional[str], amount: Optional[float]) -> bool:
    return bool(description and description.strip()) and bool(amount)


# --- Components ---

def summary_card(summary: Summary, loading: bool = False):
    if loading:
        st.info("Loading summary…")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("💰 Total Income", format_currency(summary.total_income))
    col2.metric("💸 Total Expenses", format_currency(summary.total_expenses))
    col3.metric("🏦 Balance", format_currency(summary.balance))

def expense_chart(transactions: List[TransactionOut]):
    """
    Bar chart of this month's spending by category.

    Returns None when there is nothing to plot so the caller can skip it.
    """
    by_cat = category_totals(transactions)
    if by_cat.empty:
        return None

    by_cat["Label"] = by_cat["Category"].map(format_category)
    fig = px.bar(by_cat, x="Label", y="Amount", title="Expenses by Category")
    fig.update_traces(hovertemplate="%{x}: $%{y:,.2f}<extra></extra>")
    fig.update_layout(xaxis_title=None, yaxis_title="Amount ($)", height=350)
    return fig

def _form_defaults(initial: Optional[TransactionOut]) -> dict:
    if initial is None:
        return {"description": "", "amount": 0.0, "type": "expense", "category": "other"}
    return {
        "description": initial.description,
        "amount": float(initial.amount),
        "type": initial.type,
        "category": initial.category,
    }

def _submit_form(key: str, clear: bool):
    """Form callback: stash a valid payload, or flag the input as incomplete."""
    values = {field: st.session_state.get(f"{key}_{field}") for field in ("description", "amount", "type", "category")}
    if not is_submittable(values["description"], values["amount"]):
        st.session_state[f"{key}_invalid"] = True
        return

    st.session_state[f"{key}_payload"] = TransactionIn(**values)
    if clear:
        for field, default in _form_defaults(None).items():
            st.session_state[f"{key}_{field}"] = default

def transaction_form(
    key: str,
    initial: Optional[TransactionOut] = None,
    submit_label: str = "Add Transaction",
    cancellable: bool = False,
) -> Tuple[Optional[TransactionIn], bool]:
    """
    Entry/edit form.

    Returns ``(payload, cancelled)``; ``payload`` is set only when the form
    was submitted with a description and an amount.  A create form
    (``initial=None``) is cleared after a valid submission; rejected input
    is left in place.
    """
    categories = list(CATEGORIES)
    if initial is not None and initial.category not in CATEGORIES:
        categories.append(initial.category)
    for field, default in _form_defaults(initial).items():
        if f"{key}_{field}" not in st.session_state:
            st.session_state[f"{key}_{field}"] = default

    with st.form(key):
        col1, col2 = st.columns(2)
        col1.text_input("Description", key=f"{key}_description")
        col2.number_input("Amount ($)", min_value=0.0, step=0.01, format="%.2f", key=f"{key}_amount")
        col3, col4 = st.columns(2)
        col3.selectbox("Type", list(TYPE_LABELS), format_func=TYPE_LABELS.get, key=f"{key}_type")
        col4.selectbox(
            "Category",
            categories,
            format_func=lambda c: CATEGORIES.get(c, format_category(c)),
            key=f"{key}_category",
        )

        st.form_submit_button(submit_label, type="primary", on_click=_submit_form, args=(key, initial is None))
        cancelled = st.form_submit_button("Cancel") if cancellable else False

    if st.session_state.pop(f"{key}_invalid", False):
        st.warning("Enter a description and an amount.")
    return st.session_state.pop(f"{key}_payload", None), cancelled

def _reset_page(page_key: str):
    st.session_state[page_key] = 1

def transaction_list(transactions: List[TransactionOut], loading: bool = False, key: str = "txn_list"):
    """
    Paginated transaction table with edit/delete buttons per row.

    Returns ``("edit", id)`` or ``("delete", id)`` when a button was
    pressed on this run, otherwise None.
    """
    if loading and not transactions:
        st.info("Loading transactions…")
        return None
    if not transactions:
        st.info("No transactions found. Add one to get started!")
        return None

    page_key = f"{key}_page"
    size_col, page_col = st.columns(2)
    page_size = size_col.selectbox(
        "Rows per page",
        PAGE_SIZE_OPTIONS,
        key=f"{key}_page_size",
        on_change=_reset_page,
        args=(page_key,),
    )
    pages = page_count(len(transactions), page_size)
    if st.session_state.get(page_key, 1) > pages:
        st.session_state[page_key] = pages
    page = page_col.number_input("Page", min_value=1, max_value=pages, step=1, key=page_key)

    widths = [2, 4, 2, 2, 2, 1, 1]
    header = st.columns(widths)
    for col, label in zip(header, ["Date", "Description", "Category", "Type", "Amount", "", ""]):
        col.markdown(f"**{label}**")

    action = None
    for txn in paginate(transactions, int(page) - 1, page_size):
        row = st.columns(widths)
        row[0].write(format_date(txn.date))
        row[1].write(txn.description)
        row[2].write(CATEGORIES.get(txn.category, format_category(txn.category)))
        row[3].write(TYPE_LABELS.get(txn.type, txn.type))
        color = "green" if txn.type == "income" else "red"
        amount_text = format_amount(txn).replace("$", r"\$")
        row[4].markdown(f":{color}[{amount_text}]")
        if row[5].button("✏️", key=f"{key}_edit_{txn.id}", help="Edit"):
            action = ("edit", txn.id)
        if row[6].button("🗑️", key=f"{key}_delete_{txn.id}", help="Delete"):
            action = ("delete", txn.id)

    st.caption(f"{len(transactions)} transactions • page {int(page)} of {pages}")
    return action
