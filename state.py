"""
state.py
--------
Client-side state for the finance front end.

``FinanceController`` owns a ``FinanceState`` that mirrors the server's
transaction list and summary.  Every mutation is followed by a full
re-fetch of both, so the state is always whatever the server held at the
last fetch.  Failures are logged and remembered in ``last_error``; the
previously loaded data is left untouched.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import pandas as pd
import requests

from schemas import Summary, TransactionIn, TransactionOut

logger = logging.getLogger(__name__)

# pydantic.ValidationError is a ValueError
CLIENT_ERRORS = (requests.RequestException, ValueError)

COLUMNS = ["ID", "Date", "Description", "Amount", "Type", "Category"]


@dataclass
class FinanceState:
    transactions: List[TransactionOut] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    loading: bool = False
    last_error: Optional[str] = None


def transactions_to_df(transactions: List[TransactionOut]) -> pd.DataFrame:
    if not transactions:
        return pd.DataFrame(columns=COLUMNS)

    df = pd.DataFrame(
        [
            {
                "ID": t.id,
                "Date": t.date,
                "Description": t.description,
                "Amount": t.amount,
                "Type": t.type,
                "Category": t.category,
            }
            for t in transactions
        ]
    )
    df["Date"] = pd.to_datetime(df["Date"], errors="coerce")
    return df


def filter_current_month(transactions: List[TransactionOut], now: Optional[datetime] = None) -> List[TransactionOut]:
    """Keep the transactions dated in the same calendar month and year as ``now``."""
    now = now or datetime.now()
    kept = []
    for t in transactions:
        ts = pd.to_datetime(t.date, errors="coerce")
        if pd.isna(ts):
            continue
        if ts.year == now.year and ts.month == now.month:
            kept.append(t)
    return kept


class FinanceController:
    def __init__(self, api):
        self.api = api
        self.state = FinanceState()

    def refresh(self):
        """Fetch the transaction list and the summary in parallel."""
        self.state.last_error = None
        self._fetch()

    def _fetch(self):
        self.state.loading = True
        try:
            with ThreadPoolExecutor(max_workers=2) as pool:
                txns_future = pool.submit(self.api.get_transactions)
                summary_future = pool.submit(self.api.get_summary)
                transactions = txns_future.result()
                summary = summary_future.result()
        except CLIENT_ERRORS as exc:
            self._record_failure("fetching data", exc)
        else:
            self.state.transactions = transactions
            self.state.summary = summary
            logger.debug("Fetched %d transactions, summary %s", len(transactions), summary)
        finally:
            self.state.loading = False

    def _record_failure(self, action: str, exc: Exception):
        logger.error("Error %s: %s", action, exc)
        self.state.last_error = f"Error {action}: {exc}"

    def _mutate(self, action: str, call, *args) -> bool:
        self.state.last_error = None
        ok = True
        try:
            call(*args)
        except CLIENT_ERRORS as exc:
            ok = False
            self._record_failure(action, exc)
        self._fetch()
        return ok

    def add(self, payload: TransactionIn) -> bool:
        return self._mutate("adding transaction", self.api.add_transaction, payload)

    def update(self, txn_id: int, payload: TransactionIn) -> bool:
        return self._mutate("updating transaction", self.api.update_transaction, txn_id, payload)

    def delete(self, txn_id: int) -> bool:
        return self._mutate("deleting transaction", self.api.delete_transaction, txn_id)

    def current_month_transactions(self, now: Optional[datetime] = None) -> List[TransactionOut]:
        return filter_current_month(self.state.transactions, now)

    def find(self, txn_id: int) -> Optional[TransactionOut]:
        return next((t for t in self.state.transactions if t.id == txn_id), None)

    def close(self):
        self.api.close()
