"""
transactions.py
---------------
Persistence operations for the ``transactions`` table: create, update,
delete, list and the income/expense summary.

Every function takes an open SQLAlchemy ``Session``.  Validation problems
raise ``InvalidTransactionError``, a missing update target raises
``TransactionNotFoundError`` and any database failure is rolled back and
re-raised as ``StoreError`` with the driver message.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from datetime import date as date_type, datetime
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import DATE_FORMAT, Transaction
from schemas import Summary

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ("income", "expense")


class TransactionError(Exception):
    """Base class for store errors."""


class InvalidTransactionError(TransactionError):
    pass


class TransactionNotFoundError(TransactionError):
    def __init__(self, txn_id: int):
        super().__init__(f"Transaction {txn_id} not found")
        self.txn_id = txn_id


class StoreError(TransactionError):
    pass


@contextmanager
def _store_errors(db: Session, action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed %s: %s", action, exc)
        raise StoreError(str(exc)) from exc


def _normalize_date(value) -> Optional[str]:
    """Format a supplied date as a naive local timestamp string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date_type):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidTransactionError(f"date must be an ISO 8601 date or datetime, got {value!r}")
    # Offsets are converted to local time; stored strings carry no zone.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed.strftime(DATE_FORMAT)


def _clean_fields(description, amount, txn_type, category) -> dict:
    """Check required fields and return them normalized for storage."""
    if description is None or not str(description).strip():
        raise InvalidTransactionError("description is required")
    if category is None or not str(category).strip():
        raise InvalidTransactionError("category is required")
    if txn_type not in TRANSACTION_TYPES:
        raise InvalidTransactionError(f"type must be one of {', '.join(TRANSACTION_TYPES)}, got {txn_type!r}")
    if amount is None or amount == "":
        raise InvalidTransactionError("amount is required")
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise InvalidTransactionError(f"amount must be a number, got {amount!r}")
    if not math.isfinite(amount) or amount == 0:
        raise InvalidTransactionError("amount must be a non-zero finite number")

    return {
        "description": str(description).strip(),
        "amount": abs(amount),
        "type": txn_type,
        "category": str(category).strip(),
    }


def create_transaction(
    db: Session,
    description: str,
    amount: float,
    txn_type: str,
    category: str,
    date=None,
) -> Transaction:
    fields = _clean_fields(description, amount, txn_type, category)
    txn_date = _normalize_date(date)
    if txn_date is not None:
        fields["date"] = txn_date

    txn = Transaction(**fields)
    with _store_errors(db, "creating transaction"):
        db.add(txn)
        db.commit()
        db.refresh(txn)
    logger.info("Created transaction %s (%s %.2f)", txn.id, txn.type, txn.amount)
    return txn


def update_transaction(
    db: Session,
    txn_id: int,
    description: str,
    amount: float,
    txn_type: str,
    category: str,
    date=None,
) -> Transaction:
    """Replace every mutable field of an existing transaction.

    ``date`` is optional; when omitted the stored date is kept.
    """
    fields = _clean_fields(description, amount, txn_type, category)
    txn_date = _normalize_date(date)
    if txn_date is not None:
        fields["date"] = txn_date

    with _store_errors(db, f"updating transaction {txn_id}"):
        txn = db.query(Transaction).filter(Transaction.id == txn_id).first()
        if txn is None:
            raise TransactionNotFoundError(txn_id)
        for name, value in fields.items():
            setattr(txn, name, value)
        db.commit()
        db.refresh(txn)
    logger.info("Updated transaction %s", txn_id)
    return txn


def delete_transaction(db: Session, txn_id: int) -> int:
    """Delete a transaction and return the number of rows removed (0 or 1)."""
    with _store_errors(db, f"deleting transaction {txn_id}"):
        count = db.query(Transaction).filter(Transaction.id == txn_id).delete()
        db.commit()
    logger.info("Deleted transaction %s (%d row(s))", txn_id, count)
    return count


def list_transactions(db: Session) -> List[Transaction]:
    with _store_errors(db, "listing transactions"):
        return (
            db.query(Transaction)
            .order_by(Transaction.date.desc(), Transaction.id.desc())
            .all()
        )


def get_summary(db: Session) -> Summary:
    """Totals over the whole table, computed in a single aggregate query."""
    income = func.coalesce(
        func.sum(case((Transaction.type == "income", Transaction.amount), else_=0)), 0
    )
    expense = func.coalesce(
        func.sum(case((Transaction.type == "expense", Transaction.amount), else_=0)), 0
    )
    with _store_errors(db, "computing summary"):
        row = db.query(income.label("income"), expense.label("expense")).one()

    total_income = float(row.income or 0)
    total_expenses = float(row.expense or 0)
    return Summary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
    )
