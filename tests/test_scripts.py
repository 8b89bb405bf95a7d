from datetime import datetime

from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from database import Transaction
from migrate_db import migrate_db
from seed_db import SAMPLE_TRANSACTIONS, seed_transactions
from transactions import get_summary


def test_migrate_creates_table_idempotently():
    engine = create_engine("sqlite://", poolclass=StaticPool)

    migrate_db(engine)
    migrate_db(engine)

    assert inspect(engine).has_table("transactions")


def test_seed_fills_empty_table_once(db):
    now = datetime(2024, 5, 20, 9, 0)

    assert seed_transactions(db, now=now) == len(SAMPLE_TRANSACTIONS)
    assert seed_transactions(db, now=now) == 0

    rows = db.query(Transaction).all()
    assert len(rows) == len(SAMPLE_TRANSACTIONS)
    assert all(row.date.startswith("2024-05-") for row in rows)
    assert get_summary(db).total_income == 3650.0
