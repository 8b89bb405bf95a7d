import logging
from datetime import datetime

from config import LOG_FORMAT, LOG_LEVEL
from database import init_db, SessionLocal, Transaction
from transactions import create_transaction

logger = logging.getLogger(__name__)

# (description, amount, type, category, day of month)
SAMPLE_TRANSACTIONS = [
    ("Monthly salary", 3200.00, "income", "salary", 1),
    ("Website redesign", 450.00, "income", "freelance", 3),
    ("Weekly groceries", 86.40, "expense", "groceries", 4),
    ("Electricity bill", 72.15, "expense", "utilities", 5),
    ("Dinner with friends", 54.00, "expense", "dining", 6),
    ("Bus pass", 45.00, "expense", "transportation", 7),
    ("Weekend groceries", 38.75, "expense", "groceries", 8),
]

def seed_transactions(db, now=None) -> int:
    """Insert sample transactions for the current month into an empty table."""
    if db.query(Transaction).first():
        logger.info("Transactions already exist. Skipping seed.")
        return 0

    now = now or datetime.now()
    for description, amount, txn_type, category, day in SAMPLE_TRANSACTIONS:
        create_transaction(
            db,
            description=description,
            amount=amount,
            txn_type=txn_type,
            category=category,
            date=now.replace(day=min(day, now.day), hour=12, minute=0, second=0, microsecond=0),
        )
    logger.info("Database seeded with %d sample transactions.", len(SAMPLE_TRANSACTIONS))
    return len(SAMPLE_TRANSACTIONS)

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    init_db()
    db = SessionLocal()
    try:
        seed_transactions(db)
    finally:
        db.close()
