from datetime import datetime
from sqlalchemy import create_engine, CheckConstraint, Column, Integer, String, Float
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DATABASE_URL

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Database Setup
# Default to a local SQLite file, but allow override (e.g. Postgres)
DB_URL = DATABASE_URL

engine = create_engine(DB_URL, connect_args={"check_same_thread": False} if "sqlite" in DB_URL else {})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def current_timestamp() -> str:
    return datetime.now().strftime(DATE_FORMAT)

# --- Models ---

class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
        {"sqlite_autoincrement": True},  # ids are never reused
    )

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String, nullable=False)
    amount = Column(Float, nullable=False)  # magnitude, sign comes from type
    type = Column(String(10), nullable=False)  # 'income' or 'expense'
    category = Column(String, nullable=False)
    date = Column(String, nullable=False, default=current_timestamp)

    def __repr__(self):
        return f"<Transaction id={self.id} {self.type} {self.amount} {self.category!r}>"

# --- Init DB ---
def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
