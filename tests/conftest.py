import os

# Keep the module-level engine off the real database file.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from schemas import TransactionOut
from server import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_txn():
    """Build client-side transactions without going through the API."""
    counter = {"id": 0}

    def _make(amount, category, txn_type="expense", date="2024-05-10 12:00:00", description="item"):
        counter["id"] += 1
        return TransactionOut(
            id=counter["id"],
            description=description,
            amount=amount,
            type=txn_type,
            category=category,
            date=date,
        )

    return _make
