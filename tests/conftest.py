"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from finance_gateway.api.main import create_app
from finance_gateway.infrastructure.database.models import Base
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.infrastructure.database.session import build_engine, get_db
from finance_gateway.infrastructure.database.sql_store import SqlRowStore
from finance_gateway.domain.models import Account, Debt, Transaction


USER_ID = "user-1"

# Test database: one in-memory sqlite shared by every session
engine = build_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> SqlRowStore:
    return SqlRowStore(db)


@pytest.fixture
def repos(store: SqlRowStore) -> Repositories:
    return Repositories(store, USER_ID)


@pytest.fixture
def app(db: Session):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Test client authenticated as USER_ID"""
    client = TestClient(app)
    client.headers.update({"X-User-ID": USER_ID})
    return client


@pytest.fixture
def anonymous_client(app) -> TestClient:
    return TestClient(app)


def make_account(**overrides) -> Account:
    values = dict(id="acc-1", user_id=USER_ID, name="Checking", type="checking", balance=Decimal("1000.00"))
    values.update(overrides)
    return Account(**values)


def make_transaction(**overrides) -> Transaction:
    values = dict(
        id="txn-1",
        user_id=USER_ID,
        account_id="acc-1",
        type="expense",
        amount=Decimal("50.00"),
        date=date(2024, 3, 10),
        category_id="cat-food",
        description="Groceries",
    )
    values.update(overrides)
    return Transaction(**values)


def make_debt(**overrides) -> Debt:
    values = dict(
        id="debt-1",
        user_id=USER_ID,
        name="Car loan",
        type="financing",
        creditor="Bank",
        original_amount=Decimal("1200.00"),
        current_balance=Decimal("1200.00"),
        interest_rate=Decimal("2"),
        monthly_payment=Decimal("113.47"),
        start_date=date(2024, 1, 15),
        total_installments=12,
        due_day=15,
    )
    values.update(overrides)
    return Debt(**values)
