"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_analytics.api.main import create_app
from finance_analytics.infrastructure.database.models import Base
from finance_analytics.infrastructure.database.session import get_db
from finance_analytics.domain.models import (
    Budget,
    BudgetPeriod,
    CategoryAllocation,
    Contribution,
    Goal,
    Record,
    TransactionType,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

AS_OF = date(2024, 6, 15)


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
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def sample_records() -> list[Record]:
    """Six months of salary, freelance income, rent and groceries"""
    records = []
    for month in range(1, 7):
        records.append(
            Record(
                transaction_id=f"salary_{month}",
                amount=3000.0,
                type=TransactionType.INCOME,
                date=date(2024, month, 1),
                category_id="salary",
                payee="Employer",
                account_id="checking",
            )
        )
        records.append(
            Record(
                transaction_id=f"rent_{month}",
                amount=1200.0,
                type=TransactionType.EXPENSE,
                date=date(2024, month, 3),
                category_id="housing",
                payee="Landlord",
                account_id="checking",
            )
        )
        records.append(
            Record(
                transaction_id=f"groceries_{month}",
                amount=300.0 + month * 20,
                type=TransactionType.EXPENSE,
                date=date(2024, month, 10),
                category_id="groceries",
                payee="Supermarket",
                account_id="checking",
            )
        )

    # Irregular side income
    for i, amount in enumerate([400.0, 900.0]):
        records.append(
            Record(
                transaction_id=f"freelance_{i}",
                amount=amount,
                type=TransactionType.INCOME,
                date=date(2024, 2 + i * 2, 20),
                category_id="freelance",
                payee="Client Co",
                account_id="savings",
            )
        )

    return records


@pytest.fixture
def sample_budget() -> Budget:
    """June budget 1000 total, 900 spent, evaluated 20 of 30 days in"""
    return Budget(
        budget_id="budget_june",
        name="June Spending",
        total_amount=1000.0,
        period=BudgetPeriod.MONTHLY,
        start_date=date(2024, 6, 1),
        end_date=date(2024, 7, 1),
        category_allocations=(
            CategoryAllocation("groceries", 600.0, 540.0, "Groceries"),
            CategoryAllocation("dining", 400.0, 360.0, "Dining"),
        ),
    )


@pytest.fixture
def sample_goal() -> Goal:
    """Emergency fund: 10,000 target over 2024, 4,000 saved by mid June"""
    return Goal(
        goal_id="goal_emergency",
        name="Emergency Fund",
        target_amount=10000.0,
        current_amount=4000.0,
        start_date=date(2024, 1, 1),
        target_date=date(2024, 12, 31),
        contributions=tuple(Contribution(amount=800.0, date=date(2024, m, 5)) for m in range(1, 6)),
    )
