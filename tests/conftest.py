import os
from datetime import datetime, timedelta

# Test settings must be in place before the application modules read them
os.environ["DATABASE_URL"] = "sqlite:///./out/tests.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_DIR"] = "./out/logs"
os.environ["REDIS_URL"] = ""
os.environ["PAYMENT_WINDOW_HOURS"] = "24"
os.environ["EXPIRY_LOOKAHEAD_HOURS"] = "6"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from venue_booking.main import app
from venue_booking.db.session import Base, SessionLocal, engine, get_db
from venue_booking.core.jwt import create_access_token
from venue_booking.core.security import hash_password
from venue_booking.models.enums import UserRole
from venue_booking.models.hall import Hall
from venue_booking.models.user import User
from venue_booking.models.venue import Venue

# Create test tables
Base.metadata.create_all(bind=engine)


# Dependency override
def override_get_db():
    try:
        db = SessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db

client = TestClient(app)

# Booking dates are checked against the UTC calendar day
TODAY = datetime.utcnow().date()
EVENT_DAY = TODAY + timedelta(days=30)


# Fixtures
@pytest.fixture(autouse=True)
def clear_db():
    """Clear all data from all tables after each test"""
    yield
    with engine.connect() as conn:
        trans = conn.begin()
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        trans.commit()


@pytest.fixture
def test_db():
    """Provide a database session for testing"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_next_user():
    """Helper function to generate unique emails"""
    if not hasattr(get_next_user, "user_count"):
        get_next_user.user_count = 0
    get_next_user.user_count += 1
    return get_next_user.user_count


def make_user(db, role: UserRole, name: str = None) -> User:
    n = get_next_user()
    user = User(
        name=name or f"{role.value} {n}",
        email=f"{role.value}_{n}@example.com",
        password_hash=hash_password("testpassword"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    token = create_access_token({"sub": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def planner(test_db):
    return make_user(test_db, UserRole.PLANNER, "Ada Planner")


@pytest.fixture
def other_planner(test_db):
    return make_user(test_db, UserRole.PLANNER, "Bola Planner")


@pytest.fixture
def owner(test_db):
    return make_user(test_db, UserRole.VENUE_HOLDER, "Chidi Owner")


@pytest.fixture
def admin(test_db):
    return make_user(test_db, UserRole.ADMIN, "Admin")


@pytest.fixture
def venue(test_db, owner):
    venue = Venue(
        owner_user_id=owner.id,
        title="Grand Palace",
        description="Riverside event centre",
        city="Lagos",
        state="Lagos",
    )
    test_db.add(venue)
    test_db.commit()
    test_db.refresh(venue)
    return venue


def make_hall(db, venue, price=800000, deposit_percentage=25, balance_due_days=7, capacity=300):
    hall = Hall(
        venue_id=venue.id,
        name="Main Hall",
        capacity=capacity,
        price=price,
        deposit_percentage=deposit_percentage,
        balance_due_days=balance_due_days,
    )
    db.add(hall)
    db.commit()
    db.refresh(hall)
    return hall


@pytest.fixture
def hall(test_db, venue):
    """800000 with a 25% deposit and the balance due 7 days before the event"""
    return make_hall(test_db, venue)


@pytest.fixture
def full_deposit_hall(test_db, venue):
    return make_hall(test_db, venue, price=500000, deposit_percentage=100)
