from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from barbershop.auth import create_access_token
from barbershop.booking import BookingService
from barbershop.config import Settings, get_settings
from barbershop.db import create_db_and_tables, get_session
from barbershop.main import app
from barbershop.models import Barber, CustomerProfile, Service, User
from barbershop.store import SqlAppointmentStore

TUESDAY = 1
SUNDAY = 6


def next_weekday(weekday: int, weeks_ahead: int = 1) -> date:
    """A date strictly in the future falling on ``weekday``."""
    today = date.today()
    days = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days + 7 * (weeks_ahead - 1))


@pytest.fixture
def settings():
    return Settings(jwt_secret_key="test-secret")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def booking(session, settings):
    return BookingService(SqlAppointmentStore(session), settings)


@pytest.fixture
def barber(session):
    barber = Barber(name="Rafael")
    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@pytest.fixture
def combo(session):
    service = Service(name="Combo Corte + Barba", price=Decimal("60.00"), duration=30)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture
def make_user(session, settings):
    """Create a user (with a customer profile) and return (user, profile_id, auth headers)."""

    def _make(email: str, role: str = "customer", with_profile: bool = True):
        user = User(email=email, password_hash="not-used", role=role)
        session.add(user)
        session.commit()
        session.refresh(user)

        profile_id = None
        if with_profile:
            profile = CustomerProfile(user_id=user.id, name=email.split("@")[0], phone="11999990000")
            session.add(profile)
            session.commit()
            session.refresh(profile)
            profile_id = profile.id

        token = create_access_token({"sub": user.email}, settings)
        return user, profile_id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def customer(make_user):
    return make_user("ana@example.com")


@pytest.fixture
def client(engine, settings):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()
