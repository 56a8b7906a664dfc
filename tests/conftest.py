"""
Pytest fixtures for the RentDesk test suite.

Provides:
- An in-memory SQLite database per test (StaticPool, foreign keys on)
- A FixedClock so due dates and late fees are deterministic
- Small factories for rooms, tenants and leases
- A FastAPI TestClient wired to the test session
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from rentdesk.core.clock import FixedClock
from rentdesk.database.connection import DatabaseConnection
from rentdesk.services.lease import LeaseService
from rentdesk.services.notification import NotificationService
from rentdesk.services.room import RoomService
from rentdesk.services.tenant import TenantService


# =============================================================================
# Database and clock
# =============================================================================


@pytest.fixture
def database():
    """Fresh in-memory database with all tables."""
    database = DatabaseConnection("sqlite://")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def session(database):
    session = database.get_session_direct()
    yield session
    session.close()


@pytest.fixture
def file_database(tmp_path):
    """SQLite file, so each session gets its own connection."""
    database = DatabaseConnection(f"sqlite:///{tmp_path / 'rentdesk.db'}")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def clock():
    """1 March 2024, 09:00."""
    return FixedClock(datetime(2024, 3, 1, 9, 0, 0))


@pytest.fixture
def notifier(session):
    return NotificationService(session, webhook_url="")


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_room(session):
    counter = {"n": 0}

    def _make_room(name=None, default_rent=Decimal("5000"), default_deposit=Decimal("10000"), **kwargs):
        counter["n"] += 1
        return RoomService(session).create_room(
            name=name or f"Room {100 + counter['n']}",
            default_rent=default_rent,
            default_deposit=default_deposit,
            **kwargs,
        )

    return _make_room


@pytest.fixture
def make_tenant(session):
    counter = {"n": 0}

    def _make_tenant(full_name=None, phone=None, **kwargs):
        counter["n"] += 1
        data = {
            "full_name": full_name or f"Tenant {counter['n']}",
            "phone": phone or f"98765{counter['n']:05d}",
        }
        data.update(kwargs)
        return TenantService(session).create_tenant(data)

    return _make_tenant


@pytest.fixture
def make_lease(session, clock, make_room, make_tenant):
    def _make_lease(
        room=None, tenant=None, rent_per_month=Decimal("5000"), billing_day=5,
        start_date=date(2024, 1, 1), end_date=None, status="active",
    ):
        room = room or make_room()
        tenant = tenant or make_tenant()
        return LeaseService(session, clock=clock).create_lease(
            tenant_id=tenant.id,
            room_id=room.id,
            start_date=start_date,
            end_date=end_date,
            rent_per_month=rent_per_month,
            deposit_agreed=Decimal("10000"),
            billing_day=billing_day,
            status=status,
        )

    return _make_lease


@pytest.fixture
def seed_lease(clock):
    """Room, tenant and active lease created through any session."""
    def _seed_lease(session, rent_per_month=Decimal("1000")):
        room = RoomService(session).create_room(
            name="Room 201", default_rent=rent_per_month, default_deposit=Decimal("0"),
        )
        tenant = TenantService(session).create_tenant(
            {"full_name": "Meera Nair", "phone": "9876500001"}
        )
        return LeaseService(session, clock=clock).create_lease(
            tenant_id=tenant.id,
            room_id=room.id,
            start_date=date(2024, 1, 1),
            rent_per_month=rent_per_month,
            deposit_agreed=Decimal("0"),
            billing_day=5,
        )

    return _seed_lease


@pytest.fixture
def make_invoice(session, clock, make_lease):
    """Generate the March 2024 invoice for a new lease and return it."""
    from rentdesk.services.invoice import InvoiceService

    def _make_invoice(rent_per_month=Decimal("5000"), billing_day=5, month=3, year=2024):
        lease = make_lease(rent_per_month=rent_per_month, billing_day=billing_day)
        result = InvoiceService(session, clock=clock).generate_monthly_invoices(month, year)
        return next(i for i in result.items if i.lease_id == lease.id)

    return _make_invoice


# =============================================================================
# API client
# =============================================================================


@pytest.fixture
def admin(session):
    from rentdesk.core.security import get_password_hash
    from rentdesk.database.models import AdminUser

    user = AdminUser(
        name="Test Admin",
        email="admin@rentdesk.io",
        password_hash=get_password_hash("secret123"),
        role="admin",
    )
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def client(session, clock, admin):
    """TestClient with the session, clock and current admin overridden."""
    from fastapi.testclient import TestClient

    from rentdesk.app import app
    from rentdesk.core.dependencies import get_clock, get_current_admin
    from rentdesk.database import get_db

    def _get_db():
        yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_current_admin] = lambda: admin

    yield TestClient(app)

    app.dependency_overrides.clear()
