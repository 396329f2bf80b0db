"""
Shared fixtures: an in-memory SQLite database, a TestClient bound to it,
and small factories for the records most tests need.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REMINDER_SCHEDULER_ENABLED"] = "false"
os.environ["APP_ENV"] = "test"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import config
from database import SessionLocal, engine, get_session
from main import app
from models import Base, Payment, PaymentMethod, PaymentStatus, PaymentType, Property, Tenant, Unit, User, UserRole
from services.auth_service import create_access_token, hash_password
from services.occupancy_service import assign_tenant_to_unit
from services.settings_service import settings_provider

_ENV_FALLBACKS = (
    "SMTP_HOST",
    "SMTP_USER",
    "SMTP_PASS",
    "SENDGRID_API_KEY",
    "AT_USERNAME",
    "AT_API_KEY",
    "AT_FROM",
    "KRA_CLIENT_ID",
    "KRA_CLIENT_SECRET",
)


@pytest.fixture(autouse=True)
def no_env_providers(monkeypatch):
    """Keep a developer's .env from sending real email / SMS during tests."""
    for name in _ENV_FALLBACKS:
        monkeypatch.setattr(config, name, None)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    settings_provider.invalidate()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        settings_provider.invalidate()


@pytest.fixture
def client(db):
    def override_get_session():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    user = User(
        name="Grace Admin",
        email="admin@dwello.test",
        password=hash_password("secret123"),
        role=UserRole.ADMIN,
        is_verified=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def caretaker(db):
    user = User(
        name="Sam Caretaker",
        email="caretaker@dwello.test",
        password=hash_password("secret123"),
        role=UserRole.CARETAKER,
        is_verified=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def auth_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin.id)}"}


@pytest.fixture
def make_property(db):
    def _make(name="Sunrise Court", location="Nairobi"):
        prop = Property(name=name, location=location)
        db.add(prop)
        db.commit()
        return prop

    return _make


@pytest.fixture
def make_unit(db, make_property):
    def _make(unit_number="A1", rent_amount="15000", prop=None, user=None):
        prop = prop or make_property()
        unit = Unit(
            property_id=prop.id,
            unit_number=unit_number,
            rent_amount=Decimal(rent_amount),
            user_id=user.id if user else None,
        )
        db.add(unit)
        db.commit()
        return unit

    return _make


@pytest.fixture
def make_tenant(db):
    def _make(name="Jane Wanjiru", unit=None, rent_amount=None, phone="0712345678", email=None, status=None):
        tenant = Tenant(
            name=name,
            email=email if email is not None else f"{name.split()[0].lower()}@tenant.test",
            phone=phone,
            national_id="12345678",
            rent_amount=Decimal(rent_amount) if rent_amount is not None else (unit.rent_amount if unit else None),
        )
        if status is not None:
            tenant.status = status
        db.add(tenant)
        assign_tenant_to_unit(db, tenant, unit.id if unit else None)
        db.commit()
        return tenant

    return _make


@pytest.fixture
def make_payment(db):
    def _make(tenant, rent_amount="15000", deposit_amount="0", status=PaymentStatus.PAID, date=None,
              user=None, checkout_request_id=None, method=PaymentMethod.CASH):
        rent = Decimal(rent_amount)
        deposit = Decimal(deposit_amount)
        payment = Payment(
            tenant=tenant,
            unit_id=tenant.unit_id,
            user_id=user.id if user else None,
            amount=rent + deposit,
            rent_amount=rent,
            deposit_amount=deposit,
            date=date or datetime.now(),
            method=method,
            status=status,
            type=PaymentType.RENT if deposit == 0 else PaymentType.COMBINED,
            month_covered=(date or datetime.now()).strftime("%Y-%m"),
            checkout_request_id=checkout_request_id,
        )
        db.add(payment)
        db.commit()
        return payment

    return _make
