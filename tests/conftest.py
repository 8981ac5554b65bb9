from datetime import datetime, timezone

import pytest

from netline import create_app, db
from netline.analytics import SaleRecord
from netline.config import TestingConfig
from netline.models import PlanHistory, RoleType, Sale, User


AUG_15 = datetime(2024, 8, 15, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(username, role, complete_name=None, password=None, **kwargs):
    user = User(username=username, role=role, complete_name=complete_name, **kwargs)
    if password:
        user.set_password(password)
    db.session.add(user)
    return user


@pytest.fixture
def seeded(app):
    """An admin, a vendor, a client and a few sales and plan activations."""
    admin = _user("admin", RoleType.SYSTEM_ADMINISTRATOR, "Admin Root", password="secret")
    vendor = _user("vendor1", RoleType.VENDOR, "Jean Vendor", password="vendorpw")
    marie = _user("client1", RoleType.CLIENT, "Marie Client", user_number="C-001")
    db.session.flush()

    db.session.add_all([
        Sale(plan_name="Daily", price=100.0, seller_id=vendor.id, client_id=marie.id, created_at=AUG_15),
        Sale(plan_name="Daily", price=50.0, seller_id=vendor.id, created_at=AUG_15),
        Sale(plan_name="Weekly", price=200.0, seller_id=admin.id, created_at=AUG_15),
        PlanHistory(user_id=marie.id, plan="Weekly", price=500.0, number="509-1", created_at=AUG_15),
        PlanHistory(user_id=marie.id, plan="Daily", price=100.0, number="509-1", created_at=AUG_15),
    ])
    db.session.commit()
    return {"admin": admin, "vendor": vendor, "client": marie}


@pytest.fixture
def auth_client(client, seeded):
    resp = client.post("/api/auth", json={"username": "admin", "password": "secret"})
    assert resp.status_code == 200
    return client


def make_sale(plan="Daily", price=100.0, when=AUG_15, vendor_id=None, client_name="", id=""):
    return SaleRecord(
        id=id,
        plan_name=plan,
        price=price,
        vendor_id=vendor_id,
        timestamp=when,
        client_name=client_name,
    )
