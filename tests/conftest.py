"""
Pytest fixtures for the inventory API test suite.

Every test gets its own file-backed SQLite database under ``tmp_path`` so
that separate sessions (and threads) see each other's commits.
Environment variables are set before anything from ``inventory_api`` is
imported because settings are read at import time.
"""

import os

os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["INTERNAL_ADMIN_SECRET"] = "test-internal-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_NOTIFICATION_EMAIL"] = "stock-admin@example.com"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from inventory_api.core.email import DeliveryReceipt
from inventory_api.core.exceptions import DeliveryError
from inventory_api.core.security import create_access_token
from inventory_api.database import Base, build_engine, get_db
from inventory_api.main import app
from inventory_api.models.products import Product, ProductStatus
from inventory_api.models.users import User
from inventory_api.routers.inventory import get_notification_sink
from inventory_api.services.inventory import InventoryConfig, InventoryEngine
from inventory_api.services.notifications import NotificationDispatcher

ADMIN_EMAIL = "stock-admin@example.com"
BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingSink:
    """Notification sink that remembers every message it was asked to send."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send(self, recipient, subject, body):
        self.sent.append((recipient, subject, body))

        if self.fail:
            raise DeliveryError("SMTP relay unavailable")

        return DeliveryReceipt(message_id=f"msg-{len(self.sent)}", recipient=recipient)


class StepClock:
    """Returns BASE_TIME, then one minute later on every call."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self):
        now = self.current
        self.current = self.current + self.step
        return now


@pytest.fixture
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'inventory.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def make_engine(sink, clock):
    def factory(session, notifier_sink=None, schedule=None, max_conflict_retries=5):
        dispatcher = NotificationDispatcher(
            sink=notifier_sink or sink,
            recipient=ADMIN_EMAIL,
            schedule=schedule,
        )
        config = InventoryConfig(
            admin_notification_address=ADMIN_EMAIL,
            max_conflict_retries=max_conflict_retries,
        )
        return InventoryEngine(session, config, dispatcher, clock=clock)

    return factory


@pytest.fixture
def inventory(db, make_engine):
    return make_engine(db)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(is_admin: bool = True, email: str | None = None, password_hash: str = "not-a-real-hash"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password_hash=password_hash,
            is_admin=is_admin,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def factory(
        stock: int = 10,
        minimum_stock: int = 5,
        status: ProductStatus = ProductStatus.ACTIVE,
        name: str | None = None,
    ):
        counter["n"] += 1
        product = Product(
            name=name or f"Colombian Roast {counter['n']}",
            description="Whole bean coffee",
            price=Decimal("12.50"),
            category="coffee",
            stock=stock,
            minimum_stock=minimum_stock,
            status=status,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return factory


@pytest.fixture
def admin(make_user):
    return make_user(is_admin=True, email="admin@example.com")


@pytest.fixture
def customer(make_user):
    return make_user(is_admin=False, email="customer@example.com")


def auth_headers(user: User) -> dict:
    token = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def client(session_factory, sink):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_sink] = lambda: sink

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def failing_sink():
    return RecordingSink(fail=True)


@pytest.fixture
def sink_class():
    return RecordingSink
