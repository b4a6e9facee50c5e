"""
Pytest configuration and fixtures for testing the SnapServe backend application.
"""
import os
import sys
from datetime import datetime, timedelta
from typing import Dict, Generator

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-snapserve"
os.environ["MAIL_BACKEND"] = "console"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add the parent directory to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from snapserve.main import app
from snapserve.db.session import Base, get_db, commit_or_raise
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User, UserRole
from snapserve.services.admin_service import AdminService
from snapserve.services.invitation_service import StaffInvitationService
from snapserve.services.notification_service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from snapserve.utils import clock as clock_module
from snapserve.utils.hash import hash_password


ADMIN_PASSWORD = "AdminPass123!"
STAFF_PASSWORD = "StaffPass123!"

# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingDispatcher(NotificationDispatcher):
    """Dispatcher that keeps rendered emails in memory instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail = False
        super().__init__(sender=self._record)

    def _record(self, to_email, subject, html_content, text_content=None):
        if self.fail:
            raise ConnectionError("SMTP server unavailable")
        self.sent.append({"to": to_email, "subject": subject, "text": text_content})

    def sent_to(self, email: str):
        return [message for message in self.sent if message["to"] == email]


class FakeClock:
    """Callable stand-in for clock.utcnow that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Create a fresh database for each test function.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    """
    Freeze application time; call ``clock.advance(days=...)`` to move it.
    """
    fake = FakeClock(clock_module.utcnow().replace(microsecond=0))
    monkeypatch.setattr(clock_module, "utcnow", fake)
    return fake


@pytest.fixture(scope="function")
def client(db: Session, dispatcher: RecordingDispatcher) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and the recording dispatcher.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_admin(db: Session, email: str, restaurant_name: str) -> User:
    admin = AdminService.create_admin(
        db,
        email=email,
        password=ADMIN_PASSWORD,
        first_name="Maria",
        last_name="Rossi",
        restaurant_name=restaurant_name,
        is_active=True,
        is_verified=True,
    )
    commit_or_raise(db)
    db.refresh(admin)
    return admin


@pytest.fixture
def admin_user(db: Session) -> User:
    """
    Create an active, verified admin owning "Pizza Place".
    """
    return _create_admin(db, "owner@pizzaplace.com", "Pizza Place")


@pytest.fixture
def restaurant(db: Session, admin_user: User) -> Restaurant:
    return db.query(Restaurant).filter(Restaurant.owner_id == admin_user.id).first()


@pytest.fixture
def other_admin(db: Session) -> User:
    """
    Create a second admin with their own restaurant for isolation checks.
    """
    return _create_admin(db, "owner@burgerbar.com", "Burger Bar")


@pytest.fixture
def other_restaurant(db: Session, other_admin: User) -> Restaurant:
    return db.query(Restaurant).filter(Restaurant.owner_id == other_admin.id).first()


def _login_headers(client: TestClient, email: str, password: str) -> Dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def login(client: TestClient):
    """
    Log in through the API and return bearer headers: ``login(email, password)``.
    """
    return lambda email, password: _login_headers(client, email, password)


@pytest.fixture
def admin_auth_headers(client: TestClient, admin_user: User) -> Dict[str, str]:
    """
    Get authentication headers for the admin user.
    """
    return _login_headers(client, admin_user.email, ADMIN_PASSWORD)


@pytest.fixture
def other_admin_auth_headers(client: TestClient, other_admin: User) -> Dict[str, str]:
    return _login_headers(client, other_admin.email, ADMIN_PASSWORD)


@pytest.fixture
def staff_user(
    db: Session, restaurant: Restaurant, admin_user: User, dispatcher: RecordingDispatcher
) -> User:
    """
    Create a staff member by inviting and onboarding them.
    """
    invitation = StaffInvitationService.create_invitation(
        db,
        dispatcher,
        email="waiter@pizzaplace.com",
        first_name="Luca",
        last_name="Bianchi",
        role="staff",
        restaurant=restaurant,
        invited_by=admin_user,
    )
    return StaffInvitationService.accept_invitation(
        db, dispatcher, token=invitation.token, password=STAFF_PASSWORD
    )


@pytest.fixture
def staff_auth_headers(client: TestClient, staff_user: User) -> Dict[str, str]:
    return _login_headers(client, staff_user.email, STAFF_PASSWORD)


@pytest.fixture
def customer_user(db: Session) -> User:
    """
    Create a plain customer account.
    """
    user = User(
        email="diner@snapdiner.com",
        first_name="Dana",
        last_name="Diner",
        password_hash=hash_password("DinerPass123!"),
        role=UserRole.customer,
        is_active=True,
        is_verified=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
