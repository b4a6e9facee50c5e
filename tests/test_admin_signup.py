"""
Tests for restaurant admin signup and email verification.
"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User, UserRole
from snapserve.models.verification_token import VerificationToken


SIGNUP = {
    "email": "Chef@TrattoriaRoma.com",
    "password": "Trattoria1!",
    "password_confirmation": "Trattoria1!",
    "first_name": "Marco",
    "last_name": "Polo",
    "restaurant_name": "Trattoria Roma",
    "phone_number": "555-0199",
}


def signup(client, **overrides):
    payload = dict(SIGNUP)
    payload.update(overrides)
    return client.post("/api/admins/signup", json=payload)


def latest_token(db: Session, user_id: int) -> str:
    return (
        db.query(VerificationToken)
        .filter(VerificationToken.user_id == user_id)
        .order_by(VerificationToken.id.desc())
        .first()
        .token
    )


class TestAdminSignup:
    """Test POST /api/admins/signup."""

    def test_signup_creates_inactive_admin(self, client: TestClient, db: Session):
        response = signup(client)

        assert response.status_code == 202
        data = response.json()
        assert data["verification_required"] is True
        assert data["email"] == "chef@trattoriaroma.com"

        user = db.query(User).filter(User.id == data["user_id"]).one()
        assert user.role == UserRole.admin
        assert user.is_active is False
        assert user.is_verified is False

        restaurant = db.query(Restaurant).filter(Restaurant.id == data["restaurant_id"]).one()
        assert restaurant.owner_id == user.id
        assert restaurant.slug == "trattoria-roma"
        assert restaurant.is_active is False

    def test_signup_sends_verification_link(self, client: TestClient, db: Session, dispatcher):
        data = signup(client).json()

        emails = dispatcher.sent_to("chef@trattoriaroma.com")
        assert len(emails) == 1
        assert f"/verify-email?token={latest_token(db, data['user_id'])}" in emails[0]["text"]

    def test_duplicate_email(self, client: TestClient):
        signup(client)

        response = signup(client, email="chef@trattoriaroma.com", restaurant_name="Another Place")

        assert response.status_code == 400
        assert response.json()["code"] == "DUPLICATE_USER"

    def test_same_restaurant_name_gets_unique_slug(self, client: TestClient, db: Session):
        signup(client)
        data = signup(client, email="sous@trattoriaroma.com").json()

        restaurant = db.query(Restaurant).filter(Restaurant.id == data["restaurant_id"]).one()
        assert restaurant.slug == "trattoria-roma-2"

    def test_weak_password(self, client: TestClient):
        response = signup(client, password="weakpass1", password_confirmation="weakpass1")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_password_mismatch(self, client: TestClient):
        response = signup(client, password_confirmation="Trattoria2!")

        assert response.status_code == 400

    def test_requirements(self, client: TestClient):
        response = client.get("/api/admins/signup/requirements")

        assert response.status_code == 200
        assert response.json()["password"]["min_length"] == 8


class TestEmailVerification:
    """Test redeeming and resending verification links."""

    def test_login_blocked_until_verified(self, client: TestClient):
        signup(client)

        response = client.post(
            "/api/auth/login",
            json={"email": "chef@trattoriaroma.com", "password": "Trattoria1!"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "EMAIL_NOT_VERIFIED"

    def test_verify_activates_admin_and_restaurant(
        self, client: TestClient, db: Session, dispatcher
    ):
        data = signup(client).json()

        response = client.get(f"/api/auth/verify?token={latest_token(db, data['user_id'])}")

        assert response.status_code == 200
        user = db.query(User).filter(User.id == data["user_id"]).one()
        assert user.is_verified is True
        assert user.is_active is True
        restaurant = db.query(Restaurant).filter(Restaurant.id == data["restaurant_id"]).one()
        assert restaurant.is_active is True
        assert restaurant.is_verified is True
        subjects = [email["subject"] for email in dispatcher.sent_to(user.email)]
        assert "Welcome to SnapServe" in subjects

        login = client.post(
            "/api/auth/login",
            json={"email": "chef@trattoriaroma.com", "password": "Trattoria1!"},
        )
        assert login.status_code == 200
        assert login.json()["restaurant"]["id"] == data["restaurant_id"]

    def test_token_single_use(self, client: TestClient, db: Session):
        data = signup(client).json()
        token = latest_token(db, data["user_id"])
        client.get(f"/api/auth/verify?token={token}")

        response = client.get(f"/api/auth/verify?token={token}")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_expired_token(self, client: TestClient, db: Session, clock):
        data = signup(client).json()
        clock.advance(hours=25)

        response = client.get(f"/api/auth/verify?token={latest_token(db, data['user_id'])}")

        assert response.status_code == 400

    def test_resend_replaces_token(self, client: TestClient, db: Session, dispatcher):
        data = signup(client).json()
        old_token = latest_token(db, data["user_id"])

        response = client.post(
            "/api/auth/verify/resend", json={"email": "chef@trattoriaroma.com"}
        )

        assert response.status_code == 200
        new_token = latest_token(db, data["user_id"])
        assert new_token != old_token
        assert client.get(f"/api/auth/verify?token={old_token}").status_code == 400
        assert client.get(f"/api/auth/verify?token={new_token}").status_code == 200
        assert len(dispatcher.sent_to("chef@trattoriaroma.com")) == 3

    def test_resend_for_verified_account(self, client: TestClient, admin_user: User):
        response = client.post("/api/auth/verify/resend", json={"email": admin_user.email})

        assert response.status_code == 400

    def test_resend_unknown_email(self, client: TestClient):
        response = client.post("/api/auth/verify/resend", json={"email": "nobody@nowhere.com"})

        assert response.status_code == 404

    def test_verification_status(self, client: TestClient):
        signup(client)

        response = client.get("/api/auth/verify/status?email=chef@trattoriaroma.com")

        assert response.status_code == 200
        assert response.json() == {
            "email": "chef@trattoriaroma.com",
            "is_verified": False,
            "is_active": False,
        }
