"""
Tests for managing a restaurant's active staff.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from snapserve.core.exceptions import NotFoundError, ValidationError
from snapserve.models.invitation import InvitationStatus, StaffInvitation, StaffMember, StaffRole
from snapserve.models.user import User, UserRole
from snapserve.services.staff_service import StaffService


class TestStaffService:
    """Test StaffService directly."""

    def test_list_staff(self, db: Session, restaurant, staff_user: User):
        members = StaffService.list_staff(db, restaurant)

        assert [member.user_id for member in members] == [staff_user.id]
        assert members[0].user.email == "waiter@pizzaplace.com"

    def test_promote_to_manager(
        self, db: Session, dispatcher, restaurant, admin_user: User, staff_user: User
    ):
        """Test promotion updates both the membership and the account role."""
        membership = StaffService.update_staff_role(
            db, dispatcher, restaurant, staff_user.id, "manager", admin_user
        )

        assert membership.role == StaffRole.manager
        db.refresh(staff_user)
        assert staff_user.role == UserRole.manager
        subjects = [email["subject"] for email in dispatcher.sent_to(staff_user.email)]
        assert "Your role at Pizza Place has changed" in subjects

    def test_same_role_rejected(
        self, db: Session, dispatcher, restaurant, admin_user: User, staff_user: User
    ):
        with pytest.raises(ValidationError):
            StaffService.update_staff_role(
                db, dispatcher, restaurant, staff_user.id, StaffRole.staff, admin_user
            )

    def test_unknown_role_rejected(
        self, db: Session, dispatcher, restaurant, admin_user: User, staff_user: User
    ):
        with pytest.raises(ValidationError):
            StaffService.update_staff_role(
                db, dispatcher, restaurant, staff_user.id, "chef", admin_user
            )

    def test_remove_staff_member(
        self, db: Session, restaurant, admin_user: User, staff_user: User
    ):
        """Test removal deactivates the account and revokes the accepted invitation."""
        membership = StaffService.remove_staff_member(db, restaurant, staff_user.id, admin_user)

        assert membership.is_active is False
        db.refresh(staff_user)
        assert staff_user.is_active is False
        invitation = db.query(StaffInvitation).filter(StaffInvitation.user_id == staff_user.id).one()
        assert invitation.status == InvitationStatus.removed

    def test_remove_member_without_invitation(
        self, db: Session, restaurant, admin_user: User
    ):
        """Test members added outside the invitation flow can also be removed."""
        user = User(
            email="legacy@pizzaplace.com",
            first_name="Old",
            last_name="Timer",
            password_hash="x",
            role=UserRole.staff,
            is_active=True,
            is_verified=True,
        )
        db.add(user)
        db.flush()
        db.add(StaffMember(restaurant_id=restaurant.id, user_id=user.id, role=StaffRole.staff))
        db.commit()

        membership = StaffService.remove_staff_member(db, restaurant, user.id, admin_user)

        assert membership.is_active is False
        db.refresh(user)
        assert user.is_active is False

    def test_cannot_remove_self(self, db: Session, restaurant, admin_user: User):
        with pytest.raises(ValidationError):
            StaffService.remove_staff_member(db, restaurant, admin_user.id, admin_user)

    def test_remove_unknown_member(self, db: Session, restaurant, admin_user: User):
        with pytest.raises(NotFoundError):
            StaffService.remove_staff_member(db, restaurant, 9999, admin_user)

    def test_cannot_manage_other_restaurants_staff(
        self, db: Session, dispatcher, other_restaurant, other_admin: User, staff_user: User
    ):
        with pytest.raises(NotFoundError):
            StaffService.update_staff_role(
                db, dispatcher, other_restaurant, staff_user.id, "manager", other_admin
            )

    def test_statistics(self, db: Session, dispatcher, restaurant, admin_user: User, staff_user: User):
        StaffService.update_staff_role(db, dispatcher, restaurant, staff_user.id, "manager", admin_user)

        stats = StaffService.staff_statistics(db, restaurant)

        assert stats["active_staff"] == 1
        assert stats["managers"] == 1
        assert stats["invitations"]["accepted"] == 1


class TestStaffEndpoints:
    """Test /api/admin/staff endpoints."""

    def test_list(self, client: TestClient, admin_auth_headers: dict, staff_user: User):
        response = client.get("/api/admin/staff", headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["user"]["email"] == staff_user.email
        assert data[0]["role"] == "staff"

    def test_update_role(self, client: TestClient, admin_auth_headers: dict, staff_user: User):
        response = client.patch(
            f"/api/admin/staff/{staff_user.id}/role",
            json={"role": "manager"},
            headers=admin_auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["role"] == "manager"
        assert response.json()["user"]["role"] == "manager"

    def test_update_role_invalid(self, client: TestClient, admin_auth_headers: dict, staff_user: User):
        response = client.patch(
            f"/api/admin/staff/{staff_user.id}/role",
            json={"role": "admin"},
            headers=admin_auth_headers,
        )

        assert response.status_code == 400

    def test_delete(self, client: TestClient, admin_auth_headers: dict, staff_user: User):
        response = client.delete(f"/api/admin/staff/{staff_user.id}", headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        listing = client.get("/api/admin/staff", headers=admin_auth_headers)
        assert listing.json() == []

    def test_delete_unknown(self, client: TestClient, admin_auth_headers: dict):
        response = client.delete("/api/admin/staff/9999", headers=admin_auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_statistics(self, client: TestClient, admin_auth_headers: dict, staff_user: User):
        response = client.get("/api/admin/staff/statistics", headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()["active_staff"] == 1
        assert response.json()["managers"] == 0

    def test_staff_cannot_list(self, client: TestClient, staff_auth_headers: dict):
        response = client.get("/api/admin/staff", headers=staff_auth_headers)

        assert response.status_code == 403
