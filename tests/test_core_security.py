"""
Unit tests for core security module.
Tests JWT token creation, verification, and role-based access control.
"""
import pytest
from datetime import timedelta
from jose import jwt, JWTError
from fastapi import HTTPException
from sqlalchemy.orm import Session

from snapserve.core.config import settings
from snapserve.core.security import (
    create_access_token,
    decode_access_token,
    require_role,
    verify_token,
)
from snapserve.models.user import User, UserRole
from snapserve.services.permission_service import PERMISSIONS, PermissionService


class TestAccessTokens:
    """Test JWT token creation and decoding."""

    def test_create_token_with_role(self):
        token = create_access_token({"sub": "123", "role": UserRole.manager})

        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "123"
        assert payload["role"] == "manager"
        assert "exp" in payload

    def test_decode_valid_token(self):
        token = create_access_token({"sub": "123", "restaurant_id": 5})

        payload = decode_access_token(token)

        assert payload["restaurant_id"] == 5

    def test_decode_expired_token(self):
        token = create_access_token({"sub": "123"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_decode_token_signed_with_other_key(self):
        token = jwt.encode({"sub": "123"}, "another-secret", algorithm=settings.ALGORITHM)

        with pytest.raises(JWTError):
            decode_access_token(token)


class TestVerifyToken:
    """Test resolving a token to a user."""

    def test_valid_token(self, db: Session, admin_user: User):
        token = create_access_token({"sub": str(admin_user.id)})

        assert verify_token(token, db).id == admin_user.id

    def test_missing_subject(self, db: Session):
        token = create_access_token({"role": "admin"})

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token, db)
        assert exc_info.value.status_code == 401


class TestRequireRole:
    """Test the role guard factory."""

    def test_admits_higher_roles(self, admin_user: User):
        checker = require_role(UserRole.manager)

        assert checker(current_user=admin_user) is admin_user

    def test_rejects_lower_roles(self, customer_user: User):
        checker = require_role(UserRole.staff)

        with pytest.raises(HTTPException) as exc_info:
            checker(current_user=customer_user)
        assert exc_info.value.status_code == 403


class TestPermissions:
    def test_admin_has_everything(self):
        assert all(PermissionService.permissions_for(UserRole.admin).values())

    def test_manager_cannot_manage_staff(self):
        permissions = PermissionService.permissions_for(UserRole.manager)

        assert set(permissions) == set(PERMISSIONS)
        assert permissions["can_manage_menu"] is True
        assert permissions["can_manage_staff"] is False

    def test_plain_user_has_nothing(self):
        assert not any(PermissionService.permissions_for(UserRole.user).values())
        assert PermissionService.has_permission(UserRole.staff, "can_manage_orders") is True
