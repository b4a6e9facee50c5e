"""
Authentication Service Module.
Handles credential checks, token issuance and the session payload returned at login.
"""
import logging
from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from snapserve.core.exceptions import AccountStateError, AuthenticationError
from snapserve.core.security import create_access_token
from snapserve.db.session import commit_or_raise
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User
from snapserve.repositories import (
    RestaurantRepository,
    StaffMemberRepository,
    UserRepository,
)
from snapserve.services.permission_service import PermissionService
from snapserve.utils import clock
from snapserve.utils.hash import verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for login and session operations."""

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        """
        Check credentials and account state.

        Raises:
            AuthenticationError: If the email or password is wrong
            AccountStateError: If the account is inactive or unverified
        """
        user = UserRepository(db).get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid email or password")

        if not user.is_verified:
            raise AccountStateError(
                "Please verify your email address before logging in",
                code="EMAIL_NOT_VERIFIED",
            )
        if not user.is_active:
            raise AccountStateError("Your account is not active", code="ACCOUNT_INACTIVE")
        return user

    @staticmethod
    def restaurant_for(db: Session, user: User) -> Optional[Restaurant]:
        """
        Resolve the restaurant a user works for.

        Admins own their restaurant; staff and managers reach it through
        their active membership.
        """
        if user.is_admin():
            return RestaurantRepository(db).get_owned_by(user.id)
        membership = StaffMemberRepository(db).get_active_for_user(user.id)
        return membership.restaurant if membership else None

    @staticmethod
    def issue_token(user: User, restaurant: Optional[Restaurant]) -> str:
        return create_access_token({
            "sub": str(user.id),
            "role": user.role,
            "restaurant_id": restaurant.id if restaurant else None,
        })

    @staticmethod
    def session_payload(db: Session, user: User) -> Dict[str, Any]:
        restaurant = AuthService.restaurant_for(db, user)
        return {
            "access_token": AuthService.issue_token(user, restaurant),
            "token_type": "bearer",
            "role": user.role.value,
            "user": user,
            "restaurant": restaurant,
            "permissions": PermissionService.permissions_for(user.role),
        }

    @staticmethod
    def login(db: Session, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate and build the login response.

        Args:
            db: Database session
            email: Login email
            password: Plain text password

        Returns:
            Dict with access token, user, restaurant and permissions
        """
        user = AuthService.authenticate(db, email, password)
        user.last_login_at = clock.utcnow()
        commit_or_raise(db)
        db.refresh(user)

        logger.info("User %s logged in", user.id)
        return AuthService.session_payload(db, user)
