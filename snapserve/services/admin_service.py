"""Service for admin signup and email verification."""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from snapserve.core.config import settings
from snapserve.core.exceptions import (
    DuplicateUserError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from snapserve.db.session import commit_or_raise
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User, UserRole
from snapserve.models.verification_token import VerificationToken, VerificationTokenType
from snapserve.repositories import (
    RestaurantRepository,
    UserRepository,
    VerificationTokenRepository,
)
from snapserve.services.notification_service import NotificationDispatcher
from snapserve.services.restaurant_service import RestaurantService
from snapserve.utils import clock
from snapserve.utils.hash import hash_password
from snapserve.utils.tokens import build_verification_link, generate_verification_token
from snapserve.utils.validation import normalize_email

logger = logging.getLogger(__name__)


class AdminService:
    """Service for restaurant admin accounts."""

    @staticmethod
    def create_admin(
        db: Session,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        restaurant_name: str,
        phone_number: Optional[str] = None,
        is_active: bool = False,
        is_verified: bool = False,
    ) -> User:
        """
        Create an admin together with the restaurant they own.

        The caller commits.

        Raises:
            DuplicateUserError: If the email is already registered
        """
        email = normalize_email(email)
        if UserRepository(db).email_exists(email):
            raise DuplicateUserError("An account with this email already exists")

        admin = User(
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            phone_number=phone_number,
            password_hash=hash_password(password),
            role=UserRole.admin,
            is_active=is_active,
            is_verified=is_verified,
        )
        UserRepository(db).create(admin)

        restaurant = Restaurant(
            name=restaurant_name.strip(),
            slug=RestaurantService.unique_slug(db, restaurant_name),
            email=email,
            phone_number=phone_number,
            is_active=is_active,
            is_verified=is_verified,
            owner_id=admin.id,
        )
        RestaurantRepository(db).create(restaurant)
        return admin

    @staticmethod
    def _issue_verification_token(db: Session, user: User) -> VerificationToken:
        now = clock.utcnow()
        token = VerificationToken(
            user_id=user.id,
            token=generate_verification_token(),
            type=VerificationTokenType.email_verification,
            created_at=now,
            expires_at=now + timedelta(hours=settings.VERIFICATION_TOKEN_TTL_HOURS),
        )
        return VerificationTokenRepository(db).create(token)

    @staticmethod
    def signup(
        db: Session,
        dispatcher: NotificationDispatcher,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        restaurant_name: str,
        phone_number: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Register a restaurant admin pending email verification.

        Creates an inactive admin, an inactive restaurant and a 24 hour
        verification token, then emails the verification link.

        Args:
            db: Database session
            dispatcher: Notification dispatcher
            email: Admin email
            password: Plain text password (already strength-checked)
            first_name: Admin first name
            last_name: Admin last name
            restaurant_name: Name of the new restaurant
            phone_number: Optional phone number

        Returns:
            Signup summary

        Raises:
            DuplicateUserError: If the email is already registered
        """
        try:
            admin = AdminService.create_admin(
                db,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                restaurant_name=restaurant_name,
                phone_number=phone_number,
            )
            token = AdminService._issue_verification_token(db, admin)
            commit_or_raise(db)
        except IntegrityError:
            db.rollback()
            raise DuplicateUserError("An account with this email already exists")

        restaurant = RestaurantRepository(db).get_owned_by(admin.id)
        logger.info("Admin %s signed up for restaurant %s", admin.id, restaurant.id)
        dispatcher.send_admin_verification(
            admin, restaurant, build_verification_link(token.token)
        )
        return {
            "message": "Registration successful. Please check your email to verify your account.",
            "user_id": admin.id,
            "email": admin.email,
            "restaurant_id": restaurant.id,
            "verification_required": True,
        }

    @staticmethod
    def verify_email(db: Session, dispatcher: NotificationDispatcher, token: str) -> User:
        """
        Redeem a verification token and activate the admin and their restaurant.

        Raises:
            InvalidTokenError: If the token is unknown, used or expired
        """
        now = clock.utcnow()
        verification = VerificationTokenRepository(db).get_valid(
            token, VerificationTokenType.email_verification, now
        )
        if not verification:
            raise InvalidTokenError("Invalid or expired verification token")

        user = verification.user
        verification.mark_used(now)
        user.is_verified = True
        user.is_active = True

        restaurant = RestaurantRepository(db).get_owned_by(user.id)
        if restaurant:
            restaurant.is_active = True
            restaurant.is_verified = True
        commit_or_raise(db)
        db.refresh(user)

        logger.info("User %s verified their email", user.id)
        if restaurant:
            dispatcher.send_admin_welcome(user, restaurant)
        return user

    @staticmethod
    def resend_verification(db: Session, dispatcher: NotificationDispatcher, email: str) -> None:
        """
        Replace any outstanding verification token and email a new one.

        Raises:
            NotFoundError: If no account uses this email
            ValidationError: If the account is already verified
        """
        user = UserRepository(db).get_by_email(email)
        if not user:
            raise NotFoundError("No account found for this email")
        if user.is_verified:
            raise ValidationError("This account is already verified")

        VerificationTokenRepository(db).invalidate_for_user(
            user.id, VerificationTokenType.email_verification, clock.utcnow()
        )
        token = AdminService._issue_verification_token(db, user)
        commit_or_raise(db)

        restaurant = RestaurantRepository(db).get_owned_by(user.id)
        dispatcher.send_admin_verification(user, restaurant, build_verification_link(token.token))

    @staticmethod
    def verification_status(db: Session, email: str) -> Dict[str, Any]:
        user = UserRepository(db).get_by_email(email)
        if not user:
            raise NotFoundError("No account found for this email")
        return {
            "email": user.email,
            "is_verified": user.is_verified,
            "is_active": user.is_active,
        }
