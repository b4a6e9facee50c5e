"""Service for the staff invitation lifecycle.

pending -> accepted | cancelled | expired, accepted -> removed.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from snapserve.core.config import settings
from snapserve.core.exceptions import (
    DuplicateInvitationError,
    DuplicateUserError,
    InvalidStateError,
    InvalidTokenError,
    ValidationError,
)
from snapserve.db.session import commit_or_raise
from snapserve.models.invitation import (
    InvitationStatus,
    StaffInvitation,
    StaffMember,
    StaffRole,
)
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User, UserRole
from snapserve.repositories import (
    StaffInvitationRepository,
    StaffMemberRepository,
    UserRepository,
)
from snapserve.services.notification_service import NotificationDispatcher
from snapserve.utils import clock
from snapserve.utils.hash import hash_password
from snapserve.utils.tokens import build_invitation_link, generate_invitation_token
from snapserve.utils.validation import normalize_email, validate_password_strength

logger = logging.getLogger(__name__)


def _parse_role(role) -> StaffRole:
    if isinstance(role, StaffRole):
        return role
    try:
        return StaffRole(role)
    except ValueError:
        raise ValidationError("Role must be either staff or manager")


class StaffInvitationService:
    """Service for staff invitation operations."""

    @staticmethod
    def create_invitation(
        db: Session,
        dispatcher: NotificationDispatcher,
        email: str,
        first_name: str,
        last_name: str,
        role,
        restaurant: Restaurant,
        invited_by: User,
        expiry_days: int = None,
        message: Optional[str] = None,
    ) -> StaffInvitation:
        """
        Invite someone to join a restaurant's staff.

        Args:
            db: Database session
            dispatcher: Notification dispatcher
            email: Invitee email
            first_name: Invitee first name
            last_name: Invitee last name
            role: staff or manager
            restaurant: Restaurant the invitee will join
            invited_by: Admin sending the invitation
            expiry_days: Lifetime in days (1-30, default 7)
            message: Optional personal note included in the email

        Returns:
            The pending invitation

        Raises:
            ValidationError: If role or expiry is out of range
            DuplicateUserError: If an account with this email exists
            DuplicateInvitationError: If an active invitation exists
        """
        if expiry_days is None:
            expiry_days = settings.INVITATION_DEFAULT_EXPIRY_DAYS
        if not (
            settings.INVITATION_MIN_EXPIRY_DAYS
            <= expiry_days
            <= settings.INVITATION_MAX_EXPIRY_DAYS
        ):
            raise ValidationError(
                f"Expiry days must be between {settings.INVITATION_MIN_EXPIRY_DAYS} "
                f"and {settings.INVITATION_MAX_EXPIRY_DAYS}"
            )
        staff_role = _parse_role(role)
        email = normalize_email(email)

        repo = StaffInvitationRepository(db)
        if UserRepository(db).email_exists(email):
            raise DuplicateUserError("A user with this email already exists")

        now = clock.utcnow()
        # Stale pending rows would otherwise trip the pending-email unique index
        repo.expire_stale(now, restaurant_id=restaurant.id, email=email)

        if repo.find_active(restaurant.id, email, now):
            db.rollback()
            raise DuplicateInvitationError(
                "An active invitation already exists for this email"
            )

        invitation = StaffInvitation(
            restaurant_id=restaurant.id,
            invited_by_id=invited_by.id,
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=staff_role,
            token=generate_invitation_token(),
            status=InvitationStatus.pending,
            message=message,
            created_at=now,
            expires_at=now + timedelta(days=expiry_days),
        )
        try:
            repo.create(invitation)
            commit_or_raise(db)
        except IntegrityError:
            db.rollback()
            raise DuplicateInvitationError(
                "An active invitation already exists for this email"
            )

        logger.info(
            "Created staff invitation %s for %s at restaurant %s",
            invitation.id, email, restaurant.id,
        )
        dispatcher.send_invitation(
            invitation, build_invitation_link(invitation.token), message
        )
        return invitation

    @staticmethod
    def get_invitation_details(db: Session, token: str) -> StaffInvitation:
        """
        Get an invitation that can still be accepted, for the onboarding page.

        Raises:
            InvalidTokenError: If the token is unknown, expired or already used
        """
        invitation = StaffInvitationRepository(db).find_valid_by_token(token, clock.utcnow())
        if not invitation:
            raise InvalidTokenError("Invalid or expired invitation token")
        return invitation

    @staticmethod
    def accept_invitation(
        db: Session,
        dispatcher: NotificationDispatcher,
        token: str,
        password: str,
        phone_number: Optional[str] = None,
    ) -> User:
        """
        Accept an invitation and create the staff account.

        The invitation is claimed with a conditional UPDATE before the user
        row is written, and everything is committed once. A token can only
        ever produce one account.

        Args:
            db: Database session
            dispatcher: Notification dispatcher
            token: Invitation token
            password: Plain text password for the new account
            phone_number: Optional phone number

        Returns:
            The created user

        Raises:
            ValidationError: If the password is too weak
            InvalidTokenError: If the token is unknown, expired or already used
            DuplicateUserError: If an account with the invitation email exists
        """
        try:
            validate_password_strength(password)
        except ValueError as e:
            raise ValidationError(str(e))

        repo = StaffInvitationRepository(db)
        now = clock.utcnow()

        invitation = repo.find_valid_by_token(token, now)
        if not invitation:
            raise InvalidTokenError("Invalid or expired invitation token")

        if repo.claim_pending(invitation.id, token, now) != 1:
            db.rollback()
            raise InvalidTokenError("Invalid or expired invitation token")

        if UserRepository(db).email_exists(invitation.email):
            db.rollback()
            raise DuplicateUserError("A user with this email already exists")

        try:

            user = User(
                email=invitation.email,
                first_name=invitation.first_name,
                last_name=invitation.last_name,
                phone_number=phone_number,
                password_hash=hash_password(password),
                role=UserRole(invitation.role.value),
                is_active=True,
                # The invitation link already proved ownership of the address
                is_verified=True,
            )
            db.add(user)
            db.flush()

            db.refresh(invitation)
            invitation.user_id = user.id
            db.add(
                StaffMember(
                    restaurant_id=invitation.restaurant_id,
                    user_id=user.id,
                    invitation_id=invitation.id,
                    role=invitation.role,
                    is_active=True,
                )
            )
            commit_or_raise(db)
        except IntegrityError:
            db.rollback()
            raise DuplicateUserError("A user with this email already exists")

        db.refresh(user)
        logger.info("Staff invitation %s accepted by user %s", invitation.id, user.id)
        dispatcher.send_welcome(user, invitation.restaurant)
        return user

    @staticmethod
    def cancel_invitation(
        db: Session, invitation: StaffInvitation, cancelled_by: User
    ) -> StaffInvitation:
        """
        Cancel a pending invitation.

        Raises:
            InvalidStateError: If the invitation is not pending
        """
        if not invitation.can_be_cancelled():
            raise InvalidStateError(
                f"Only pending invitations can be cancelled (current status: {invitation.status.value})"
            )

        invitation.transition_to(InvitationStatus.cancelled)
        invitation.cancelled_at = clock.utcnow()
        invitation.cancelled_by_id = cancelled_by.id
        commit_or_raise(db)
        db.refresh(invitation)

        logger.info("Staff invitation %s cancelled by user %s", invitation.id, cancelled_by.id)
        return invitation

    @staticmethod
    def remove_invitation(
        db: Session, invitation: StaffInvitation, removed_by: User
    ) -> StaffInvitation:
        """
        Revoke an accepted invitation and deactivate the staff account it created.

        Raises:
            InvalidStateError: If the invitation was never accepted
        """
        if not invitation.can_be_removed():
            raise InvalidStateError(
                f"Only accepted invitations can be removed (current status: {invitation.status.value})"
            )

        invitation.transition_to(InvitationStatus.removed)
        invitation.removed_at = clock.utcnow()
        invitation.removed_by_id = removed_by.id

        if invitation.user_id is not None:
            membership = StaffMemberRepository(db).get_membership(
                invitation.restaurant_id, invitation.user_id
            )
            if membership:
                membership.is_active = False
            if invitation.user:
                invitation.user.is_active = False

        commit_or_raise(db)
        db.refresh(invitation)

        logger.info("Staff invitation %s removed by user %s", invitation.id, removed_by.id)
        return invitation

    @staticmethod
    def resend_invitation(
        db: Session, dispatcher: NotificationDispatcher, invitation: StaffInvitation
    ) -> StaffInvitation:
        """
        Email the same invitation link again.

        The token and expiry chosen at creation are left untouched.

        Raises:
            InvalidStateError: If the invitation is no longer pending
            InvalidTokenError: If the invitation has already expired
        """
        if invitation.status != InvitationStatus.pending:
            raise InvalidStateError(
                f"Only pending invitations can be resent (current status: {invitation.status.value})"
            )
        now = clock.utcnow()
        if invitation.is_expired(now):
            raise InvalidTokenError("Invitation has expired; create a new one instead")

        logger.info("Staff invitation %s resent", invitation.id)
        dispatcher.send_invitation(
            invitation, build_invitation_link(invitation.token), invitation.message
        )
        return invitation

    @staticmethod
    def sweep_expired(db: Session, restaurant_id: Optional[int] = None) -> int:
        """
        Move every pending invitation past its expiry to expired.

        Safe to run repeatedly; rows that are not pending are never touched.

        Returns:
            Number of invitations expired by this run
        """
        count = StaffInvitationRepository(db).expire_stale(
            clock.utcnow(), restaurant_id=restaurant_id
        )
        commit_or_raise(db)
        if count:
            logger.info("Expired %s stale staff invitations", count)
        return count

    @staticmethod
    def get_invitation_stats(db: Session, restaurant: Restaurant) -> Dict[str, int]:
        return StaffInvitationRepository(db).count_by_status(restaurant.id)

    @staticmethod
    def get_restaurant_invitations(
        db: Session,
        restaurant: Restaurant,
        status: Optional[InvitationStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[StaffInvitation]:
        return StaffInvitationRepository(db).list_for_restaurant(
            restaurant.id, status, skip, limit
        )

    @staticmethod
    def get_restaurant_invitation(
        db: Session, restaurant: Restaurant, invitation_id: int
    ) -> Optional[StaffInvitation]:
        return StaffInvitationRepository(db).get_for_restaurant(invitation_id, restaurant.id)
