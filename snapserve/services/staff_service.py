"""Service for managing a restaurant's active staff."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from snapserve.core.exceptions import NotFoundError, ValidationError
from snapserve.db.session import commit_or_raise
from snapserve.models.invitation import StaffMember, StaffRole
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User, UserRole
from snapserve.repositories import StaffInvitationRepository, StaffMemberRepository
from snapserve.services.invitation_service import StaffInvitationService
from snapserve.services.notification_service import NotificationDispatcher

logger = logging.getLogger(__name__)


class StaffService:
    """Service for staff membership operations."""

    @staticmethod
    def list_staff(db: Session, restaurant: Restaurant) -> List[StaffMember]:
        return StaffMemberRepository(db).list_active(restaurant.id)

    @staticmethod
    def _get_active_member(db: Session, restaurant: Restaurant, user_id: int) -> StaffMember:
        membership = StaffMemberRepository(db).get_membership(restaurant.id, user_id)
        if not membership or not membership.is_active:
            raise NotFoundError("Staff member not found")
        return membership

    @staticmethod
    def remove_staff_member(
        db: Session, restaurant: Restaurant, user_id: int, removed_by: User
    ) -> StaffMember:
        """
        Remove a staff member from the restaurant and deactivate their account.

        Args:
            db: Database session
            restaurant: Admin's restaurant
            user_id: ID of the staff user
            removed_by: Admin performing the removal

        Returns:
            The deactivated membership

        Raises:
            ValidationError: If an admin tries to remove themselves
            NotFoundError: If the user is not active staff of this restaurant
        """
        if user_id == removed_by.id:
            raise ValidationError("You cannot remove yourself")

        membership = StaffService._get_active_member(db, restaurant, user_id)
        invitation = StaffInvitationRepository(db).get_accepted_for_user(restaurant.id, user_id)

        if invitation:
            StaffInvitationService.remove_invitation(db, invitation, removed_by)
        else:
            membership.is_active = False
            membership.user.is_active = False
            commit_or_raise(db)
            logger.info("Staff member %s removed from restaurant %s", user_id, restaurant.id)

        db.refresh(membership)
        return membership

    @staticmethod
    def update_staff_role(
        db: Session,
        dispatcher: NotificationDispatcher,
        restaurant: Restaurant,
        user_id: int,
        new_role,
        updated_by: User,
    ) -> StaffMember:
        """
        Promote or demote a staff member between staff and manager.

        Raises:
            ValidationError: If the role is invalid or unchanged
            NotFoundError: If the user is not active staff of this restaurant
        """
        try:
            role = new_role if isinstance(new_role, StaffRole) else StaffRole(new_role)
        except ValueError:
            raise ValidationError("Role must be either staff or manager")

        membership = StaffService._get_active_member(db, restaurant, user_id)
        old_role = membership.role
        if old_role == role:
            raise ValidationError(f"User already has the {role.value} role")

        membership.role = role
        membership.user.role = UserRole(role.value)
        commit_or_raise(db)
        db.refresh(membership)

        logger.info(
            "User %s role changed from %s to %s by user %s",
            user_id, old_role.value, role.value, updated_by.id,
        )
        dispatcher.send_role_update(membership.user, old_role, role, restaurant)
        return membership

    @staticmethod
    def staff_statistics(db: Session, restaurant: Restaurant) -> Dict[str, Any]:
        members = StaffMemberRepository(db)
        return {
            "invitations": StaffInvitationRepository(db).count_by_status(restaurant.id),
            "active_staff": members.count_active(restaurant.id),
            "managers": members.count_active(restaurant.id, StaffRole.manager),
        }
