"""Repository for staff invitation and membership operations."""

from typing import Dict, List, Optional
from datetime import datetime
from sqlalchemy import and_, func
from sqlalchemy.orm import Session, joinedload

from snapserve.models.invitation import (
    StaffInvitation,
    StaffMember,
    InvitationStatus,
    StaffRole,
)
from snapserve.repositories.base_repository import BaseRepository


class StaffInvitationRepository(BaseRepository[StaffInvitation]):
    """Repository for StaffInvitation database operations."""

    def __init__(self, db: Session):
        super().__init__(StaffInvitation, db)

    def get_by_token(self, token: str) -> Optional[StaffInvitation]:
        """
        Get invitation by token, whatever its status.

        Args:
            token: Invitation token

        Returns:
            StaffInvitation or None
        """
        return self.db.query(StaffInvitation).filter(StaffInvitation.token == token).first()

    def get_for_restaurant(
        self, invitation_id: int, restaurant_id: int
    ) -> Optional[StaffInvitation]:
        """Get an invitation only if it belongs to the given restaurant."""
        return (
            self.db.query(StaffInvitation)
            .filter(
                and_(
                    StaffInvitation.id == invitation_id,
                    StaffInvitation.restaurant_id == restaurant_id,
                )
            )
            .first()
        )

    def find_active(
        self, restaurant_id: int, email: str, now: datetime
    ) -> Optional[StaffInvitation]:
        """
        Get the pending, unexpired invitation for (restaurant, email).

        Args:
            restaurant_id: Restaurant ID
            email: Normalised invitee email
            now: Current time

        Returns:
            StaffInvitation or None
        """
        return (
            self.db.query(StaffInvitation)
            .filter(
                StaffInvitation.restaurant_id == restaurant_id,
                StaffInvitation.email == email,
                StaffInvitation.status == InvitationStatus.pending,
                StaffInvitation.expires_at > now,
            )
            .first()
        )

    def find_valid_by_token(self, token: str, now: datetime) -> Optional[StaffInvitation]:
        """
        Get an invitation by token only while it can still be accepted.

        Args:
            token: Invitation token
            now: Current time

        Returns:
            StaffInvitation or None
        """
        return (
            self.db.query(StaffInvitation)
            .options(joinedload(StaffInvitation.restaurant))
            .filter(
                StaffInvitation.token == token,
                StaffInvitation.status == InvitationStatus.pending,
                StaffInvitation.expires_at > now,
            )
            .first()
        )

    def list_for_restaurant(
        self,
        restaurant_id: int,
        status: Optional[InvitationStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[StaffInvitation]:
        """
        Get invitations for a restaurant, newest first.

        Args:
            restaurant_id: Restaurant ID
            status: Optional stored status filter
            skip: Number of records to skip
            limit: Maximum number of records

        Returns:
            List of invitations
        """
        query = self.db.query(StaffInvitation).filter(
            StaffInvitation.restaurant_id == restaurant_id
        )
        if status:
            query = query.filter(StaffInvitation.status == status)

        return (
            query.order_by(StaffInvitation.created_at.desc(), StaffInvitation.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_accepted_for_user(
        self, restaurant_id: int, user_id: int
    ) -> Optional[StaffInvitation]:
        return (
            self.db.query(StaffInvitation)
            .filter(
                StaffInvitation.restaurant_id == restaurant_id,
                StaffInvitation.user_id == user_id,
                StaffInvitation.status == InvitationStatus.accepted,
            )
            .first()
        )

    def claim_pending(self, invitation_id: int, token: str, now: datetime) -> int:
        """
        Conditionally flip a pending, unexpired invitation to accepted.

        Only one caller can win the UPDATE for a given token; everyone else
        sees zero affected rows.

        Args:
            invitation_id: Invitation ID
            token: Invitation token
            now: Current time, also recorded as accepted_at

        Returns:
            Number of rows updated (0 or 1)
        """
        return (
            self.db.query(StaffInvitation)
            .filter(
                StaffInvitation.id == invitation_id,
                StaffInvitation.token == token,
                StaffInvitation.status == InvitationStatus.pending,
                StaffInvitation.expires_at > now,
            )
            .update(
                {
                    StaffInvitation.status: InvitationStatus.accepted,
                    StaffInvitation.accepted_at: now,
                    StaffInvitation.updated_at: now,
                },
                synchronize_session=False,
            )
        )

    def expire_stale(
        self,
        now: datetime,
        restaurant_id: Optional[int] = None,
        email: Optional[str] = None,
    ) -> int:
        """
        Bulk-move pending invitations whose expiry has passed to expired.

        Args:
            now: Current time
            restaurant_id: Optional restaurant scope
            email: Optional invitee scope

        Returns:
            Number of invitations expired
        """
        query = self.db.query(StaffInvitation).filter(
            StaffInvitation.status == InvitationStatus.pending,
            StaffInvitation.expires_at <= now,
        )
        if restaurant_id is not None:
            query = query.filter(StaffInvitation.restaurant_id == restaurant_id)
        if email is not None:
            query = query.filter(StaffInvitation.email == email)

        return query.update(
            {
                StaffInvitation.status: InvitationStatus.expired,
                StaffInvitation.updated_at: now,
            },
            synchronize_session=False,
        )

    def count_by_status(self, restaurant_id: int) -> Dict[str, int]:
        """
        Count invitations per stored status for a restaurant.

        Args:
            restaurant_id: Restaurant ID

        Returns:
            Dict keyed by every status value plus "total"
        """
        rows = (
            self.db.query(StaffInvitation.status, func.count(StaffInvitation.id))
            .filter(StaffInvitation.restaurant_id == restaurant_id)
            .group_by(StaffInvitation.status)
            .all()
        )
        stats = {status.value: 0 for status in InvitationStatus}
        for status, count in rows:
            stats[status.value] = count
        stats["total"] = sum(stats.values())
        return stats


class StaffMemberRepository(BaseRepository[StaffMember]):
    """Repository for StaffMember database operations."""

    def __init__(self, db: Session):
        super().__init__(StaffMember, db)

    def get_membership(self, restaurant_id: int, user_id: int) -> Optional[StaffMember]:
        return (
            self.db.query(StaffMember)
            .filter(
                StaffMember.restaurant_id == restaurant_id,
                StaffMember.user_id == user_id,
            )
            .first()
        )

    def get_active_for_user(self, user_id: int) -> Optional[StaffMember]:
        return (
            self.db.query(StaffMember)
            .filter(StaffMember.user_id == user_id, StaffMember.is_active.is_(True))
            .first()
        )

    def list_active(self, restaurant_id: int) -> List[StaffMember]:
        """
        Get active staff of a restaurant with their user rows loaded.

        Args:
            restaurant_id: Restaurant ID

        Returns:
            List of StaffMember ordered by join date
        """
        return (
            self.db.query(StaffMember)
            .options(joinedload(StaffMember.user))
            .filter(
                StaffMember.restaurant_id == restaurant_id,
                StaffMember.is_active.is_(True),
            )
            .order_by(StaffMember.joined_at)
            .all()
        )

    def count_active(self, restaurant_id: int, role: Optional[StaffRole] = None) -> int:
        query = self.db.query(func.count(StaffMember.id)).filter(
            StaffMember.restaurant_id == restaurant_id,
            StaffMember.is_active.is_(True),
        )
        if role is not None:
            query = query.filter(StaffMember.role == role)
        return query.scalar()
