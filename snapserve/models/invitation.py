from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    ForeignKey,
    Enum,
    Computed,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from snapserve.core.exceptions import InvalidStateError
from snapserve.db.session import Base
from snapserve.models.mixins import TimestampMixin, utc_now
from snapserve.utils import clock
import enum


class InvitationStatus(enum.Enum):
    pending = "pending"
    accepted = "accepted"
    cancelled = "cancelled"
    expired = "expired"
    removed = "removed"


class StaffRole(enum.Enum):
    staff = "staff"
    manager = "manager"


PENDING_EMAIL_SQL = "CASE WHEN status = 'pending' THEN email END"

# pending and accepted are the only non-terminal states
ALLOWED_TRANSITIONS = {
    InvitationStatus.pending: {
        InvitationStatus.accepted,
        InvitationStatus.cancelled,
        InvitationStatus.expired,
    },
    InvitationStatus.accepted: {InvitationStatus.removed},
    InvitationStatus.cancelled: set(),
    InvitationStatus.expired: set(),
    InvitationStatus.removed: set(),
}


class StaffInvitation(TimestampMixin, Base):
    __tablename__ = "staff_invitations"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    invited_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    email = Column(String(180), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(Enum(StaffRole), nullable=False, default=StaffRole.staff)
    token = Column(String(64), nullable=False, unique=True, index=True)
    status = Column(
        Enum(InvitationStatus),
        nullable=False,
        default=InvitationStatus.pending,
        index=True,
    )
    message = Column(String(500), nullable=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    accepted_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancelled_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    removed_at = Column(DateTime, nullable=True)
    removed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Email while pending, NULL otherwise. NULLs never collide in a unique
    # constraint, so only one pending row per (restaurant, email) can exist.
    # MySQL has no partial indexes, hence a generated column.
    pending_email = Column(
        String(180),
        Computed(PENDING_EMAIL_SQL, persisted=True),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "restaurant_id", "pending_email", name="uq_staff_invitations_pending_email"
        ),
    )

    # Relationships
    restaurant = relationship("Restaurant")
    invited_by = relationship("User", foreign_keys=[invited_by_id])
    user = relationship("User", foreign_keys=[user_id])
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])
    removed_by = relationship("User", foreign_keys=[removed_by_id])

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_expired(self, now=None) -> bool:
        """Check if the invitation's lifetime has elapsed."""
        now = now or clock.utcnow()
        return self.expires_at <= now

    def is_pending(self, now=None) -> bool:
        """Pending and not yet past its expiry, regardless of whether a sweep ran."""
        return self.status == InvitationStatus.pending and not self.is_expired(now)

    def can_be_accepted(self, now=None) -> bool:
        return self.is_pending(now)

    def can_be_cancelled(self) -> bool:
        return self.status == InvitationStatus.pending

    def can_be_removed(self) -> bool:
        return self.status == InvitationStatus.accepted

    def effective_status(self, now=None) -> InvitationStatus:
        if self.status == InvitationStatus.pending and self.is_expired(now):
            return InvitationStatus.expired
        return self.status

    def transition_to(self, new_status: InvitationStatus) -> None:
        """
        Move to ``new_status``, rejecting transitions the lifecycle forbids.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateError(
                f"Cannot change invitation from {self.status.value} to {new_status.value}"
            )
        self.status = new_status


class StaffMember(Base):
    """Active employment of a user at a restaurant."""

    __tablename__ = "staff_members"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    invitation_id = Column(Integer, ForeignKey("staff_invitations.id"), nullable=True)
    role = Column(Enum(StaffRole), nullable=False, default=StaffRole.staff)
    is_active = Column(Boolean, nullable=False, default=True)
    joined_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    # A user can only be employed once per restaurant
    __table_args__ = (
        UniqueConstraint("restaurant_id", "user_id", name="unique_restaurant_user"),
    )

    restaurant = relationship("Restaurant", back_populates="staff_members")
    user = relationship("User", back_populates="memberships")
    invitation = relationship("StaffInvitation")
