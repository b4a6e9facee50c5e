from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship
from snapserve.db.session import Base
from snapserve.models.mixins import TimestampMixin
import enum


class UserRole(enum.Enum):
    user = "user"
    customer = "customer"
    staff = "staff"
    manager = "manager"
    admin = "admin"


ROLE_HIERARCHY = {
    UserRole.user: 0,
    UserRole.customer: 1,
    UserRole.staff: 2,
    UserRole.manager: 3,
    UserRole.admin: 4,
}


def role_rank(role: UserRole) -> int:
    return ROLE_HIERARCHY[role]


def role_at_least(role: UserRole, required: UserRole) -> bool:
    """Check whether ``role`` sits at or above ``required`` in the hierarchy."""
    if role is None:
        return False
    return role_rank(role) >= role_rank(required)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(180), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=True)
    password_hash = Column(String(512), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.user)
    is_active = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships
    owned_restaurants = relationship("Restaurant", back_populates="owner")
    memberships = relationship("StaffMember", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def is_staff_member(self) -> bool:
        """Staff, managers and admins all work for a restaurant."""
        return role_at_least(self.role, UserRole.staff)
