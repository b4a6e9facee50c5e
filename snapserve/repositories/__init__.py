"""Repository layer for database access."""

from snapserve.repositories.user_repository import UserRepository
from snapserve.repositories.restaurant_repository import (
    RestaurantRepository,
    BusinessHoursRepository,
)
from snapserve.repositories.verification_token_repository import VerificationTokenRepository
from snapserve.repositories.invitation_repository import (
    StaffInvitationRepository,
    StaffMemberRepository,
)

__all__ = [
    "UserRepository",
    "RestaurantRepository",
    "BusinessHoursRepository",
    "VerificationTokenRepository",
    "StaffInvitationRepository",
    "StaffMemberRepository",
]
