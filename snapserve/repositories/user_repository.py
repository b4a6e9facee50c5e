"""Repository for user lookups."""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from snapserve.models.user import User
from snapserve.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User database operations."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email, ignoring case.

        Args:
            email: User email

        Returns:
            User or None
        """
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None
