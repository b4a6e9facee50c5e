"""Repository for email verification and password reset tokens."""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from snapserve.models.verification_token import VerificationToken, VerificationTokenType
from snapserve.repositories.base_repository import BaseRepository


class VerificationTokenRepository(BaseRepository[VerificationToken]):
    """Repository for VerificationToken database operations."""

    def __init__(self, db: Session):
        super().__init__(VerificationToken, db)

    def get_valid(
        self, token: str, token_type: VerificationTokenType, now: datetime
    ) -> Optional[VerificationToken]:
        """
        Get an unused, unexpired token of the given type.

        Args:
            token: Token string
            token_type: Expected token type
            now: Current time

        Returns:
            VerificationToken or None
        """
        return (
            self.db.query(VerificationToken)
            .filter(
                VerificationToken.token == token,
                VerificationToken.type == token_type,
                VerificationToken.used_at.is_(None),
                VerificationToken.expires_at > now,
            )
            .first()
        )

    def invalidate_for_user(
        self, user_id: int, token_type: VerificationTokenType, now: datetime
    ) -> int:
        """Mark every unused token of a type as used. Returns the row count."""
        return (
            self.db.query(VerificationToken)
            .filter(
                VerificationToken.user_id == user_id,
                VerificationToken.type == token_type,
                VerificationToken.used_at.is_(None),
            )
            .update({VerificationToken.used_at: now}, synchronize_session=False)
        )
