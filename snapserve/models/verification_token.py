from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from snapserve.db.session import Base
from snapserve.models.mixins import utc_now
from snapserve.utils import clock
import enum


class VerificationTokenType(enum.Enum):
    email_verification = "email_verification"
    password_reset = "password_reset"


class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(64), nullable=False, unique=True, index=True)
    type = Column(Enum(VerificationTokenType), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User")

    def is_expired(self, now=None) -> bool:
        now = now or clock.utcnow()
        return self.expires_at <= now

    def is_used(self) -> bool:
        return self.used_at is not None

    def is_valid(self, now=None) -> bool:
        """Check if token can still be redeemed."""
        return not self.is_used() and not self.is_expired(now)

    def mark_used(self, now=None) -> None:
        self.used_at = now or clock.utcnow()
