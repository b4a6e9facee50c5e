"""Opaque token generation and the frontend links that carry them."""

import secrets

from snapserve.core.config import settings


def generate_secure_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure hex token.

    Args:
        length: Number of random bytes (the hex string is twice as long)

    Returns:
        Hex encoded token
    """
    return secrets.token_bytes(length).hex()


def generate_invitation_token() -> str:
    return generate_secure_token()


def generate_verification_token() -> str:
    return generate_secure_token()


def build_invitation_link(token: str) -> str:
    """
    Build the staff onboarding link sent with an invitation.

    Args:
        token: Invitation token

    Returns:
        Full URL of the onboarding page
    """
    return f"{settings.FRONTEND_URL.rstrip('/')}/staff/onboard?token={token}"


def build_verification_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/verify-email?token={token}"
