import re
from typing import Optional

PASSWORD_MIN_LENGTH = 8
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def validate_password_strength(password: str) -> str:
    """
    Check the password policy shared by admin signup and staff onboarding.

    Raises:
        ValueError: If the password is too short or lacks a character class
    """
    if password is None or len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not PASSWORD_PATTERN.match(password):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, "
            "one number, and one special character (@$!%*?&)"
        )
    return password


def validate_hex_color(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError("Color must be a valid hex color code (e.g. #FF5733)")
    return value.upper()


def validate_email_format(email: str) -> bool:
    """Validate email format with strict pattern."""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email)) and len(email) <= 180


def normalize_email(email: str) -> str:
    return email.strip().lower()
