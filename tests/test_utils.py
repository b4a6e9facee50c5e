"""
Unit tests for hashing, token, validation and email helpers.
"""
import pytest

from snapserve.utils.email import build_staff_invitation_email, send_email
from snapserve.utils.hash import hash_password, truncate_password, verify_password
from snapserve.utils.tokens import (
    build_invitation_link,
    generate_invitation_token,
)
from snapserve.utils.validation import (
    normalize_email,
    validate_email_format,
    validate_hex_color,
    validate_password_strength,
)


class TestPasswordHashing:
    """Test password hashing functionality."""

    def test_hash_and_verify(self):
        hashed = hash_password("TestPassword123!")

        assert hashed != "TestPassword123!"
        assert verify_password("TestPassword123!", hashed) is True
        assert verify_password("WrongPassword", hashed) is False

    def test_truncate_long_password(self):
        """Test truncating password exceeding bcrypt limit."""
        assert len(truncate_password("a" * 100).encode("utf-8")) <= 72

    def test_truncate_multibyte_password(self):
        truncated = truncate_password("é" * 50)

        assert len(truncated.encode("utf-8")) <= 72
        assert truncated == "é" * 36

    def test_hash_long_password(self):
        long_password = "a" * 100

        assert verify_password(long_password, hash_password(long_password)) is True


class TestTokens:
    def test_invitation_tokens_are_unique_hex(self):
        tokens = {generate_invitation_token() for _ in range(50)}

        assert len(tokens) == 50
        for token in tokens:
            assert len(token) == 64
            int(token, 16)

    def test_invitation_link(self):
        assert build_invitation_link("abc").endswith("/staff/onboard?token=abc")


class TestValidation:
    @pytest.mark.parametrize("password", ["Abcdef1!", "Kitchen123!", "P@ssw0rdLong"])
    def test_strong_passwords(self, password):
        assert validate_password_strength(password) == password

    @pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "ALLUPPER1!", "NoDigits!!", "NoSpecial12"])
    def test_weak_passwords(self, password):
        with pytest.raises(ValueError):
            validate_password_strength(password)

    def test_hex_color(self):
        assert validate_hex_color("#ff5733") == "#FF5733"
        assert validate_hex_color("") is None
        with pytest.raises(ValueError):
            validate_hex_color("ff5733")

    def test_email_helpers(self):
        assert validate_email_format("cook@pizzaplace.com") is True
        assert validate_email_format("cook@") is False
        assert normalize_email("  Cook@PizzaPlace.COM ") == "cook@pizzaplace.com"


class TestEmail:
    def test_invitation_email_escapes_html(self):
        subject, html_content, text = build_staff_invitation_email(
            first_name="<Gino>",
            restaurant_name="Pizza Place",
            role="staff",
            invite_link="http://localhost:3000/staff/onboard?token=abc",
            expires_in_days=7,
            custom_message="<script>alert(1)</script>",
        )

        assert subject == "You're invited to join Pizza Place on SnapServe"
        assert "<script>" not in html_content
        assert "&lt;Gino&gt;" in html_content
        assert "token=abc" in text

    def test_console_backend_does_not_connect(self, caplog):
        with caplog.at_level("INFO"):
            send_email("cook@pizzaplace.com", "Hello", "<p>Hi</p>", "Hi")

        assert "cook@pizzaplace.com" in caplog.text
