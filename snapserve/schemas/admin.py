from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from snapserve.utils.validation import validate_password_strength


class AdminSignupRequest(BaseModel):
    """Schema for registering a restaurant and its admin."""
    email: EmailStr
    password: str = Field(..., min_length=8)
    password_confirmation: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    restaurant_name: str = Field(..., min_length=2, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value):
        if len(value) > 180:
            raise ValueError("Email cannot be longer than 180 characters")
        return value.lower()

    @model_validator(mode="after")
    def check_passwords(self):
        validate_password_strength(self.password)
        if self.password != self.password_confirmation:
            raise ValueError("Password confirmation does not match")
        return self


class AdminSignupResponse(BaseModel):
    message: str
    user_id: int
    email: str
    restaurant_id: int
    verification_required: bool


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class VerificationStatus(BaseModel):
    email: str
    is_verified: bool
    is_active: bool


class MessageResponse(BaseModel):
    message: str
