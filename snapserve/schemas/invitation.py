from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from snapserve.models.invitation import InvitationStatus, StaffRole
from snapserve.schemas.user import UserOut
from snapserve.utils.validation import validate_password_strength


class InvitationCreate(BaseModel):
    """Schema for inviting a staff member."""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: StaffRole = StaffRole.staff
    message: Optional[str] = Field(None, max_length=500)
    expiry_days: int = Field(7, ge=1, le=30)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value):
        if len(value) > 180:
            raise ValueError("Email cannot be longer than 180 characters")
        return value.lower()


class InvitationOut(BaseModel):
    """Schema for invitation details shown to the restaurant admin."""
    id: int
    restaurant_id: int
    email: str
    first_name: str
    last_name: str
    role: StaffRole
    status: InvitationStatus
    message: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    removed_at: Optional[datetime] = None
    invited_by_id: int
    user_id: Optional[int] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_invitation(cls, invitation) -> "InvitationOut":
        # Report pending rows past their expiry as expired even before a sweep
        out = cls.model_validate(invitation)
        out.status = invitation.effective_status()
        return out


class InvitationPublicOut(BaseModel):
    """Public schema for the onboarding page (without sensitive data)."""
    email: str
    first_name: str
    last_name: str
    role: StaffRole
    restaurant_name: Optional[str] = None
    message: Optional[str] = None
    expires_at: datetime


class InvitationResponse(BaseModel):
    """Response after creating an invitation."""
    message: str
    invitation: InvitationOut


class InvitationListResponse(BaseModel):
    invitations: List[InvitationOut]
    stats: Dict[str, int]


class StaffOnboardingRequest(BaseModel):
    """Accepting an invitation sets the password of the new account."""
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
    password_confirmation: str
    phone_number: Optional[str] = Field(None, max_length=20)

    @model_validator(mode="after")
    def check_passwords(self):
        validate_password_strength(self.password)
        if self.password != self.password_confirmation:
            raise ValueError("Password confirmation does not match")
        return self


class InvitationAcceptResponse(BaseModel):
    """Response after accepting an invitation."""
    message: str
    user: UserOut
    restaurant_id: int


class SweepResponse(BaseModel):
    expired: int


class StaffMemberOut(BaseModel):
    user_id: int
    restaurant_id: int
    role: StaffRole
    is_active: bool
    joined_at: datetime
    user: UserOut

    class Config:
        from_attributes = True


class StaffRoleUpdate(BaseModel):
    role: StaffRole


class StaffStatistics(BaseModel):
    invitations: Dict[str, int]
    active_staff: int
    managers: int
