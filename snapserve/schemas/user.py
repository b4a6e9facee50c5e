from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from snapserve.models.user import UserRole


class UserOut(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    full_name: str
    phone_number: Optional[str] = None
    role: UserRole
    is_active: bool
    is_verified: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
