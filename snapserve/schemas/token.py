from typing import Dict, Optional

from pydantic import BaseModel, EmailStr

from snapserve.schemas.user import UserOut


class Token(BaseModel):
    access_token: str
    token_type: str
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RestaurantSummary(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class LoginResponse(Token):
    user: UserOut
    restaurant: Optional[RestaurantSummary] = None
    permissions: Dict[str, bool]


class AuthStatus(BaseModel):
    authenticated: bool
    user: UserOut
    restaurant: Optional[RestaurantSummary] = None
    permissions: Dict[str, bool]
