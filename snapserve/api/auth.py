from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from snapserve.core.rate_limit import limiter
from snapserve.core.security import get_current_user
from snapserve.db.session import get_db
from snapserve.models.user import User
from snapserve.schemas.admin import (
    MessageResponse,
    ResendVerificationRequest,
    VerificationStatus,
)
from snapserve.schemas.token import AuthStatus, LoginRequest, LoginResponse, Token
from snapserve.schemas.user import UserOut
from snapserve.services.admin_service import AdminService
from snapserve.services.auth_service import AuthService
from snapserve.services.notification_service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from snapserve.services.permission_service import PermissionService

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit("5/minute")
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    """Log in with email and password and receive a bearer token."""
    return AuthService.login(db, data.email, data.password)


@router.post("/token", response_model=Token)
@limiter.limit("5/minute")
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """OAuth2 password flow, used by the interactive API docs."""
    payload = AuthService.login(db, form_data.username, form_data.password)
    return {
        "access_token": payload["access_token"],
        "token_type": "bearer",
        "role": payload["role"],
    }


@router.get("/me", response_model=UserOut)
@limiter.limit("30/minute")
def get_me(request: Request, current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/status", response_model=AuthStatus)
def auth_status(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {
        "authenticated": True,
        "user": current_user,
        "restaurant": AuthService.restaurant_for(db, current_user),
        "permissions": PermissionService.permissions_for(current_user.role),
    }


@router.post("/refresh", response_model=LoginResponse)
def refresh_token(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Issue a fresh token for a still-valid session."""
    return AuthService.session_payload(db, current_user)


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy
    return {"message": "Logged out successfully"}


@router.get("/verify", response_model=MessageResponse)
@limiter.limit("10/minute")
def verify_email(
    request: Request,
    token: str,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Redeem an email verification link."""
    AdminService.verify_email(db, dispatcher, token)
    return {"message": "Email verified successfully. You can now log in."}


@router.post("/verify/resend", response_model=MessageResponse)
@limiter.limit("3/hour")
def resend_verification(
    request: Request,
    data: ResendVerificationRequest,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    AdminService.resend_verification(db, dispatcher, data.email)
    return {"message": "Verification email sent"}


@router.get("/verify/status", response_model=VerificationStatus)
def verification_status(email: str, db: Session = Depends(get_db)):
    return AdminService.verification_status(db, email)
