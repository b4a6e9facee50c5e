from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from snapserve.core.rate_limit import limiter
from snapserve.db.session import get_db
from snapserve.schemas.admin import AdminSignupRequest, AdminSignupResponse
from snapserve.services.admin_service import AdminService
from snapserve.services.notification_service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from snapserve.utils.validation import PASSWORD_MIN_LENGTH

router = APIRouter()


@router.post(
    "/signup",
    response_model=AdminSignupResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
@limiter.limit("3/hour")
def signup(
    request: Request,
    data: AdminSignupRequest,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Register a restaurant and its admin.
    The account stays inactive until the emailed verification link is opened.
    """
    return AdminService.signup(
        db,
        dispatcher,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        restaurant_name=data.restaurant_name,
        phone_number=data.phone_number,
    )


@router.get("/signup/requirements")
def signup_requirements():
    """Field rules so the signup form can validate before submitting."""
    return {
        "password": {
            "min_length": PASSWORD_MIN_LENGTH,
            "requires_lowercase": True,
            "requires_uppercase": True,
            "requires_number": True,
            "requires_special": "@$!%*?&",
        },
        "restaurant_name": {"min_length": 2, "max_length": 255},
        "first_name": {"max_length": 100},
        "last_name": {"max_length": 100},
        "phone_number": {"max_length": 20, "required": False},
        "email": {"max_length": 180},
    }
