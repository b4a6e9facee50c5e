from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from snapserve.core.rate_limit import limiter
from snapserve.db.session import get_db
from snapserve.schemas.invitation import (
    InvitationAcceptResponse,
    InvitationPublicOut,
    StaffOnboardingRequest,
)
from snapserve.schemas.user import UserOut
from snapserve.services.invitation_service import StaffInvitationService
from snapserve.services.notification_service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)

router = APIRouter()


@router.get("/invitations/{token}", response_model=InvitationPublicOut)
@limiter.limit("10/minute")
def get_invitation(request: Request, token: str, db: Session = Depends(get_db)):
    """
    Get invitation details by token.
    This endpoint is public (no auth required) to render the onboarding form.
    """
    invitation = StaffInvitationService.get_invitation_details(db, token)
    return InvitationPublicOut(
        email=invitation.email,
        first_name=invitation.first_name,
        last_name=invitation.last_name,
        role=invitation.role,
        restaurant_name=invitation.restaurant.name if invitation.restaurant else None,
        message=invitation.message,
        expires_at=invitation.expires_at,
    )


@router.post("/onboard", response_model=InvitationAcceptResponse)
@limiter.limit("5/minute")
def accept_invitation(
    request: Request,
    data: StaffOnboardingRequest,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Accept an invitation by choosing a password; creates the staff account."""
    user = StaffInvitationService.accept_invitation(
        db,
        dispatcher,
        token=data.token,
        password=data.password,
        phone_number=data.phone_number,
    )
    membership = user.memberships[0]
    return InvitationAcceptResponse(
        message="Welcome aboard! Your account has been created.",
        user=UserOut.model_validate(user),
        restaurant_id=membership.restaurant_id,
    )
