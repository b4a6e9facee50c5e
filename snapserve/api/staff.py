from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from snapserve.core.rate_limit import limiter
from snapserve.core.security import get_current_restaurant, require_admin
from snapserve.db.session import get_db
from snapserve.models.invitation import InvitationStatus, StaffInvitation
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User
from snapserve.schemas.invitation import (
    InvitationCreate,
    InvitationListResponse,
    InvitationOut,
    InvitationResponse,
    StaffMemberOut,
    StaffRoleUpdate,
    StaffStatistics,
    SweepResponse,
)
from snapserve.services.invitation_service import StaffInvitationService
from snapserve.services.notification_service import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from snapserve.services.staff_service import StaffService

router = APIRouter()


def _get_invitation_or_404(
    db: Session, restaurant: Restaurant, invitation_id: int
) -> StaffInvitation:
    invitation = StaffInvitationService.get_restaurant_invitation(db, restaurant, invitation_id)
    if not invitation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invitation not found"
        )
    return invitation


@router.post(
    "/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("20/minute")
def create_invitation(
    request: Request,
    data: InvitationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    restaurant: Restaurant = Depends(get_current_restaurant),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """Invite a staff member or manager to the admin's restaurant."""
    invitation = StaffInvitationService.create_invitation(
        db,
        dispatcher,
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
        restaurant=restaurant,
        invited_by=current_user,
        expiry_days=data.expiry_days,
        message=data.message,
    )
    return InvitationResponse(
        message="Invitation sent successfully",
        invitation=InvitationOut.from_invitation(invitation),
    )


@router.get("/invitations", response_model=InvitationListResponse)
def list_invitations(
    status_filter: Optional[InvitationStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    """List the restaurant's invitations together with per-status counts."""
    invitations = StaffInvitationService.get_restaurant_invitations(
        db, restaurant, status_filter, skip, limit
    )
    return InvitationListResponse(
        invitations=[InvitationOut.from_invitation(inv) for inv in invitations],
        stats=StaffInvitationService.get_invitation_stats(db, restaurant),
    )


@router.post("/invitations/sweep", response_model=SweepResponse)
def sweep_invitations(
    db: Session = Depends(get_db),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    """Expire the restaurant's pending invitations that are past their expiry."""
    return {"expired": StaffInvitationService.sweep_expired(db, restaurant.id)}


@router.post("/invitations/{invitation_id}/cancel", response_model=InvitationOut)
def cancel_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    invitation = _get_invitation_or_404(db, restaurant, invitation_id)
    invitation = StaffInvitationService.cancel_invitation(db, invitation, current_user)
    return InvitationOut.from_invitation(invitation)


@router.post("/invitations/{invitation_id}/resend", response_model=InvitationOut)
@limiter.limit("5/minute")
def resend_invitation(
    request: Request,
    invitation_id: int,
    db: Session = Depends(get_db),
    restaurant: Restaurant = Depends(get_current_restaurant),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    invitation = _get_invitation_or_404(db, restaurant, invitation_id)
    invitation = StaffInvitationService.resend_invitation(db, dispatcher, invitation)
    return InvitationOut.from_invitation(invitation)


@router.post("/invitations/{invitation_id}/remove", response_model=InvitationOut)
def remove_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    """Revoke an accepted invitation and deactivate the account it created."""
    invitation = _get_invitation_or_404(db, restaurant, invitation_id)
    invitation = StaffInvitationService.remove_invitation(db, invitation, current_user)
    return InvitationOut.from_invitation(invitation)


@router.get("", response_model=List[StaffMemberOut])
def list_staff(
    db: Session = Depends(get_db),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    return StaffService.list_staff(db, restaurant)


@router.get("/statistics", response_model=StaffStatistics)
def staff_statistics(
    db: Session = Depends(get_db),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    return StaffService.staff_statistics(db, restaurant)


@router.delete("/{user_id}", response_model=StaffMemberOut)
def remove_staff_member(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    return StaffService.remove_staff_member(db, restaurant, user_id, current_user)


@router.patch("/{user_id}/role", response_model=StaffMemberOut)
def update_staff_role(
    user_id: int,
    data: StaffRoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    restaurant: Restaurant = Depends(get_current_restaurant),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    return StaffService.update_staff_role(
        db, dispatcher, restaurant, user_id, data.role, current_user
    )
