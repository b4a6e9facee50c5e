from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from snapserve.core.security import require_admin
from snapserve.db.session import get_db
from snapserve.models.user import User
from snapserve.schemas.restaurant import (
    BusinessHoursOut,
    BusinessHoursUpdate,
    RestaurantProfileOut,
    RestaurantProfileUpdate,
)
from snapserve.services.restaurant_service import RestaurantService

router = APIRouter()


@router.get("/{restaurant_id}/profile", response_model=RestaurantProfileOut)
def get_profile(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return RestaurantService.get_restaurant_for_admin(db, restaurant_id, current_user)


@router.patch("/{restaurant_id}/profile", response_model=RestaurantProfileOut)
def update_profile(
    restaurant_id: int,
    data: RestaurantProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Update any subset of the restaurant profile fields."""
    restaurant = RestaurantService.get_restaurant_for_admin(db, restaurant_id, current_user)
    return RestaurantService.update_profile(db, restaurant, data.changes())


@router.get("/{restaurant_id}/business-hours", response_model=List[BusinessHoursOut])
def get_business_hours(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    restaurant = RestaurantService.get_restaurant_for_admin(db, restaurant_id, current_user)
    return [BusinessHoursOut.from_row(row) for row in RestaurantService.get_business_hours(db, restaurant)]


@router.put("/{restaurant_id}/business-hours", response_model=List[BusinessHoursOut])
def replace_business_hours(
    restaurant_id: int,
    data: BusinessHoursUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Replace the whole weekly schedule; days not listed are left unset."""
    restaurant = RestaurantService.get_restaurant_for_admin(db, restaurant_id, current_user)
    schedule = RestaurantService.replace_business_hours(
        db, restaurant, [entry.model_dump() for entry in data.hours]
    )
    return [BusinessHoursOut.from_row(row) for row in schedule]


@router.get("/{restaurant_id}/setup-status")
def setup_status(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    restaurant = RestaurantService.get_restaurant_for_admin(db, restaurant_id, current_user)
    return RestaurantService.setup_status(db, restaurant)


@router.get("/{restaurant_id}/statistics")
def statistics(
    restaurant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    restaurant = RestaurantService.get_restaurant_for_admin(db, restaurant_id, current_user)
    return RestaurantService.statistics(db, restaurant)
