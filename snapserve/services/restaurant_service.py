"""Service for restaurant profile, business hours and setup progress."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from snapserve.core.exceptions import NotFoundError, ValidationError
from snapserve.db.session import commit_or_raise
from snapserve.models.menu import Category, MenuItem
from snapserve.models.order import Order
from snapserve.models.restaurant import BusinessHours, DayOfWeek, Restaurant, slugify
from snapserve.models.table import Table
from snapserve.models.user import User
from snapserve.repositories import (
    BusinessHoursRepository,
    RestaurantRepository,
    StaffMemberRepository,
)

logger = logging.getLogger(__name__)

WEEKDAYS = list(DayOfWeek)


class RestaurantService:
    """Service for restaurant operations."""

    @staticmethod
    def unique_slug(db: Session, name: str, exclude_id: Optional[int] = None) -> str:
        """
        Derive a slug from ``name`` that no other restaurant uses.

        Collisions get a numeric suffix: pizza-place, pizza-place-2, ...
        """
        base = slugify(name) or "restaurant"
        repo = RestaurantRepository(db)
        slug = base
        suffix = 2
        while repo.slug_exists(slug, exclude_id=exclude_id):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    @staticmethod
    def get_restaurant_for_admin(db: Session, restaurant_id: int, user: User) -> Restaurant:
        """
        Get a restaurant the user owns.

        Restaurants owned by someone else are reported as missing rather
        than forbidden.

        Raises:
            NotFoundError: If the restaurant does not exist or is not owned by the user
        """
        restaurant = RestaurantRepository(db).get_by_id(restaurant_id)
        if not restaurant or restaurant.owner_id != user.id:
            raise NotFoundError("Restaurant not found or access denied")
        return restaurant

    @staticmethod
    def update_profile(db: Session, restaurant: Restaurant, changes: Dict[str, Any]) -> Restaurant:
        """
        Apply a partial profile update.

        Args:
            db: Database session
            restaurant: Restaurant to update
            changes: Validated field values; absent fields are left untouched

        Returns:
            Updated restaurant
        """
        for field, value in changes.items():
            if field == "name" and value and value != restaurant.name:
                restaurant.slug = RestaurantService.unique_slug(db, value, exclude_id=restaurant.id)
            setattr(restaurant, field, value)

        # Keep the service flags in step with the service list
        if "service_types" in changes and changes["service_types"] is not None:
            restaurant.has_delivery = "delivery" in changes["service_types"]
            restaurant.has_takeout = "takeout" in changes["service_types"]

        commit_or_raise(db)
        db.refresh(restaurant)
        logger.info("Restaurant %s profile updated", restaurant.id)
        return restaurant

    @staticmethod
    def get_business_hours(db: Session, restaurant: Restaurant) -> List[BusinessHours]:
        return BusinessHoursRepository(db).for_restaurant(restaurant.id)

    @staticmethod
    def replace_business_hours(
        db: Session, restaurant: Restaurant, hours: List[Dict[str, Any]]
    ) -> List[BusinessHours]:
        """
        Replace the weekly schedule.

        Args:
            db: Database session
            restaurant: Restaurant to update
            hours: One dict per day with day_of_week, open_time, close_time,
                is_open and is_24_hours

        Returns:
            The new schedule, Monday first

        Raises:
            ValidationError: If a day repeats or an open day lacks times
        """
        seen = set()
        rows = []
        for entry in hours:
            day = DayOfWeek(entry["day_of_week"])
            if day in seen:
                raise ValidationError(f"Duplicate entry for {day.value}")
            seen.add(day)

            is_open = entry.get("is_open", True)
            is_24_hours = entry.get("is_24_hours", False)
            open_time = entry.get("open_time")
            close_time = entry.get("close_time")
            if is_open and not is_24_hours and (open_time is None or close_time is None):
                raise ValidationError(
                    f"Open and close times are required for {day.value}"
                )

            rows.append(
                BusinessHours(
                    day_of_week=day,
                    open_time=open_time if is_open and not is_24_hours else None,
                    close_time=close_time if is_open and not is_24_hours else None,
                    is_open=is_open,
                    is_24_hours=is_24_hours if is_open else False,
                )
            )

        BusinessHoursRepository(db).replace_for_restaurant(restaurant.id, rows)
        commit_or_raise(db)
        db.expire(restaurant, ["business_hours"])

        logger.info("Restaurant %s business hours replaced (%s days)", restaurant.id, len(rows))
        return BusinessHoursRepository(db).for_restaurant(restaurant.id)

    @staticmethod
    def is_open_at(db: Session, restaurant: Restaurant, moment: datetime) -> bool:
        day = WEEKDAYS[moment.weekday()]
        hours = BusinessHoursRepository(db).for_day(restaurant.id, day)
        return bool(hours and hours.is_open_at(moment.time()))

    @staticmethod
    def setup_status(db: Session, restaurant: Restaurant) -> Dict[str, Any]:
        """
        Report onboarding progress for the admin dashboard.

        Returns:
            Dict with a completed flag per step and the profile completion percentage
        """
        has_hours = len(BusinessHoursRepository(db).for_restaurant(restaurant.id)) > 0
        has_menu = (
            db.query(func.count(MenuItem.id))
            .filter(MenuItem.restaurant_id == restaurant.id)
            .scalar()
            > 0
        )
        steps = {
            "verification": bool(restaurant.is_verified),
            "profile": restaurant.is_profile_complete(),
            "business_hours": has_hours,
            "menu": has_menu,
        }
        return {
            "restaurant_id": restaurant.id,
            "steps": steps,
            "completed_steps": sum(steps.values()),
            "total_steps": len(steps),
            "is_complete": all(steps.values()),
            "completion_percentage": restaurant.profile_completion_percentage(),
        }

    @staticmethod
    def statistics(db: Session, restaurant: Restaurant) -> Dict[str, Any]:
        def count(model):
            return (
                db.query(func.count(model.id))
                .filter(model.restaurant_id == restaurant.id)
                .scalar()
            )

        return {
            "total_tables": count(Table),
            "total_categories": count(Category),
            "total_menu_items": count(MenuItem),
            "total_orders": count(Order),
            "active_staff": StaffMemberRepository(db).count_active(restaurant.id),
            "profile_completion_percentage": restaurant.profile_completion_percentage(),
            "is_profile_complete": restaurant.is_profile_complete(),
        }
