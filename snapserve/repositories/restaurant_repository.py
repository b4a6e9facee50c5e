"""Repositories for restaurants and their business hours."""

from typing import List, Optional
from sqlalchemy.orm import Session

from snapserve.models.restaurant import Restaurant, BusinessHours, DayOfWeek
from snapserve.repositories.base_repository import BaseRepository


class RestaurantRepository(BaseRepository[Restaurant]):
    """Repository for Restaurant database operations."""

    def __init__(self, db: Session):
        super().__init__(Restaurant, db)

    def get_owned_by(self, user_id: int) -> Optional[Restaurant]:
        """Restaurant whose owner is the given admin, if any."""
        return (
            self.db.query(Restaurant)
            .filter(Restaurant.owner_id == user_id)
            .order_by(Restaurant.id)
            .first()
        )

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Restaurant.id).filter(Restaurant.slug == slug)
        if exclude_id is not None:
            query = query.filter(Restaurant.id != exclude_id)
        return query.first() is not None


DAY_ORDER = [day for day in DayOfWeek]


class BusinessHoursRepository(BaseRepository[BusinessHours]):
    """Repository for BusinessHours database operations."""

    def __init__(self, db: Session):
        super().__init__(BusinessHours, db)

    def for_restaurant(self, restaurant_id: int) -> List[BusinessHours]:
        """
        Get the weekly schedule of a restaurant, Monday first.

        Args:
            restaurant_id: Restaurant ID

        Returns:
            List of BusinessHours ordered by weekday
        """
        rows = (
            self.db.query(BusinessHours)
            .filter(BusinessHours.restaurant_id == restaurant_id)
            .all()
        )
        return sorted(rows, key=lambda row: DAY_ORDER.index(row.day_of_week))

    def for_day(self, restaurant_id: int, day: DayOfWeek) -> Optional[BusinessHours]:
        return (
            self.db.query(BusinessHours)
            .filter(
                BusinessHours.restaurant_id == restaurant_id,
                BusinessHours.day_of_week == day,
            )
            .first()
        )

    def replace_for_restaurant(
        self, restaurant_id: int, hours: List[BusinessHours]
    ) -> List[BusinessHours]:
        """
        Delete the existing schedule and insert ``hours`` in its place.

        Args:
            restaurant_id: Restaurant ID
            hours: Transient BusinessHours rows

        Returns:
            The new schedule
        """
        self.db.query(BusinessHours).filter(
            BusinessHours.restaurant_id == restaurant_id
        ).delete(synchronize_session=False)
        self.db.flush()

        for row in hours:
            row.restaurant_id = restaurant_id
            self.db.add(row)
        self.db.flush()
        return self.for_restaurant(restaurant_id)
