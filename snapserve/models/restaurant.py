from datetime import time
import enum
import re
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Numeric,
    Time,
    Enum,
    ForeignKey,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from snapserve.db.session import Base
from snapserve.models.mixins import TimestampMixin


class CuisineType(enum.Enum):
    italian = "italian"
    chinese = "chinese"
    indian = "indian"
    mexican = "mexican"
    american = "american"
    fast_food = "fast_food"
    cafe = "cafe"
    other = "other"


class ServiceType(enum.Enum):
    dine_in = "dine_in"
    takeout = "takeout"
    delivery = "delivery"


class DayOfWeek(enum.Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"


def slugify(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")


class Restaurant(TimestampMixin, Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=True, index=True)
    description = Column(Text, nullable=True)
    phone_number = Column(String(20), nullable=True)
    email = Column(String(180), nullable=True)
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)
    logo_url = Column(String(500), nullable=True)
    cover_image_url = Column(String(500), nullable=True)
    cuisine_type = Column(Enum(CuisineType), nullable=True)
    service_types = Column(JSON, nullable=True, default=list)
    primary_color = Column(String(7), nullable=True)
    secondary_color = Column(String(7), nullable=True)
    special_instructions = Column(Text, nullable=True)
    accepts_reservations = Column(Boolean, default=False)
    has_delivery = Column(Boolean, default=False)
    has_takeout = Column(Boolean, default=True)
    minimum_order_amount = Column(Numeric(10, 2), nullable=True)
    delivery_fee = Column(Numeric(10, 2), nullable=True)
    estimated_delivery_time = Column(Integer, nullable=True)  # minutes
    is_active = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_restaurants")
    business_hours = relationship(
        "BusinessHours", back_populates="restaurant", cascade="all, delete-orphan"
    )
    staff_members = relationship("StaffMember", back_populates="restaurant")
    tables = relationship("Table", back_populates="restaurant")
    categories = relationship("Category", back_populates="restaurant")
    menu_items = relationship("MenuItem", back_populates="restaurant")
    orders = relationship("Order", back_populates="restaurant")

    def has_service(self, service: str) -> bool:
        return service in (self.service_types or [])

    def is_profile_complete(self) -> bool:
        return all([
            self.name,
            self.description,
            self.address,
            self.phone_number,
            self.cuisine_type,
            self.service_types,
        ])

    def profile_completion_percentage(self) -> int:
        fields = [
            bool(self.name),
            bool(self.description),
            bool(self.address),
            bool(self.phone_number),
            bool(self.email),
            self.cuisine_type is not None,
            bool(self.service_types),
            bool(self.logo_url),
            len(self.business_hours) > 0,
        ]
        return int(round(sum(fields) / len(fields) * 100))


class BusinessHours(TimestampMixin, Base):
    __tablename__ = "business_hours"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    day_of_week = Column(Enum(DayOfWeek), nullable=False)
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)
    is_open = Column(Boolean, nullable=False, default=True)
    is_24_hours = Column(Boolean, nullable=False, default=False)

    # One row per day per restaurant
    __table_args__ = (
        UniqueConstraint("restaurant_id", "day_of_week", name="unique_restaurant_day"),
    )

    restaurant = relationship("Restaurant", back_populates="business_hours")

    def formatted_hours(self) -> str:
        if not self.is_open:
            return "Closed"
        if self.is_24_hours:
            return "24 Hours"
        if self.open_time and self.close_time:
            return f"{_format_time(self.open_time)} - {_format_time(self.close_time)}"
        return "Hours not set"

    def is_open_at(self, moment: time) -> bool:
        """Check whether the restaurant is open at ``moment`` on this day."""
        if not self.is_open:
            return False
        if self.is_24_hours:
            return True
        if not self.open_time or not self.close_time:
            return False

        # Overnight hours, e.g. 22:00 - 02:00
        if self.close_time < self.open_time:
            return moment >= self.open_time or moment <= self.close_time
        return self.open_time <= moment <= self.close_time


def _format_time(value: Optional[time]) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"
