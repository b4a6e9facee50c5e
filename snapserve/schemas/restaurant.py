from datetime import datetime, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from snapserve.models.restaurant import CuisineType, DayOfWeek, ServiceType
from snapserve.utils.validation import validate_hex_color


class RestaurantProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    phone_number: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    cuisine_type: Optional[CuisineType] = None
    service_types: Optional[List[ServiceType]] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    special_instructions: Optional[str] = Field(None, max_length=2000)
    accepts_reservations: Optional[bool] = None
    minimum_order_amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    delivery_fee: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    estimated_delivery_time: Optional[int] = Field(None, ge=0, le=600)

    @field_validator("primary_color", "secondary_color")
    @classmethod
    def check_color(cls, value):
        return validate_hex_color(value)

    @field_validator("service_types")
    @classmethod
    def unique_services(cls, value):
        if value is None:
            return value
        return list(dict.fromkeys(value))

    def changes(self) -> dict:
        """Fields the client actually sent, with enums stored as the model expects."""
        data = self.model_dump(exclude_unset=True)
        if data.get("service_types") is not None:
            data["service_types"] = [service.value for service in data["service_types"]]
        return data


class RestaurantProfileOut(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    cuisine_type: Optional[CuisineType] = None
    service_types: List[str] = []
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    special_instructions: Optional[str] = None
    accepts_reservations: Optional[bool] = None
    has_delivery: Optional[bool] = None
    has_takeout: Optional[bool] = None
    minimum_order_amount: Optional[Decimal] = None
    delivery_fee: Optional[Decimal] = None
    estimated_delivery_time: Optional[int] = None
    is_active: bool
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("service_types", mode="before")
    @classmethod
    def default_services(cls, value):
        return value or []


class BusinessHoursIn(BaseModel):
    day_of_week: DayOfWeek
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    is_open: bool = True
    is_24_hours: bool = False


class BusinessHoursUpdate(BaseModel):
    hours: List[BusinessHoursIn] = Field(..., max_length=7)


class BusinessHoursOut(BaseModel):
    day_of_week: DayOfWeek
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    is_open: bool
    is_24_hours: bool
    formatted_hours: str

    @classmethod
    def from_row(cls, row) -> "BusinessHoursOut":
        return cls(
            day_of_week=row.day_of_week,
            open_time=row.open_time,
            close_time=row.close_time,
            is_open=row.is_open,
            is_24_hours=row.is_24_hours,
            formatted_hours=row.formatted_hours(),
        )
