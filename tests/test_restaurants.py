"""
Tests for restaurant profile, business hours and setup progress.
"""
from datetime import datetime, time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from snapserve.core.exceptions import ValidationError
from snapserve.models.menu import MenuItem
from snapserve.models.restaurant import BusinessHours, DayOfWeek
from snapserve.services.restaurant_service import RestaurantService


WEEKDAY_HOURS = {
    "hours": [
        {"day_of_week": "monday", "open_time": "11:00:00", "close_time": "22:00:00"},
        {"day_of_week": "friday", "open_time": "18:00:00", "close_time": "02:00:00"},
        {"day_of_week": "saturday", "is_24_hours": True},
        {"day_of_week": "sunday", "is_open": False},
    ]
}


class TestProfileEndpoints:
    """Test GET/PATCH /api/restaurants/{id}/profile."""

    def test_get_profile(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.get(f"/api/restaurants/{restaurant.id}/profile", headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Pizza Place"
        assert data["slug"] == "pizza-place"
        assert data["service_types"] == []

    def test_update_profile(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.patch(
            f"/api/restaurants/{restaurant.id}/profile",
            json={
                "description": "Wood fired pizza",
                "cuisine_type": "italian",
                "service_types": ["dine_in", "delivery", "delivery"],
                "primary_color": "#ff5733",
            },
            headers=admin_auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Wood fired pizza"
        assert data["cuisine_type"] == "italian"
        assert data["service_types"] == ["dine_in", "delivery"]
        assert data["has_delivery"] is True
        assert data["has_takeout"] is False
        assert data["primary_color"] == "#FF5733"
        assert data["name"] == "Pizza Place"

    def test_rename_updates_slug(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.patch(
            f"/api/restaurants/{restaurant.id}/profile",
            json={"name": "Pizza Palace!"},
            headers=admin_auth_headers,
        )

        assert response.json()["slug"] == "pizza-palace"

    def test_invalid_color(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.patch(
            f"/api/restaurants/{restaurant.id}/profile",
            json={"primary_color": "red"},
            headers=admin_auth_headers,
        )

        assert response.status_code == 400

    def test_other_admins_restaurant(
        self, client: TestClient, other_admin_auth_headers: dict, restaurant
    ):
        """Test another admin's restaurant looks like it does not exist."""
        response = client.get(
            f"/api/restaurants/{restaurant.id}/profile", headers=other_admin_auth_headers
        )

        assert response.status_code == 404

    def test_staff_forbidden(self, client: TestClient, staff_auth_headers: dict, restaurant):
        response = client.get(f"/api/restaurants/{restaurant.id}/profile", headers=staff_auth_headers)

        assert response.status_code == 403


class TestBusinessHours:
    """Test the weekly schedule."""

    def test_replace_and_read(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.put(
            f"/api/restaurants/{restaurant.id}/business-hours",
            json=WEEKDAY_HOURS,
            headers=admin_auth_headers,
        )

        assert response.status_code == 200
        days = {row["day_of_week"]: row for row in response.json()}
        assert list(days) == ["monday", "friday", "saturday", "sunday"]
        assert days["monday"]["formatted_hours"] == "11:00 AM - 10:00 PM"
        assert days["saturday"]["formatted_hours"] == "24 Hours"
        assert days["sunday"]["formatted_hours"] == "Closed"

        listing = client.get(
            f"/api/restaurants/{restaurant.id}/business-hours", headers=admin_auth_headers
        )
        assert len(listing.json()) == 4

    def test_replace_drops_previous_schedule(
        self, client: TestClient, admin_auth_headers: dict, restaurant
    ):
        url = f"/api/restaurants/{restaurant.id}/business-hours"
        client.put(url, json=WEEKDAY_HOURS, headers=admin_auth_headers)

        response = client.put(
            url,
            json={"hours": [{"day_of_week": "tuesday", "open_time": "09:00", "close_time": "17:00"}]},
            headers=admin_auth_headers,
        )

        assert [row["day_of_week"] for row in response.json()] == ["tuesday"]

    def test_duplicate_day(self, db: Session, restaurant):
        with pytest.raises(ValidationError):
            RestaurantService.replace_business_hours(
                db,
                restaurant,
                [
                    {"day_of_week": "monday", "open_time": time(9), "close_time": time(17)},
                    {"day_of_week": "monday", "open_time": time(10), "close_time": time(18)},
                ],
            )

    def test_open_day_needs_times(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.put(
            f"/api/restaurants/{restaurant.id}/business-hours",
            json={"hours": [{"day_of_week": "monday", "open_time": "09:00"}]},
            headers=admin_auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_is_open_at(self, db: Session, restaurant):
        RestaurantService.replace_business_hours(
            db,
            restaurant,
            [
                {"day_of_week": DayOfWeek.monday, "open_time": time(11), "close_time": time(22)},
                {"day_of_week": DayOfWeek.sunday, "is_open": False},
            ],
        )

        # 2026-01-05 is a Monday
        assert RestaurantService.is_open_at(db, restaurant, datetime(2026, 1, 5, 12, 30)) is True
        assert RestaurantService.is_open_at(db, restaurant, datetime(2026, 1, 5, 23, 0)) is False
        assert RestaurantService.is_open_at(db, restaurant, datetime(2026, 1, 4, 12, 0)) is False
        assert RestaurantService.is_open_at(db, restaurant, datetime(2026, 1, 6, 12, 0)) is False


class TestSetupStatus:
    """Test onboarding progress reporting."""

    def test_fresh_restaurant(self, client: TestClient, admin_auth_headers: dict, restaurant):
        response = client.get(
            f"/api/restaurants/{restaurant.id}/setup-status", headers=admin_auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["steps"] == {
            "verification": True,
            "profile": False,
            "business_hours": False,
            "menu": False,
        }
        assert data["completed_steps"] == 1
        assert data["total_steps"] == 4
        assert data["is_complete"] is False

    def test_completed_setup(self, client: TestClient, db: Session, admin_auth_headers: dict, restaurant):
        client.patch(
            f"/api/restaurants/{restaurant.id}/profile",
            json={
                "description": "Wood fired pizza",
                "address": "1 Main Street",
                "phone_number": "555-0100",
                "cuisine_type": "italian",
                "service_types": ["dine_in"],
            },
            headers=admin_auth_headers,
        )
        client.put(
            f"/api/restaurants/{restaurant.id}/business-hours",
            json=WEEKDAY_HOURS,
            headers=admin_auth_headers,
        )
        db.add(MenuItem(restaurant_id=restaurant.id, name="Margherita", price=Decimal("9.50")))
        db.commit()

        data = client.get(
            f"/api/restaurants/{restaurant.id}/setup-status", headers=admin_auth_headers
        ).json()

        assert data["is_complete"] is True
        assert data["completed_steps"] == 4

    def test_statistics(self, client: TestClient, admin_auth_headers: dict, restaurant, staff_user):
        response = client.get(
            f"/api/restaurants/{restaurant.id}/statistics", headers=admin_auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["active_staff"] == 1
        assert data["total_menu_items"] == 0
        assert data["is_profile_complete"] is False


class TestProfileCompletion:
    def test_percentage_counts_business_hours(self, db: Session, restaurant):
        before = restaurant.profile_completion_percentage()
        db.add(BusinessHours(restaurant_id=restaurant.id, day_of_week=DayOfWeek.monday, is_open=False))
        db.commit()
        db.refresh(restaurant)

        assert restaurant.profile_completion_percentage() > before
