"""
Permission Service Module.
Maps each role to the capability flags the frontend uses to show or hide features.
"""
from typing import Dict

from snapserve.models.user import UserRole

PERMISSIONS = (
    "can_view_menu",
    "can_manage_menu",
    "can_manage_tables",
    "can_manage_orders",
    "can_manage_staff",
    "can_manage_restaurant",
    "can_view_analytics",
    "can_manage_payments",
    "can_view_reports",
)

ROLE_PERMISSIONS = {
    UserRole.admin: set(PERMISSIONS),
    UserRole.manager: {
        "can_view_menu",
        "can_manage_menu",
        "can_manage_tables",
        "can_manage_orders",
        "can_view_analytics",
        "can_view_reports",
    },
    UserRole.staff: {"can_view_menu", "can_manage_orders"},
    UserRole.customer: {"can_view_menu"},
    UserRole.user: set(),
}


class PermissionService:
    """Role based capability lookups."""

    @staticmethod
    def permissions_for(role: UserRole) -> Dict[str, bool]:
        """
        Build the full permission map for a role.

        Args:
            role: User role

        Returns:
            Dict of every permission name to True/False
        """
        granted = ROLE_PERMISSIONS.get(role, set())
        return {name: name in granted for name in PERMISSIONS}

    @staticmethod
    def has_permission(role: UserRole, permission: str) -> bool:
        return permission in ROLE_PERMISSIONS.get(role, set())
