"""Best-effort email notifications for staff and admin lifecycle events."""

import logging
import math
from typing import Callable, Optional

from snapserve.core.config import settings
from snapserve.models.invitation import StaffInvitation
from snapserve.models.restaurant import Restaurant
from snapserve.models.user import User
from snapserve.utils import clock
from snapserve.utils import email as email_utils

logger = logging.getLogger(__name__)


def _value(role) -> str:
    return getattr(role, "value", role)


def _days_left(invitation: StaffInvitation) -> int:
    remaining = (invitation.expires_at - clock.utcnow()).total_seconds()
    return max(1, math.ceil(remaining / 86400))


class NotificationDispatcher:
    """
    Sends lifecycle emails.

    Every method returns True on success and False on failure. Failures are
    logged and never raised, so a committed state change is never undone by
    a delivery problem.
    """

    def __init__(self, sender: Optional[Callable] = None):
        self.sender = sender or email_utils.send_email

    def _deliver(self, kind: str, to_email: str, build: Callable) -> bool:
        try:
            subject, html_content, text_content = build()
            self.sender(
                to_email=to_email,
                subject=subject,
                html_content=html_content,
                text_content=text_content,
            )
        except Exception:
            logger.exception("Failed to send %s email to %s", kind, to_email)
            return False
        logger.info("Sent %s email to %s", kind, to_email)
        return True

    def send_invitation(
        self, invitation: StaffInvitation, url: str, custom_message: Optional[str] = None
    ) -> bool:
        def build():
            restaurant = invitation.restaurant
            inviter = invitation.invited_by
            return email_utils.build_staff_invitation_email(
                first_name=invitation.first_name,
                restaurant_name=restaurant.name if restaurant else "a restaurant",
                role=_value(invitation.role),
                invite_link=url,
                expires_in_days=_days_left(invitation),
                inviter_name=inviter.full_name if inviter else None,
                custom_message=custom_message,
            )
        return self._deliver("staff invitation", invitation.email, build)

    def send_welcome(self, user: User, restaurant: Restaurant) -> bool:
        return self._deliver(
            "staff welcome",
            user.email,
            lambda: email_utils.build_staff_welcome_email(
                first_name=user.first_name,
                restaurant_name=restaurant.name,
                role=_value(user.role),
            ),
        )

    def send_role_update(self, user: User, old_role, new_role, restaurant: Restaurant) -> bool:
        return self._deliver(
            "role update",
            user.email,
            lambda: email_utils.build_role_update_email(
                first_name=user.first_name,
                restaurant_name=restaurant.name,
                old_role=_value(old_role),
                new_role=_value(new_role),
            ),
        )

    def send_admin_verification(self, user: User, restaurant: Restaurant, url: str) -> bool:
        return self._deliver(
            "admin verification",
            user.email,
            lambda: email_utils.build_admin_verification_email(
                first_name=user.first_name,
                restaurant_name=restaurant.name if restaurant else "your restaurant",
                verification_link=url,
                ttl_hours=settings.VERIFICATION_TOKEN_TTL_HOURS,
            ),
        )

    def send_admin_welcome(self, user: User, restaurant: Restaurant) -> bool:
        return self._deliver(
            "admin welcome",
            user.email,
            lambda: email_utils.build_admin_welcome_email(
                first_name=user.first_name,
                restaurant_name=restaurant.name,
            ),
        )


def get_notification_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency; overridden in tests."""
    return NotificationDispatcher()
