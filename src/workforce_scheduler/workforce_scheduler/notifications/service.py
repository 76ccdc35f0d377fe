from __future__ import annotations

from typing import Iterable, Optional

import structlog

from ..core.enums import MANAGER_ROLES, NotificationType
from ..users.repository import UserRepository
from .model import NewNotification
from .repository import NotificationRepository

log = structlog.get_logger(__name__)


class NotificationService:
    """Fire-and-forget notification fan-out.

    Delivery failures are logged and never propagate to the caller: the clock
    operation that triggered them has already been committed.
    """

    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def notify(
        self,
        org_id: str,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType,
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
    ) -> bool:
        try:
            self._notifications.create(
                NewNotification(
                    org_id=org_id,
                    user_id=user_id,
                    title=title,
                    message=message,
                    type=type,
                    related_id=related_id,
                    related_type=related_type,
                )
            )
            return True
        except Exception:
            log.warning("notification_failed", org_id=org_id, user_id=user_id, type=type.value, exc_info=True)
            return False

    def notify_managers(
        self,
        org_id: str,
        title: str,
        message: str,
        type: NotificationType,
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
    ) -> int:
        """Notify every active ADMIN/MANAGER in the org. Returns the delivered count."""

        try:
            managers = self._users.list_active_by_roles(org_id=org_id, roles=MANAGER_ROLES)
        except Exception:
            log.warning("notification_recipients_failed", org_id=org_id, type=type.value, exc_info=True)
            return 0

        return self._fan_out(org_id, (m.user_id for m in managers), title, message, type, related_id, related_type)

    def _fan_out(
        self,
        org_id: str,
        user_ids: Iterable[str],
        title: str,
        message: str,
        type: NotificationType,
        related_id: Optional[str],
        related_type: Optional[str],
    ) -> int:
        delivered = 0
        for user_id in user_ids:
            if self.notify(org_id, user_id, title, message, type, related_id, related_type):
                delivered += 1
        return delivered
