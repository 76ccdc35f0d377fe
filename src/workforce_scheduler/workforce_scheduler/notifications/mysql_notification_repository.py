from __future__ import annotations

import uuid

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NewNotification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: NewNotification) -> str:
        notification_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(notification_id, org_id, user_id, title, message, type,
                                          is_read, related_id, related_type)
                VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s)
                """,
                (
                    notification_id,
                    notification.org_id,
                    notification.user_id,
                    notification.title,
                    notification.message,
                    notification.type.value,
                    notification.related_id,
                    notification.related_type,
                ),
            )
        return notification_id
