from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class NewNotification:
    org_id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    related_id: Optional[str] = None
    related_type: Optional[str] = None
