from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import NotificationPriority


@dataclass(frozen=True)
class Notification:
    user_id: int
    title: str
    body: str
    priority: NotificationPriority
    created_at: datetime
