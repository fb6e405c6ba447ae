from __future__ import annotations

from typing import Protocol

from .model import Notification


class NotificationRepository(Protocol):
    def add(self, notification: Notification) -> int:
        raise NotImplementedError
