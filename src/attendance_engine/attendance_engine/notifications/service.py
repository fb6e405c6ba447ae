"""Delivery of user notifications.

Senders hand a message to a ``Notifier`` and move on; a failed delivery is
logged and never reaches the caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import DEFAULT_NOTIFY_WORKERS
from ..core.enums import NotificationPriority
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, user_id: int, title: str, body: str, priority: NotificationPriority) -> None:
        raise NotImplementedError


class StoredNotifier(Notifier):
    """Writes the notification to the user's inbox table."""

    def __init__(self, notifications: NotificationRepository, *, clock: Clock | None = None):
        self._notifications = notifications
        self._clock = clock or SystemClock()

    def notify(self, user_id: int, title: str, body: str, priority: NotificationPriority) -> None:
        self._notifications.add(
            Notification(
                user_id=int(user_id),
                title=title,
                body=body,
                priority=priority,
                created_at=self._clock.now(),
            )
        )


class BackgroundNotifier(Notifier):
    """Runs another notifier on a small thread pool.

    With ``workers=0`` delivery happens inline on the calling thread.
    """

    def __init__(self, inner: Notifier, *, workers: int = DEFAULT_NOTIFY_WORKERS):
        self._inner = inner
        self._executor = (
            ThreadPoolExecutor(max_workers=int(workers), thread_name_prefix="notify") if int(workers) > 0 else None
        )

    def notify(self, user_id: int, title: str, body: str, priority: NotificationPriority) -> None:
        if self._executor is None:
            self._deliver(user_id, title, body, priority)
            return
        future = self._executor.submit(self._inner.notify, user_id, title, body, priority)
        future.add_done_callback(lambda f: self._log_failure(f, user_id))

    def _deliver(self, user_id: int, title: str, body: str, priority: NotificationPriority) -> None:
        try:
            self._inner.notify(user_id, title, body, priority)
        except Exception:
            logger.exception("Notification to user %s failed", user_id)

    @staticmethod
    def _log_failure(future: Future, user_id: int) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Notification to user %s failed: %s", user_id, exc)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
