from __future__ import annotations

from typing import Optional, Protocol

from .model import ScheduleConfig


class ScheduleConfigRepository(Protocol):
    def get_schedule_config(self, organization_id: int) -> Optional[ScheduleConfig]:
        """Return the organization's config, or None when it has no settings row.

        May raise on store failure or timeout.
        """

        raise NotImplementedError
