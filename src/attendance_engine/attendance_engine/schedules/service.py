from __future__ import annotations

import logging
from dataclasses import replace

from ..core.exceptions import ConfigUnavailableError
from .model import FALLBACK_PERIODS, ScheduleConfig
from .repository import ScheduleConfigRepository

logger = logging.getLogger(__name__)


class ScheduleConfigProvider:
    """Fetches an organization's ScheduleConfig on every call.

    A failing or empty settings store degrades to the built-in defaults and
    fallback periods instead of failing the caller.
    """

    def __init__(self, settings: ScheduleConfigRepository):
        self._settings = settings

    def fetch(self, organization_id: int) -> ScheduleConfig:
        """Strict fetch; raises ConfigUnavailableError."""

        try:
            config = self._settings.get_schedule_config(int(organization_id))
        except Exception as exc:
            raise ConfigUnavailableError(f"Settings for organization {organization_id} unavailable: {exc}") from exc
        if config is None:
            raise ConfigUnavailableError(f"No settings stored for organization {organization_id}")
        if not config.periods:
            logger.warning("Organization %s has no periods, using fallback periods", organization_id)
            config = replace(config, periods=FALLBACK_PERIODS, degraded=True)
        return config

    def get(self, organization_id: int) -> ScheduleConfig:
        try:
            return self.fetch(organization_id)
        except ConfigUnavailableError as exc:
            logger.warning("%s; using fallback schedule config", exc)
            return ScheduleConfig.fallback()
