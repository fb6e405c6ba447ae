from __future__ import annotations

import logging
from datetime import time

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.constants import DEFAULT_CLOSEOUT_TIME
from .service import EndOfDayCloseout

logger = logging.getLogger(__name__)

CLOSEOUT_JOB_ID = "end_of_day_closeout"


def build_closeout_scheduler(closeout: EndOfDayCloseout, *, at: time = DEFAULT_CLOSEOUT_TIME) -> BackgroundScheduler:
    """Daily cron job running ``closeout.run_all``. Not started."""

    scheduler = BackgroundScheduler(
        job_defaults={
            "coalesce": True,
            "misfire_grace_time": 3600,
        }
    )

    def _run_closeout():
        summary = closeout.run_all()
        if summary.failed_organizations:
            logger.warning("Closeout failed for organizations %s", summary.failed_organizations)

    scheduler.add_job(
        _run_closeout,
        "cron",
        id=CLOSEOUT_JOB_ID,
        hour=at.hour,
        minute=at.minute,
        replace_existing=True,
    )
    return scheduler


def start_closeout_scheduler(closeout: EndOfDayCloseout, *, at: time = DEFAULT_CLOSEOUT_TIME) -> BackgroundScheduler | None:
    scheduler = build_closeout_scheduler(closeout, at=at)
    try:
        scheduler.start()
    except Exception:
        logger.exception("Closeout scheduler failed to start; continuing without it")
        return None
    logger.info("Closeout scheduled daily at %s", at.strftime("%H:%M"))
    return scheduler
