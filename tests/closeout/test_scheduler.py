from datetime import time

from apscheduler.triggers.cron import CronTrigger

from src.attendance_engine.attendance_engine.closeout.scheduler import CLOSEOUT_JOB_ID, build_closeout_scheduler


def test_closeout_job_is_a_daily_cron(world):
    scheduler = build_closeout_scheduler(world.container.closeout, at=time(23, 59))

    job = scheduler.get_job(CLOSEOUT_JOB_ID)

    assert job is not None
    assert isinstance(job.trigger, CronTrigger)
    fields = {f.name: str(f) for f in job.trigger.fields}
    assert fields["hour"] == "23"
    assert fields["minute"] == "59"
