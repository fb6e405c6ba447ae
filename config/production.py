import os

from config.config import (  # noqa: F401
    CLOSEOUT_MARK_ABSENT,
    CLOSEOUT_TIME,
    LOG_LEVEL,
    NOTIFY_WORKERS,
    PAIRING_TIMEOUT_SECONDS,
    db_config_from_env,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")

SCHEDULER_ENABLED = env_flag("SCHEDULER_ENABLED", "1")
