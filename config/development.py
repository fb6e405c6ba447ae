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

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="root")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")

SCHEDULER_ENABLED = env_flag("SCHEDULER_ENABLED", "1")
