from config.config import (  # noqa: F401
    CLOSEOUT_MARK_ABSENT,
    CLOSEOUT_TIME,
    db_config_from_env,
)

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
SCHEDULER_ENABLED = False

PAIRING_TIMEOUT_SECONDS = 30
# Deliver notifications inline so tests can observe them.
NOTIFY_WORKERS = 0
LOG_LEVEL = "WARNING"
