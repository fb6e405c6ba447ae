"""Settings shared by every environment, read from the process environment."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "attendance_engine"),
    }


PAIRING_TIMEOUT_SECONDS = int(os.getenv("PAIRING_TIMEOUT_SECONDS", "30"))

# HH:MM, local time.
CLOSEOUT_TIME = os.getenv("CLOSEOUT_TIME", "23:59")
CLOSEOUT_MARK_ABSENT = env_flag("CLOSEOUT_MARK_ABSENT", "1")

NOTIFY_WORKERS = int(os.getenv("NOTIFY_WORKERS", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
