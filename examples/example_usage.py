"""Example: drive the engine directly, without Flask.

Controllers are a thin layer; every operation is reachable from the
container's ``engine`` and returns a Result.
"""

import importlib

from config import get_settings_module

from src.attendance_engine.attendance_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, notify_workers=0)
    engine = container.engine

    result = engine.record_qr_scan(1)
    if result.ok:
        print(result.value.message)
    else:
        print(f"{result.error.value}: {result.message}")

    print(engine.get_pairing_status(1))


if __name__ == "__main__":
    main()
