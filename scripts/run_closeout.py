"""Run the end-of-day closeout once, outside the web process.

Usage: python scripts/run_closeout.py [ORGANIZATION_ID YYYY-MM-DD]
"""

from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_engine.attendance_engine.common.datetime_utils import parse_iso_date
from src.attendance_engine.attendance_engine.common.log import configure_logging
from src.attendance_engine.attendance_engine.container import build_container


def main(argv: list[str]) -> int:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(
        db_config=settings.DB_CONFIG,
        closeout_mark_absent=bool(getattr(settings, "CLOSEOUT_MARK_ABSENT", True)),
        notify_workers=0,
    )

    if len(argv) == 2:
        result = container.engine.run_end_of_day_closeout(int(argv[0]), parse_iso_date(argv[1]))
    else:
        result = container.engine.run_end_of_day_closeout()

    if not result.ok:
        print(f"FAILED ({result.error.value}): {result.message}")
        return 1
    print(f"OK: closed={result.value.closed} marked_absent={result.value.marked_absent}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
