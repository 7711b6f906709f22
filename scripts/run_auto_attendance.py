"""Run the attendance auto-fill once.

Note: Meant for cron, e.g. every 30 minutes during class hours. Exits non-zero
when any course could not be filled so the scheduler can alert.
"""

from __future__ import annotations

import importlib
import json
import logging
import sys

from dotenv import load_dotenv

from academy_attendance.container import build_container
from academy_attendance.settings import get_settings_module


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    container = build_container(
        rest_config=dict(settings.REST_CONFIG),
        tz_name=getattr(settings, "APP_TIMEZONE", None),
        auto_fill_comment=getattr(settings, "AUTO_FILL_COMMENT"),
    )
    try:
        result = container.auto_attendance_service.run()
    finally:
        if container.conn is not None:
            container.conn.close()

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
