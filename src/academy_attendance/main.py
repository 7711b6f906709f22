from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .settings import get_settings_module

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .auto_attendance.controller import register as register_auto_attendance
from .courses.controller import register as register_courses
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rest_config = getattr(settings, "REST_CONFIG")
    if container is None:
        container = build_container(
            rest_config=rest_config,
            tz_name=getattr(settings, "APP_TIMEZONE", None),
            cron_token=getattr(settings, "AUTO_ATTENDANCE_TOKEN", None),
            auto_fill_comment=getattr(settings, "AUTO_FILL_COMMENT"),
        )
    app.extensions["academy_attendance"] = container

    if app.config["DEBUG"]:
        logger.info("settings=%s rest=%s", settings_module, rest_config.get("url"))

    register_users(app, container)
    register_courses(app, container)
    register_attendance(app, container)
    register_auto_attendance(app, container)

    return app
