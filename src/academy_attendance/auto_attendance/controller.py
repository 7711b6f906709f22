from __future__ import annotations

import hmac
import logging

from flask import Flask, request, session

from ..common.web import api_view, envelope
from ..container import Container
from ..core.enums import Role

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _allowed() -> bool:
        if session.get("role") == Role.ADMIN.value:
            return True
        token = request.headers.get("X-Cron-Token", "")
        expected = container.cron_token or ""
        return bool(expected) and hmac.compare_digest(token, expected)

    @app.route("/api/auto-attendance", methods=["GET", "POST"], endpoint="auto_attendance")
    @api_view
    def auto_attendance():
        if not _allowed():
            return envelope(message="No tiene permisos para esta acción", success=False, status=403)

        result = container.auto_attendance_service.run()
        logger.info("Auto attendance result: %s", result.message)
        body = result.to_dict()
        return envelope(
            {"details": body["details"], "failures": body["failures"]},
            message=result.message,
            success=result.success,
            status=200 if result.success else 500,
        )
