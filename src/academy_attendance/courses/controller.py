from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import api_view, envelope, session_teacher_id, teacher_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/teacher/courses", methods=["GET"], endpoint="teacher_courses")
    @teacher_required
    @api_view
    def teacher_courses():
        teacher_id = session_teacher_id()
        on_date = now_local(container.tz_name).date() if request.args.get("today") in {"1", "true"} else None

        if teacher_id is None:
            courses = container.course_service.list_active(on_date=on_date)
        else:
            courses = container.course_service.list_for_teacher(teacher_id, on_date=on_date)
        return envelope([container.course_service.to_dict(c) for c in courses])
