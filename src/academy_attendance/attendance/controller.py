from __future__ import annotations

import csv
import io

from flask import Flask, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import require_positive_id
from ..common.web import admin_required, api_view, current_role, envelope, session_teacher_id, teacher_required
from ..container import Container
from ..core.exceptions import ValidationError

_EXPORT_FIELDS = ["date", "student_id", "student", "status", "arrival_time", "comment"]


def register(app: Flask, container: Container) -> None:
    def _today():
        return now_local(container.tz_name).date()

    def _date_arg(value):
        return parse_iso_date(value) if value else _today()

    def _write_csv(rows, *, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_EXPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/teacher/courses/<int:course_id>/attendance", methods=["GET"], endpoint="course_attendance")
    @teacher_required
    @api_view
    def course_attendance(course_id: int):
        on_date = _date_arg(request.args.get("date"))
        registration = container.attendance_service.load_existing(
            course_id,
            on_date,
            teacher_id=session_teacher_id(),
            recorded_by=int(session["user_id"]),
            now=now_local(container.tz_name),
        )
        return envelope(registration.to_dict())

    @app.route(
        "/api/teacher/courses/<int:course_id>/attendance", methods=["POST"], endpoint="submit_course_attendance"
    )
    @teacher_required
    @api_view
    def submit_course_attendance(course_id: int):
        data = request.get_json(silent=True) or {}
        on_date = _date_arg(data.get("date"))
        raw = data.get("statuses")
        if not isinstance(raw, dict):
            raise ValidationError("Debe enviar el estado de asistencia de cada alumno")
        statuses = {require_positive_id(k, "ID de estudiante"): v for k, v in raw.items()}

        result = container.attendance_service.submit(
            course_id,
            on_date,
            statuses,
            teacher_id=session_teacher_id(),
            recorded_by=int(session["user_id"]),
            now=now_local(container.tz_name),
        )
        message = "Asistencia actualizada correctamente" if result.editing else "Asistencia registrada correctamente"
        return envelope(result.to_dict(), message=message)

    @app.route("/api/teacher/courses/<int:course_id>/history", methods=["GET"], endpoint="course_history")
    @teacher_required
    @api_view
    def course_history(course_id: int):
        container.course_service.get_owned(course_id, session_teacher_id())
        report = container.report_service.build_course_report(course_id)
        return envelope(report.to_dict())

    @app.route("/api/teacher/courses/<int:course_id>/history.csv", methods=["GET"], endpoint="course_history_csv")
    @teacher_required
    @api_view
    def course_history_csv(course_id: int):
        container.course_service.get_owned(course_id, session_teacher_id())
        rows = container.report_service.rows_for_export(course_id)
        filename = f"asistencia_curso_{course_id}_{_today().strftime('%Y%m%d')}.csv"
        return _write_csv(rows, filename=filename)

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    @api_view
    def admin_attendance():
        on_date = _date_arg(request.args.get("date"))
        records = container.attendance_service.list_for_date(on_date)
        return envelope([container.attendance_service.to_dict(r) for r in records])

    @app.route("/api/admin/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="admin_delete_attendance")
    @admin_required
    @api_view
    def admin_delete_attendance(attendance_id: int):
        container.attendance_service.delete_record(current_role=current_role(), attendance_id=attendance_id)
        return envelope(message="Registro de asistencia eliminado")

    @app.route("/api/admin/students/<int:student_id>/attendance", methods=["GET"], endpoint="admin_student_attendance")
    @admin_required
    @api_view
    def admin_student_attendance(student_id: int):
        return envelope(container.report_service.build_student_report(student_id))
