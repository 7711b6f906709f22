from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..core.enums import CourseStatus
from ..core.exceptions import ValidationError
from ..database.connection import RestConnection
from ..database.rest_base import eq, first_or_none, select
from .model import CourseSession, TimeWindow, parse_weekdays
from .repository import CourseRepository

logger = logging.getLogger(__name__)

_COURSE_SELECT = "*,materia:materia_id(id,nombre),profesor:profesor_id(id,nombres,apellidos),aula:aula_id(id,nombre)"


def _full_name(person: Optional[Dict[str, Any]]) -> Optional[str]:
    if not person:
        return None
    name = " ".join(p for p in (person.get("nombres"), person.get("apellidos")) if p)
    return name or None


def row_to_course(r: Dict[str, Any]) -> CourseSession:
    course_id = int(r["id"])
    schedule_text = r.get("horario") or ""

    window: Optional[TimeWindow] = None
    try:
        window = TimeWindow.parse(schedule_text)
    except ValidationError:
        logger.warning("Course %s has an unreadable schedule %r", course_id, schedule_text)

    days, unknown = parse_weekdays(r.get("dias_semana") or "")
    if unknown:
        logger.warning("Course %s has unknown weekdays %s", course_id, unknown)

    try:
        status = CourseStatus.parse(r.get("estado") or "")
    except ValidationError:
        logger.warning("Course %s has unknown status %r; treating as inactive", course_id, r.get("estado"))
        status = CourseStatus.INACTIVE

    materia = r.get("materia") or {}
    aula = r.get("aula") or {}
    return CourseSession(
        course_id=course_id,
        subject_id=r.get("materia_id"),
        teacher_id=r.get("profesor_id"),
        classroom_id=r.get("aula_id"),
        days_of_week=days,
        time_window=window,
        status=status,
        capacity=int(r.get("cupo_maximo") or 0),
        schedule_text=schedule_text,
        subject_name=materia.get("nombre"),
        teacher_name=_full_name(r.get("profesor")),
        classroom_name=aula.get("nombre"),
        period_id=r.get("periodo_id"),
        enrolled_count=int(r.get("cupo_actual") or 0),
    )


class RestCourseRepository(CourseRepository):
    def __init__(self, conn: RestConnection):
        self._conn = conn

    def get_by_id(self, course_id: int) -> Optional[CourseSession]:
        r = first_or_none(select(self._conn, "cursos", {"id": eq(int(course_id)), "select": _COURSE_SELECT}))
        return row_to_course(r) if r else None

    def list_active(self) -> Sequence[CourseSession]:
        # Status casing differs between rows written by the admin form and seeds.
        rows = select(self._conn, "cursos", {"estado": "ilike.activo", "select": _COURSE_SELECT, "order": "id.asc"})
        return [row_to_course(r) for r in rows]

    def list_for_teacher(self, teacher_id: int) -> Sequence[CourseSession]:
        rows = select(
            self._conn,
            "cursos",
            {"profesor_id": eq(int(teacher_id)), "select": _COURSE_SELECT, "order": "horario.asc"},
        )
        return [row_to_course(r) for r in rows]
