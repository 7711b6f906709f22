from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..core.exceptions import ValidationError
from ..database.connection import RestConnection
from ..database.rest_base import eq, select
from .model import Enrollment
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


def row_to_enrollment(r: Dict[str, Any]) -> Optional[Enrollment]:
    try:
        status = EnrollmentStatus.parse(r.get("estado") or EnrollmentStatus.ENROLLED.value)
    except ValidationError:
        logger.warning("Enrollment %s has unknown status %r; skipped", r.get("id"), r.get("estado"))
        return None

    student = r.get("estudiante") or {}
    name = " ".join(p for p in (student.get("nombres"), student.get("apellidos")) if p) or None
    return Enrollment(
        enrollment_id=int(r["id"]),
        student_id=int(r["estudiante_id"]),
        course_id=int(r["curso_id"]),
        status=status,
        student_name=name,
    )


def dedupe_enrolled(enrollments: Sequence[Enrollment]) -> list[Enrollment]:
    """Keep enrolled rows only, first row per student wins."""

    seen: set[int] = set()
    out: list[Enrollment] = []
    for e in enrollments:
        if e.status != EnrollmentStatus.ENROLLED or e.student_id in seen:
            continue
        seen.add(e.student_id)
        out.append(e)
    return out


class RestEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn: RestConnection):
        self._conn = conn

    def list_for_course(self, course_id: int) -> Sequence[Enrollment]:
        rows = select(
            self._conn,
            "inscripciones_cursos",
            {
                "curso_id": eq(int(course_id)),
                "select": "*,estudiante:estudiantes(id,nombres,apellidos)",
                "order": "id.asc",
            },
        )
        parsed = [e for e in (row_to_enrollment(r) for r in rows) if e is not None]
        unique = dedupe_enrolled(parsed)
        if len(unique) < len([e for e in parsed if e.status == EnrollmentStatus.ENROLLED]):
            logger.warning("Course %s has duplicate enrollments; extra rows ignored", course_id)
        return unique
