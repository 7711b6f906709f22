from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..core.constants import ATTENDANCE_CONFLICT_COLUMNS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..common.datetime_utils import parse_iso_date, parse_timestamp
from ..database.connection import RestConnection
from ..database.rest_base import delete, eq, first_or_none, insert, normalize_time, patch, select
from .model import AttendanceChange, AttendanceRecord, NewAttendance, extract_arrival_time
from .repository import AttendanceRepository, ConflictPolicy

logger = logging.getLogger(__name__)

_TABLE = "asistencia"
_RESOLUTIONS = {"ignore": "ignore-duplicates", "merge": "merge-duplicates"}


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def row_to_record(r: Dict[str, Any]) -> Optional[AttendanceRecord]:
    """Map a store row; rows with an unknown status are skipped, not defaulted."""

    try:
        status = AttendanceStatus.parse(r.get("estado") or "")
    except ValidationError:
        logger.warning("Attendance row %s has unknown status %r; skipped", r.get("id"), r.get("estado"))
        return None

    comment = r.get("comentario") or None
    arrival = normalize_time(r.get("hora_llegada")) or extract_arrival_time(comment)
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        course_id=int(r["curso_id"]),
        student_id=int(r["estudiante_id"]),
        attendance_date=parse_iso_date(str(r["fecha"])[:10]),
        status=status,
        comment=comment,
        arrival_time=arrival,
        recorded_by=r.get("registrado_por"),
        created_at=parse_timestamp(r.get("created_at")),
        updated_at=parse_timestamp(r.get("updated_at")),
    )


def _rows_to_records(rows: List[Dict[str, Any]]) -> List[AttendanceRecord]:
    return [rec for rec in (row_to_record(r) for r in rows) if rec is not None]


def _new_payload(record: NewAttendance, stamp: str) -> Dict[str, Any]:
    return {
        "curso_id": record.course_id,
        "estudiante_id": record.student_id,
        "fecha": record.attendance_date.isoformat(),
        "estado": record.status.value,
        "comentario": record.comment or "",
        "hora_llegada": record.arrival_time.strftime("%H:%M:%S") if record.arrival_time else None,
        "registrado_por": record.recorded_by,
        "created_at": stamp,
        "updated_at": stamp,
    }


class RestAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: RestConnection):
        self._conn = conn

    def find(self, course_id: int, on_date: date) -> Sequence[AttendanceRecord]:
        rows = select(
            self._conn,
            _TABLE,
            {"curso_id": eq(int(course_id)), "fecha": eq(on_date), "select": "*", "order": "estudiante_id.asc"},
        )
        return _rows_to_records(rows)

    def exists(self, course_id: int, on_date: date) -> bool:
        rows = select(
            self._conn,
            _TABLE,
            {"curso_id": eq(int(course_id)), "fecha": eq(on_date), "select": "id", "limit": 1},
        )
        return bool(rows)

    def find_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        rows = select(
            self._conn,
            _TABLE,
            {"estudiante_id": eq(int(student_id)), "select": "*", "order": "fecha.desc"},
        )
        return _rows_to_records(rows)

    def find_by_course(self, course_id: int) -> Sequence[AttendanceRecord]:
        rows = select(
            self._conn,
            _TABLE,
            {"curso_id": eq(int(course_id)), "select": "*", "order": "fecha.desc,estudiante_id.asc"},
        )
        return _rows_to_records(rows)

    def find_by_date(self, on_date: date) -> Sequence[AttendanceRecord]:
        rows = select(self._conn, _TABLE, {"fecha": eq(on_date), "select": "*", "order": "curso_id.asc"})
        return _rows_to_records(rows)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        r = first_or_none(select(self._conn, _TABLE, {"id": eq(int(attendance_id)), "select": "*"}))
        return row_to_record(r) if r else None

    def create(self, record: NewAttendance) -> AttendanceRecord:
        rows = insert(self._conn, _TABLE, _new_payload(record, _utc_stamp()))
        created = _rows_to_records(rows)
        if not created:
            raise NotFoundError("El servidor no devolvió el registro creado")
        return created[0]

    def bulk_create(
        self,
        records: Sequence[NewAttendance],
        *,
        on_conflict: ConflictPolicy = "ignore",
    ) -> Sequence[AttendanceRecord]:
        if not records:
            return []
        stamp = _utc_stamp()
        rows = insert(
            self._conn,
            _TABLE,
            [_new_payload(r, stamp) for r in records],
            params={"on_conflict": ATTENDANCE_CONFLICT_COLUMNS},
            resolution=_RESOLUTIONS[on_conflict],
        )
        return _rows_to_records(rows)

    def update(self, attendance_id: int, change: AttendanceChange) -> AttendanceRecord:
        payload: Dict[str, Any] = {
            "estado": change.status.value,
            "comentario": change.comment or "",
            "hora_llegada": change.arrival_time.strftime("%H:%M:%S") if change.arrival_time else None,
            "updated_at": _utc_stamp(),
        }
        if change.recorded_by is not None:
            payload["registrado_por"] = change.recorded_by

        rows = patch(self._conn, _TABLE, {"id": eq(int(attendance_id))}, payload)
        updated = _rows_to_records(rows)
        if not updated:
            raise NotFoundError(f"No se encontró el registro de asistencia {attendance_id}")
        return updated[0]

    def delete(self, attendance_id: int) -> None:
        rows = delete(self._conn, _TABLE, {"id": eq(int(attendance_id))})
        if not rows:
            raise NotFoundError(f"No se encontró el registro de asistencia {attendance_id}")
