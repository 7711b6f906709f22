from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional, Sequence, Union

from ..core.enums import AttendanceStatus, RegistrationState
from ..core.exceptions import DomainError, PartialBatchFailure, ValidationError
from ..courses.model import CourseSession
from ..enrollments.model import Enrollment
from .model import AttendanceChange, AttendanceRecord, NewAttendance, arrival_comment
from .repository import AttendanceRepository
from .strategies.base import RecordingDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowOutcome:
    student_id: int
    action: str
    ok: bool
    attendance_id: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "action": self.action,
            "ok": self.ok,
            "attendance_id": self.attendance_id,
            "error": self.error,
        }


@dataclass(frozen=True)
class SummaryLine:
    student_id: int
    name: str
    status: AttendanceStatus
    arrival_time: Optional[time]


@dataclass(frozen=True)
class RegistrationSummary:
    """What the teacher confirms before anything is written."""

    course_id: int
    subject: str
    schedule: str
    attendance_date: date
    editing: bool
    late_modification: bool
    warning: Optional[str]
    lines: List[SummaryLine]

    def counts(self) -> Dict[str, int]:
        out = {s.value: 0 for s in AttendanceStatus}
        for line in self.lines:
            out[line.status.value] += 1
        return out


@dataclass(frozen=True)
class SubmissionResult:
    course_id: int
    attendance_date: date
    editing: bool
    late_modification: bool
    warning: Optional[str]
    outcomes: List[RowOutcome] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for o in self.outcomes if o.ok and o.action == "create")

    @property
    def updated(self) -> int:
        return sum(1 for o in self.outcomes if o.ok and o.action == "update")

    def to_dict(self) -> dict:
        return {
            "course_id": self.course_id,
            "date": self.attendance_date.strftime("%Y-%m-%d"),
            "editing": self.editing,
            "late_modification": self.late_modification,
            "warning": self.warning,
            "created": self.created,
            "updated": self.updated,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class AttendanceRegistration:
    """State machine for recording or amending one course's attendance on one date.

    NO_RECORD -> RECORDING -> PENDING_CONFIRMATION -> SAVED. A failed confirmation
    goes back to PENDING_CONFIRMATION so it can be retried without re-entering
    statuses; only rows that failed are re-sent.
    """

    def __init__(
        self,
        *,
        course: CourseSession,
        attendance_date: date,
        roster: Sequence[Enrollment],
        existing: Sequence[AttendanceRecord],
        decision: RecordingDecision,
        attendance: AttendanceRepository,
        recorded_by: Optional[int] = None,
    ):
        self.course = course
        self.attendance_date = attendance_date
        self.roster = list(roster)
        self.decision = decision
        self.recorded_by = recorded_by
        self.state = RegistrationState.NO_RECORD

        self._attendance = attendance
        self._names = {e.student_id: e.display_name() for e in self.roster}
        self._existing: Dict[int, AttendanceRecord] = {r.student_id: r for r in existing}
        self._statuses: Dict[int, AttendanceStatus] = {}
        self._arrivals: Dict[int, Optional[time]] = {}
        self._summary: Optional[RegistrationSummary] = None
        self._saved: Dict[int, RowOutcome] = {}
        self._failed: Dict[int, RowOutcome] = {}

        self.editing = bool(self._existing)
        self._open()

    def _open(self) -> None:
        if self.editing:
            for student_id, rec in self._existing.items():
                if student_id in self._names:
                    self._statuses[student_id] = rec.status
        self.state = RegistrationState.RECORDING

    def _require(self, state: RegistrationState) -> None:
        if self.state != state:
            raise ValidationError(f"Operación no permitida en el estado {self.state.value}")

    @property
    def statuses(self) -> Dict[int, AttendanceStatus]:
        return dict(self._statuses)

    @property
    def summary(self) -> Optional[RegistrationSummary]:
        return self._summary

    def set_status(self, student_id: int, status: Union[AttendanceStatus, str]) -> None:
        self._require(RegistrationState.RECORDING)
        sid = int(student_id)
        if sid not in self._names:
            raise ValidationError(f"El estudiante {sid} no está inscrito en el curso")
        if not isinstance(status, AttendanceStatus):
            status = AttendanceStatus.parse(status)
        self._statuses[sid] = status

    def missing_students(self) -> List[int]:
        return [e.student_id for e in self.roster if e.student_id not in self._statuses]

    def submit(self, *, now: datetime) -> RegistrationSummary:
        """Move to PENDING_CONFIRMATION once every enrolled student has a status."""

        self._require(RegistrationState.RECORDING)
        missing = self.missing_students()
        if missing:
            raise ValidationError(
                "Debe registrar la asistencia de todos los alumnos (faltan: "
                + ", ".join(self._names[s] for s in missing)
                + ")"
            )

        entry = now.time().replace(second=0, microsecond=0)
        lines: List[SummaryLine] = []
        for e in self.roster:
            status = self._statuses[e.student_id]
            arrival = entry if status.records_arrival else None
            self._arrivals[e.student_id] = arrival
            lines.append(SummaryLine(student_id=e.student_id, name=e.display_name(), status=status, arrival_time=arrival))

        self._summary = RegistrationSummary(
            course_id=self.course.course_id,
            subject=self.course.display_subject(),
            schedule=self.course.time_window.format() if self.course.time_window else self.course.schedule_text,
            attendance_date=self.attendance_date,
            editing=self.editing,
            late_modification=self.decision.late_modification,
            warning=self.decision.warning,
            lines=lines,
        )
        self.state = RegistrationState.PENDING_CONFIRMATION
        return self._summary

    def cancel(self) -> None:
        """Back to RECORDING; entered statuses are kept."""

        self._require(RegistrationState.PENDING_CONFIRMATION)
        self._summary = None
        # Statuses may change again, so rows written by a failed confirm are re-sent.
        self._saved = {}
        self.state = RegistrationState.RECORDING

    def _comment(self, student_id: int) -> str:
        arrival = self._arrivals.get(student_id)
        return arrival_comment(arrival) if arrival else ""

    def confirm(self) -> SubmissionResult:
        """Write every row: update the ones that exist, create the rest in one batch."""

        self._require(RegistrationState.PENDING_CONFIRMATION)

        self._failed = {}
        pending = [e.student_id for e in self.roster if e.student_id not in self._saved]
        to_update = [s for s in pending if s in self._existing]
        to_create = [s for s in pending if s not in self._existing]

        for sid in to_update:
            rec = self._existing[sid]
            change = AttendanceChange(
                status=self._statuses[sid],
                comment=self._comment(sid),
                arrival_time=self._arrivals.get(sid),
                recorded_by=self.recorded_by,
            )
            try:
                updated = self._attendance.update(rec.attendance_id, change)
                self._existing[sid] = updated
                self._saved[sid] = RowOutcome(student_id=sid, action="update", ok=True, attendance_id=updated.attendance_id)
            except DomainError as e:
                logger.error("Updating attendance %s for student %s failed: %s", rec.attendance_id, sid, e)
                self._failed[sid] = RowOutcome(
                    student_id=sid, action="update", ok=False, attendance_id=rec.attendance_id, error=str(e)
                )

        if to_create:
            batch = [
                NewAttendance(
                    course_id=self.course.course_id,
                    student_id=sid,
                    attendance_date=self.attendance_date,
                    status=self._statuses[sid],
                    comment=self._comment(sid),
                    arrival_time=self._arrivals.get(sid),
                    recorded_by=self.recorded_by,
                )
                for sid in to_create
            ]
            try:
                written = self._attendance.bulk_create(batch, on_conflict="merge")
                ids = {r.student_id: r for r in written}
                for sid in to_create:
                    rec = ids.get(sid)
                    if rec:
                        self._existing[sid] = rec
                    self._saved[sid] = RowOutcome(
                        student_id=sid, action="create", ok=True, attendance_id=rec.attendance_id if rec else None
                    )
            except DomainError as e:
                logger.error("Creating %d attendance rows for course %s failed: %s", len(batch), self.course.course_id, e)
                for sid in to_create:
                    self._failed[sid] = RowOutcome(student_id=sid, action="create", ok=False, error=str(e))

        outcomes = [self._saved.get(e.student_id) or self._failed[e.student_id] for e in self.roster]
        if any(not o.ok for o in outcomes):
            self.state = RegistrationState.PENDING_CONFIRMATION
            ok = sum(1 for o in outcomes if o.ok)
            raise PartialBatchFailure(
                f"Se guardaron {ok} de {len(outcomes)} registros de asistencia",
                outcomes,
            )

        self.state = RegistrationState.SAVED
        return SubmissionResult(
            course_id=self.course.course_id,
            attendance_date=self.attendance_date,
            editing=self.editing,
            late_modification=self.decision.late_modification,
            warning=self.decision.warning,
            outcomes=outcomes,
        )

    def to_dict(self) -> dict:
        return {
            "course_id": self.course.course_id,
            "subject": self.course.display_subject(),
            "date": self.attendance_date.strftime("%Y-%m-%d"),
            "state": self.state.value,
            "editing": self.editing,
            "can_edit_freely": self.decision.can_edit_freely,
            "late_modification": self.decision.late_modification,
            "warning": self.decision.warning,
            "students": [
                {
                    "id": e.student_id,
                    "name": e.display_name(),
                    "status": self._statuses[e.student_id].value if e.student_id in self._statuses else None,
                    "arrival_time": (
                        self._existing[e.student_id].arrival_time.strftime("%H:%M")
                        if e.student_id in self._existing and self._existing[e.student_id].arrival_time
                        else None
                    ),
                }
                for e in self.roster
            ],
        }
