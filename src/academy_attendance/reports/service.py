from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus
from ..courses.repository import CourseRepository
from ..enrollments.repository import EnrollmentRepository
from .calculator.base import AttendanceCalculator
from .calculator.standard_calculator import StandardAttendanceCalculator


def _pct(part: int, total: int) -> float:
    return part / total * 100 if total > 0 else 0.0


@dataclass
class StatusCounts:
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "excused": self.excused,
            "total": self.total,
        }


@dataclass(frozen=True)
class DateSummary:
    attendance_date: date
    counts: StatusCounts


@dataclass(frozen=True)
class StudentSummary:
    student_id: int
    name: str
    counts: StatusCounts
    attendance_percentage: float

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            **self.counts.to_dict(),
            "attendance_percentage": round(self.attendance_percentage, 1),
        }


@dataclass(frozen=True)
class CourseReport:
    course_id: Optional[int]
    total_classes: int
    total_records: int
    present_pct: float
    absent_pct: float
    late_pct: float
    counts: StatusCounts
    by_date: List[DateSummary] = field(default_factory=list)
    by_student: List[StudentSummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "course_id": self.course_id,
            "total_classes": self.total_classes,
            "total_records": self.total_records,
            "present_pct": round(self.present_pct, 1),
            "absent_pct": round(self.absent_pct, 1),
            "late_pct": round(self.late_pct, 1),
            "counts": self.counts.to_dict(),
            "by_date": [
                {"date": d.attendance_date.strftime("%Y-%m-%d"), **d.counts.to_dict()} for d in self.by_date
            ],
            "by_student": [s.to_dict() for s in self.by_student],
        }


def _count(counts: StatusCounts, status: AttendanceStatus, calculator: AttendanceCalculator) -> None:
    bucket = calculator.bucket(status)
    setattr(counts, bucket, getattr(counts, bucket) + 1)
    if status == AttendanceStatus.EXCUSED:
        counts.excused += 1


def summarize(
    records: Sequence[AttendanceRecord],
    *,
    students: Optional[Mapping[int, str]] = None,
    course_id: Optional[int] = None,
    calculator: Optional[AttendanceCalculator] = None,
) -> CourseReport:
    """Pure aggregation over one course's rows.

    ``students`` seeds the per-student table so enrolled students with no rows
    still show up at 0%.
    """

    calc = calculator or StandardAttendanceCalculator()
    names: Dict[int, str] = dict(students or {})

    overall = StatusCounts()
    per_date: Dict[date, StatusCounts] = {}
    per_student: Dict[int, StatusCounts] = {sid: StatusCounts() for sid in names}

    for r in records:
        _count(overall, r.status, calc)
        _count(per_date.setdefault(r.attendance_date, StatusCounts()), r.status, calc)
        _count(per_student.setdefault(r.student_id, StatusCounts()), r.status, calc)

    total = overall.total
    by_student = [
        StudentSummary(
            student_id=sid,
            name=names.get(sid) or f"Estudiante {sid}",
            counts=c,
            attendance_percentage=calc.attendance_percentage(present=c.present, absent=c.absent, late=c.late),
        )
        for sid, c in per_student.items()
    ]
    by_student.sort(key=lambda s: (-s.attendance_percentage, s.name))

    return CourseReport(
        course_id=course_id,
        total_classes=len(per_date),
        total_records=total,
        present_pct=_pct(overall.present, total),
        absent_pct=_pct(overall.absent, total),
        late_pct=_pct(overall.late, total),
        counts=overall,
        by_date=[DateSummary(attendance_date=d, counts=per_date[d]) for d in sorted(per_date, reverse=True)],
        by_student=by_student,
    )


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollments: EnrollmentRepository,
        courses: Optional[CourseRepository] = None,
        *,
        calculator: Optional[AttendanceCalculator] = None,
    ):
        self._attendance = attendance
        self._enrollments = enrollments
        self._courses = courses
        self._calculator = calculator or StandardAttendanceCalculator()

    def build_course_report(self, course_id: int) -> CourseReport:
        roster = self._enrollments.list_for_course(int(course_id))
        records = self._attendance.find_by_course(int(course_id))
        return summarize(
            records,
            students={e.student_id: e.display_name() for e in roster},
            course_id=int(course_id),
            calculator=self._calculator,
        )

    def build_student_report(self, student_id: int) -> dict:
        """One student's attendance across all courses, plus a per-course breakdown."""

        records = self._attendance.find_by_student(int(student_id))
        overall = summarize(records, calculator=self._calculator)

        by_course: Dict[int, List[AttendanceRecord]] = {}
        for r in records:
            by_course.setdefault(r.course_id, []).append(r)

        courses = []
        for course_id, rows in sorted(by_course.items()):
            report = summarize(rows, calculator=self._calculator)
            stats = report.by_student[0]
            subject = None
            if self._courses:
                course = self._courses.get_by_id(course_id)
                subject = course.display_subject() if course else None
            courses.append(
                {
                    "course_id": course_id,
                    "subject": subject or f"Curso {course_id}",
                    **stats.counts.to_dict(),
                    "attendance_percentage": round(stats.attendance_percentage, 1),
                }
            )

        pct = self._calculator.attendance_percentage(
            present=overall.counts.present, absent=overall.counts.absent, late=overall.counts.late
        )
        return {
            "student_id": int(student_id),
            **overall.counts.to_dict(),
            "attendance_percentage": round(pct, 1),
            "courses": courses,
        }

    def rows_for_export(self, course_id: int) -> list[dict]:
        roster = {e.student_id: e.display_name() for e in self._enrollments.list_for_course(int(course_id))}
        out: list[dict] = []
        for r in self._attendance.find_by_course(int(course_id)):
            out.append(
                {
                    "date": r.attendance_date.strftime("%Y-%m-%d"),
                    "student_id": r.student_id,
                    "student": roster.get(r.student_id) or f"Estudiante {r.student_id}",
                    "status": r.status.value,
                    "arrival_time": r.arrival_time.strftime("%H:%M") if r.arrival_time else "-",
                    "comment": r.comment or "",
                }
            )
        return out
