"""
Core entities for the CCRM platform: students, courses and enrollments.
"""

import threading
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from .enums import EntityStatus, Semester
from .exceptions import ValidationError
from .grading import DEFAULT_GRADE_SCALE, GradeBand, GradeScale


def round_gpa(gpa: float) -> Decimal:
    """Round a GPA to two places, halves away from zero (8.125 -> 8.13)."""
    return Decimal(str(gpa)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Course:
    """Immutable course value object.

    Only the code is required; the remaining fields fall back to the
    registrar defaults (3 credits, fall semester, no department).
    """
    code: str
    title: str = ""
    credits: int = 3
    semester: Semester = Semester.FALL
    department: str = ""

    def __post_init__(self):
        if not self.code or not self.code.strip():
            raise ValidationError("Course code is required")
        if isinstance(self.credits, bool) or not isinstance(self.credits, int) or self.credits <= 0:
            raise ValidationError(f"Course credits must be a positive integer, got {self.credits!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        return {
            'code': self.code,
            'title': self.title,
            'credits': self.credits,
            'semester': self.semester.value,
            'department': self.department
        }

    def __str__(self) -> str:
        return f"{self.code} - {self.title} ({self.credits}cr)"


class Enrollment:
    """Binds one student to one course, with an optional recorded grade."""

    def __init__(self, student: 'Student', course: Course, grade_scale: GradeScale = DEFAULT_GRADE_SCALE):
        self._student = student
        self._course = course
        self._grade_scale = grade_scale
        self._marks: Optional[float] = None
        self._grade: Optional[GradeBand] = None
        self._enrolled_at = datetime.now(timezone.utc)

    @property
    def student(self) -> 'Student':
        return self._student

    @property
    def course(self) -> Course:
        return self._course

    @property
    def course_code(self) -> str:
        return self._course.code

    @property
    def marks(self) -> Optional[float]:
        return self._marks

    @property
    def grade(self) -> Optional[GradeBand]:
        return self._grade

    @property
    def enrolled_at(self) -> datetime:
        return self._enrolled_at

    @property
    def is_graded(self) -> bool:
        return self._grade is not None

    def record_marks(self, marks: float) -> GradeBand:
        """Replace any previous grade with the one derived from these marks."""
        self._marks = marks
        self._grade = self._grade_scale.grade_for(marks)
        return self._grade

    def to_dict(self) -> Dict[str, Any]:
        """Convert enrollment to dictionary."""
        return {
            'registration_number': self._student.registration_number,
            'course_code': self._course.code,
            'marks': self._marks,
            'grade': self._grade.letter if self._grade else None,
            'points': self._grade.points if self._grade else None,
            'enrolled_at': self._enrolled_at.isoformat()
        }

    def __repr__(self) -> str:
        grade = self._grade.letter if self._grade else "N/A"
        return f"Enrollment({self._student.registration_number} -> {self._course.code}, grade={grade})"


class Student:
    """Student record with its per-course enrollment mapping.

    The mapping is keyed by course code, so a student never holds two
    enrollments in the same course. Business rules (duplicates, credit
    ceiling) are enforced by the enrollment service, not here.
    """

    def __init__(self, registration_number: str, full_name: str, email: str,
                 student_id: Optional[str] = None):
        self._id = student_id or str(uuid.uuid4())
        self._registration_number = registration_number
        self._full_name = full_name
        self._email = email
        self._status = EntityStatus.ACTIVE
        self._created_on = date.today()
        self._enrollments: Dict[str, Enrollment] = {}
        self._lock = threading.RLock()

    @property
    def id(self) -> str:
        return self._id

    @property
    def registration_number(self) -> str:
        return self._registration_number

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def email(self) -> str:
        return self._email

    @property
    def status(self) -> EntityStatus:
        return self._status

    @property
    def created_on(self) -> date:
        return self._created_on

    @property
    def is_active(self) -> bool:
        return self._status == EntityStatus.ACTIVE

    @property
    def enrollments(self) -> List[Enrollment]:
        """Snapshot of the current enrollments."""
        with self._lock:
            return list(self._enrollments.values())

    def enroll(self, enrollment: Enrollment) -> None:
        """Attach an enrollment, replacing any existing one for the same course."""
        with self._lock:
            self._enrollments[enrollment.course_code] = enrollment

    def unenroll(self, course_code: str) -> Optional[Enrollment]:
        """Remove the enrollment for a course, if present."""
        with self._lock:
            return self._enrollments.pop(course_code, None)

    def get_enrollment(self, course_code: str) -> Optional[Enrollment]:
        with self._lock:
            return self._enrollments.get(course_code)

    def is_enrolled(self, course_code: str) -> bool:
        with self._lock:
            return course_code in self._enrollments

    def total_credits(self) -> int:
        """Sum of credit weights across all current enrollments."""
        return sum(e.course.credits for e in self.enrollments)

    def activate(self) -> None:
        self._status = EntityStatus.ACTIVE

    def deactivate(self) -> None:
        self._status = EntityStatus.INACTIVE

    @staticmethod
    def _compute_gpa(enrollments: List[Enrollment]) -> float:
        points = 0
        credits = 0
        for enrollment in enrollments:
            if enrollment.grade is None:
                continue
            points += enrollment.grade.points * enrollment.course.credits
            credits += enrollment.course.credits
        return points / credits if credits else 0.0

    def gpa(self) -> float:
        """Credit-weighted grade point average over graded enrollments."""
        return self._compute_gpa(self.enrollments)

    def transcript(self) -> str:
        """Plain-text transcript: one line per enrollment and a GPA line."""
        enrollments = self.enrollments
        lines = [f"Transcript for {self._full_name}"]
        for enrollment in enrollments:
            grade = enrollment.grade.letter if enrollment.grade else "N/A"
            lines.append(f"{enrollment.course.code} {enrollment.course.title} -> {grade}")
        lines.append(f"GPA: {round_gpa(self._compute_gpa(enrollments))}")
        return "\n".join(lines)

    def profile(self) -> str:
        return f"Student: {self._full_name} ({self._registration_number}) - {self._status.name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        enrollments = self.enrollments
        return {
            'id': self._id,
            'registration_number': self._registration_number,
            'full_name': self._full_name,
            'email': self._email,
            'status': self._status.value,
            'created_on': self._created_on.isoformat(),
            'enrollments': [e.to_dict() for e in enrollments],
            'gpa': float(round_gpa(self._compute_gpa(enrollments)))
        }

    def __str__(self) -> str:
        return self.profile()

    def __repr__(self) -> str:
        return f"Student(id={self._id}, registration_number={self._registration_number}, status={self._status.value})"
