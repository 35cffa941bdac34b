"""
Enrollment service enforcing the duplicate and credit-ceiling rules.
"""

import threading
from typing import Any, Dict, Optional

import structlog

from ..core.entities import Course, Enrollment, Student
from ..core.exceptions import CreditLimitExceededError, DuplicateEnrollmentError, ValidationError
from ..core.grading import DEFAULT_GRADE_SCALE, GradeScale
from .concurrency_manager import ConcurrencyManager

logger = structlog.get_logger(__name__)


class EnrollmentService:
    """Creates enrollments and records marks for students.

    Each mutation of a student's enrollments runs under that student's lock
    from the concurrency manager, so the duplicate check, the credit sum and
    the insertion happen as one step even with concurrent callers.
    """

    def __init__(self, max_credits: int = 18, concurrency_manager: Optional[ConcurrencyManager] = None,
                 grade_scale: GradeScale = DEFAULT_GRADE_SCALE):
        if max_credits <= 0:
            raise ValidationError("max_credits must be positive")
        self._max_credits = max_credits
        self._concurrency_manager = concurrency_manager or ConcurrencyManager()
        self._grade_scale = grade_scale
        self._stats = {'enrolled': 0, 'duplicates_rejected': 0, 'credit_limit_rejected': 0,
                       'marks_recorded': 0, 'marks_ignored': 0, 'dropped': 0}
        self._stats_lock = threading.Lock()

    @property
    def max_credits(self) -> int:
        return self._max_credits

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._stats[key] += 1

    def _student_resource(self, student: Student) -> str:
        return f"student_{student.id}"

    def enroll(self, student: Student, course: Course) -> Enrollment:
        """Enroll a student in a course.

        Raises DuplicateEnrollmentError if the student already holds the
        course, and CreditLimitExceededError if the course would take the
        student past the credit ceiling.
        """
        with self._concurrency_manager.lock(self._student_resource(student)):
            if student.is_enrolled(course.code):
                self._count('duplicates_rejected')
                logger.info("enrollment_rejected", reason="duplicate",
                            registration_number=student.registration_number, course_code=course.code)
                raise DuplicateEnrollmentError(student.registration_number, course.code)

            current_credits = student.total_credits()
            if current_credits + course.credits > self._max_credits:
                self._count('credit_limit_rejected')
                logger.info("enrollment_rejected", reason="credit_limit",
                            registration_number=student.registration_number, course_code=course.code,
                            current_credits=current_credits, requested_credits=course.credits)
                raise CreditLimitExceededError(student.registration_number, course.code,
                                               current_credits, course.credits, self._max_credits)

            enrollment = Enrollment(student, course, self._grade_scale)
            student.enroll(enrollment)

        self._count('enrolled')
        logger.info("student_enrolled", registration_number=student.registration_number,
                    course_code=course.code, total_credits=current_credits + course.credits)
        return enrollment

    def record_marks(self, student: Student, course: Course, marks: float) -> Optional[Enrollment]:
        """Grade the student's enrollment in a course.

        Does nothing and returns None when the student is not enrolled;
        recording marks never creates an enrollment.
        """
        with self._concurrency_manager.lock(self._student_resource(student)):
            enrollment = student.get_enrollment(course.code)
            if enrollment is None:
                self._count('marks_ignored')
                logger.debug("marks_ignored_not_enrolled",
                             registration_number=student.registration_number, course_code=course.code)
                return None
            grade = enrollment.record_marks(marks)

        self._count('marks_recorded')
        logger.info("marks_recorded", registration_number=student.registration_number,
                    course_code=course.code, marks=marks, grade=grade.letter)
        return enrollment

    def drop(self, student: Student, course_code: str) -> bool:
        """Remove a student's enrollment. Returns False if there was none."""
        with self._concurrency_manager.lock(self._student_resource(student)):
            removed = student.unenroll(course_code)
        if removed is None:
            return False
        self._count('dropped')
        logger.info("enrollment_dropped", registration_number=student.registration_number, course_code=course_code)
        return True

    def get_statistics(self) -> Dict[str, Any]:
        """Get enrollment statistics."""
        with self._stats_lock:
            stats: Dict[str, Any] = dict(self._stats)
        stats['max_credits'] = self._max_credits
        return stats
