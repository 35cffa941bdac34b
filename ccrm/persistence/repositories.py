"""
In-memory registries for students and courses.
"""

import threading
from typing import Dict, Generic, List, Optional, TypeVar

import structlog

from ..core.entities import Course, Student
from ..core.exceptions import DuplicateEntityError, ValidationError
from ..core.interfaces import Repository

logger = structlog.get_logger(__name__)

T = TypeVar('T')


class InMemoryRepository(Repository[T], Generic[T]):
    """Keyed, thread-safe store shared by the concrete registries.

    ``_put`` overwrites an existing key (last write wins);
    ``_put_if_absent`` refuses it.
    """

    def __init__(self, entity_type: str):
        self._entity_type = entity_type
        self._entities: Dict[str, T] = {}
        self._lock = threading.RLock()

    def _put(self, key: str, entity: T) -> T:
        with self._lock:
            replaced = key in self._entities
            self._entities[key] = entity
        if replaced:
            logger.warning("entity_overwritten", entity_type=self._entity_type, key=key)
        else:
            logger.debug("entity_added", entity_type=self._entity_type, key=key)
        return entity

    def _put_if_absent(self, key: str, entity: T) -> T:
        with self._lock:
            if key in self._entities:
                raise DuplicateEntityError(
                    f"{self._entity_type} {key} already exists",
                    error_code="ENTITY_ALREADY_EXISTS",
                    details={'entity_type': self._entity_type, 'key': key}
                )
            self._entities[key] = entity
        logger.debug("entity_added", entity_type=self._entity_type, key=key)
        return entity

    def find(self, key: str) -> Optional[T]:
        with self._lock:
            return self._entities.get(key)

    def list_all(self) -> List[T]:
        with self._lock:
            return list(self._entities.values())

    def count(self) -> int:
        with self._lock:
            return len(self._entities)

    def clear(self) -> None:
        with self._lock:
            self._entities.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entities

    def __len__(self) -> int:
        return self.count()


class InMemoryStudentRepository(InMemoryRepository[Student]):
    """Students keyed by registration number."""

    def __init__(self):
        super().__init__("student")

    @staticmethod
    def _new_student(registration_number: str, full_name: str, email: str) -> Student:
        if not registration_number or not registration_number.strip():
            raise ValidationError("Registration number is required")
        return Student(registration_number, full_name, email)

    def add(self, registration_number: str, full_name: str, email: str) -> Student:
        """Create a student, replacing any previous one with the same registration number."""
        return self._put(registration_number, self._new_student(registration_number, full_name, email))

    def add_if_absent(self, registration_number: str, full_name: str, email: str) -> Student:
        """Create a student; raises DuplicateEntityError if the registration number is taken."""
        return self._put_if_absent(registration_number, self._new_student(registration_number, full_name, email))

    def find_by_registration_number(self, registration_number: str) -> Optional[Student]:
        return self.find(registration_number)

    def find_by_id(self, student_id: str) -> Optional[Student]:
        """Find a student by internal id."""
        for student in self.list_all():
            if student.id == student_id:
                return student
        return None

    def list_active(self) -> List[Student]:
        return [s for s in self.list_all() if s.is_active]


class InMemoryCourseRepository(InMemoryRepository[Course]):
    """Courses keyed by course code."""

    def __init__(self):
        super().__init__("course")

    def add(self, course: Course) -> Course:
        """Store a course, replacing any previous one with the same code."""
        return self._put(course.code, course)

    def add_if_absent(self, course: Course) -> Course:
        """Store a course; raises DuplicateEntityError if the code is taken."""
        return self._put_if_absent(course.code, course)

    def find_by_code(self, code: str) -> Optional[Course]:
        return self.find(code)

    def list_by_department(self, department: str) -> List[Course]:
        return [c for c in self.list_all() if c.department == department]
