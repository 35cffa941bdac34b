"""
JSON export of the student and course registries.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog

from ..config import Settings, get_settings
from ..core.exceptions import PersistenceError
from .repositories import InMemoryCourseRepository, InMemoryStudentRepository

logger = structlog.get_logger(__name__)


class RegistryExporter:
    """Writes ``students.json`` and ``courses.json`` for the registries."""

    STUDENTS_FILE = "students.json"
    COURSES_FILE = "courses.json"

    def __init__(self, students: InMemoryStudentRepository, courses: InMemoryCourseRepository,
                 settings: Optional[Settings] = None):
        self._students = students
        self._courses = courses
        self._settings = settings or get_settings()

    def _write(self, path: Path, records: List[Dict[str, Any]]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)

    def export(self, directory: Optional[Union[str, Path]] = None) -> Path:
        """Export both registries; returns the directory written to."""
        target = Path(directory) if directory is not None else self._settings.export_folder
        students = [s.to_dict() for s in self._students.list_all()]
        courses = [c.to_dict() for c in self._courses.list_all()]
        try:
            target.mkdir(parents=True, exist_ok=True)
            self._write(target / self.STUDENTS_FILE, students)
            self._write(target / self.COURSES_FILE, courses)
        except OSError as e:
            raise PersistenceError(
                f"Failed to export registries to {target}: {e}",
                error_code="EXPORT_IO_ERROR",
                details={'directory': str(target)}
            ) from e

        logger.info("registries_exported", directory=str(target), students=len(students), courses=len(courses))
        return target
