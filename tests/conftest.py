"""
Shared fixtures for the CCRM test suite.
"""

import pytest

from ccrm.config import Settings
from ccrm.core.entities import Course
from ccrm.persistence import BackupService, InMemoryCourseRepository, InMemoryStudentRepository
from ccrm.services import ConcurrencyManager, EnrollmentService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    return Settings(data_folder=tmp_path / "ccrm_data", max_credits=18)


@pytest.fixture
def students():
    return InMemoryStudentRepository()


@pytest.fixture
def courses():
    repo = InMemoryCourseRepository()
    repo.add(Course(code="CS101", title="Intro to Programming", credits=3))
    repo.add(Course(code="CS201", title="Data Structures", credits=12))
    repo.add(Course(code="MA101", title="Calculus", credits=6, department="Mathematics"))
    return repo


@pytest.fixture
def service():
    return EnrollmentService(max_credits=18, concurrency_manager=ConcurrencyManager())


@pytest.fixture
def backup_service(settings):
    return BackupService(settings)


@pytest.fixture
def alice(students):
    return students.add("R001", "Alice Johnson", "alice@university.edu")
