"""
Persistence module: in-memory registries, JSON export and directory backups.
"""

from .repositories import InMemoryRepository, InMemoryStudentRepository, InMemoryCourseRepository
from .exporter import RegistryExporter
from .backup import BackupService

__all__ = [
    "InMemoryRepository",
    "InMemoryStudentRepository",
    "InMemoryCourseRepository",
    "RegistryExporter",
    "BackupService",
]
