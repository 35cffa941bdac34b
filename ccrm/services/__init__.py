"""
Services module containing the enrollment workflow and its locking support.
"""

from .enrollment_service import EnrollmentService
from .concurrency_manager import ConcurrencyManager, ConcurrencyError

__all__ = [
    "EnrollmentService",
    "ConcurrencyManager",
    "ConcurrencyError",
]
