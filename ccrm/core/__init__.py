"""
Core module containing the domain model: grade scale, entities and errors.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *
from .grading import *

__all__ = [
    # Entities
    "Student",
    "Course",
    "Enrollment",
    "round_gpa",
    
    # Grading
    "GradeBand",
    "GradeScale",
    "DEFAULT_GRADE_SCALE",
    "grade_for",
    
    # Interfaces
    "Repository",
    
    # Enums
    "EntityStatus",
    "Semester",
    
    # Exceptions
    "CCRMException",
    "ValidationError",
    "DuplicateEntityError",
    "EnrollmentError",
    "DuplicateEnrollmentError",
    "CreditLimitExceededError",
    "PersistenceError",
    "BackupError",
    "ConfigurationError",
]
