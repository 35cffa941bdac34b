"""
Enumerations and constants for the CCRM platform.
"""

from enum import Enum


class EntityStatus(Enum):
    """Lifecycle status of a student record."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Semester(Enum):
    """Academic terms a course can be offered in."""
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
