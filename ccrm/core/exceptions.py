"""
Custom exceptions for the CCRM platform.
"""

from typing import Optional, Any, Dict


class CCRMException(Exception):
    """Base exception for all CCRM-related errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(CCRMException):
    """Raised when data validation fails."""
    pass


class DuplicateEntityError(CCRMException):
    """Raised when attempting to create a duplicate entity."""
    pass


class EnrollmentError(CCRMException):
    """Raised when enrollment operations fail."""
    pass


class DuplicateEnrollmentError(EnrollmentError):
    """Raised when a student is already enrolled in the requested course."""
    
    def __init__(self, registration_number: str, course_code: str):
        super().__init__(
            f"Student {registration_number} is already enrolled in {course_code}",
            error_code="DUPLICATE_ENROLLMENT",
            details={'registration_number': registration_number, 'course_code': course_code}
        )


class CreditLimitExceededError(EnrollmentError):
    """Raised when an enrollment would push a student past the credit ceiling."""
    
    def __init__(self, registration_number: str, course_code: str,
                 current_credits: int, requested_credits: int, max_credits: int):
        super().__init__(
            f"Enrolling {registration_number} in {course_code} would total "
            f"{current_credits + requested_credits} credits (limit {max_credits})",
            error_code="CREDIT_LIMIT_EXCEEDED",
            details={
                'registration_number': registration_number,
                'course_code': course_code,
                'current_credits': current_credits,
                'requested_credits': requested_credits,
                'max_credits': max_credits
            }
        )


class PersistenceError(CCRMException):
    """Raised when persistence operations fail."""
    pass


class BackupError(PersistenceError):
    """Raised when a directory backup cannot be completed."""
    pass


class ConfigurationError(CCRMException):
    """Raised when configuration is invalid."""
    pass
