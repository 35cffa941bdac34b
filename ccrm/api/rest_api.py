"""
REST API implementation for the CCRM platform using FastAPI.
"""

from datetime import date, datetime, timezone
from typing import Optional, Dict, List

import structlog
from pydantic import BaseModel, Field

from fastapi import FastAPI, HTTPException, Response, status

from ..core.entities import Course, Enrollment, Student, round_gpa
from ..core.enums import Semester
from ..core.exceptions import (
    BackupError, CreditLimitExceededError, DuplicateEnrollmentError, ValidationError
)
from ..persistence import BackupService, InMemoryCourseRepository, InMemoryStudentRepository
from ..services import EnrollmentService

logger = structlog.get_logger(__name__)


# Pydantic models for API
class StudentCreate(BaseModel):
    registration_number: str = Field(..., min_length=1, max_length=40)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r'^[^@]+@[^@]+\.[^@]+$')


class EnrollmentResponse(BaseModel):
    registration_number: str
    course_code: str
    marks: Optional[float] = None
    grade: Optional[str] = None
    points: Optional[int] = None
    enrolled_at: datetime


class StudentResponse(BaseModel):
    id: str
    registration_number: str
    full_name: str
    email: str
    status: str
    created_on: date
    enrollments: List[EnrollmentResponse] = []
    gpa: float


class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    title: str = Field(default="", max_length=200)
    credits: int = Field(default=3, ge=1)
    semester: Semester = Semester.FALL
    department: str = Field(default="", max_length=100)


class CourseResponse(BaseModel):
    code: str
    title: str
    credits: int
    semester: str
    department: str


class EnrollmentRequest(BaseModel):
    registration_number: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)


class MarksRequest(EnrollmentRequest):
    marks: float


class TranscriptResponse(BaseModel):
    registration_number: str
    gpa: float
    transcript: str


class BackupRequest(BaseModel):
    source: str = Field(..., min_length=1)


class BackupResponse(BaseModel):
    source: str
    destination: str


class CCRMRestAPI:
    """REST API implementation for the CCRM platform."""

    def __init__(self, students: InMemoryStudentRepository, courses: InMemoryCourseRepository,
                 enrollment_service: EnrollmentService, backup_service: BackupService):
        self._students = students
        self._courses = courses
        self._enrollment_service = enrollment_service
        self._backup_service = backup_service

        self.app = FastAPI(
            title="CCRM API",
            description="Campus Course & Records Manager",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self._setup_routes()

    def _require_student(self, registration_number: str) -> Student:
        student = self._students.find_by_registration_number(registration_number)
        if student is None:
            raise HTTPException(status_code=404, detail="Student not found")
        return student

    def _require_course(self, code: str) -> Course:
        course = self._courses.find_by_code(code)
        if course is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return course

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "CCRM API",
                "version": "1.0.0",
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Create (or replace) a student."""
            try:
                student = self._students.add(
                    student_data.registration_number,
                    student_data.full_name,
                    student_data.email
                )
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=e.message)
            return self._student_to_response(student)

        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(skip: int = 0, limit: int = 100):
            """List all students."""
            students = self._students.list_all()[skip:skip + limit]
            return [self._student_to_response(student) for student in students]

        @self.app.get("/students/{registration_number}", response_model=StudentResponse)
        async def get_student(registration_number: str):
            """Get a student by registration number."""
            return self._student_to_response(self._require_student(registration_number))

        @self.app.post("/students/{registration_number}/deactivate", response_model=StudentResponse)
        async def deactivate_student(registration_number: str):
            """Mark a student inactive."""
            student = self._require_student(registration_number)
            student.deactivate()
            return self._student_to_response(student)

        @self.app.get("/students/{registration_number}/transcript", response_model=TranscriptResponse)
        async def get_transcript(registration_number: str):
            """Get a student's transcript."""
            student = self._require_student(registration_number)
            return TranscriptResponse(
                registration_number=student.registration_number,
                gpa=float(round_gpa(student.gpa())),
                transcript=student.transcript()
            )

        @self.app.delete("/students/{registration_number}/enrollments/{course_code}",
                         status_code=status.HTTP_204_NO_CONTENT)
        async def drop_enrollment(registration_number: str, course_code: str):
            """Drop a student's enrollment in a course."""
            student = self._require_student(registration_number)
            if not self._enrollment_service.drop(student, course_code):
                raise HTTPException(status_code=404, detail="Enrollment not found")
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Create (or replace) a course."""
            try:
                course = Course(
                    code=course_data.code,
                    title=course_data.title,
                    credits=course_data.credits,
                    semester=course_data.semester,
                    department=course_data.department
                )
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=e.message)
            return self._course_to_response(self._courses.add(course))

        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(department: Optional[str] = None):
            """List all courses, optionally for one department."""
            if department is not None:
                courses = self._courses.list_by_department(department)
            else:
                courses = self._courses.list_all()
            return [self._course_to_response(course) for course in courses]

        @self.app.get("/courses/{code}", response_model=CourseResponse)
        async def get_course(code: str):
            """Get a course by code."""
            return self._course_to_response(self._require_course(code))

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
        async def enroll_student(enrollment_data: EnrollmentRequest):
            """Enroll a student in a course."""
            student = self._require_student(enrollment_data.registration_number)
            course = self._require_course(enrollment_data.course_code)
            try:
                enrollment = self._enrollment_service.enroll(student, course)
            except DuplicateEnrollmentError as e:
                raise HTTPException(status_code=409, detail=e.message)
            except CreditLimitExceededError as e:
                raise HTTPException(status_code=422, detail=e.message)
            return self._enrollment_to_response(enrollment)

        @self.app.put("/enrollments/marks", response_model=EnrollmentResponse)
        async def record_marks(marks_data: MarksRequest):
            """Record marks for an existing enrollment."""
            student = self._require_student(marks_data.registration_number)
            course = self._require_course(marks_data.course_code)
            enrollment = self._enrollment_service.record_marks(student, course, marks_data.marks)
            if enrollment is None:
                raise HTTPException(status_code=404, detail="Enrollment not found")
            return self._enrollment_to_response(enrollment)

        @self.app.get("/statistics", response_model=Dict[str, int])
        async def get_statistics():
            """Get enrollment statistics."""
            statistics = self._enrollment_service.get_statistics()
            statistics['students'] = self._students.count()
            statistics['courses'] = self._courses.count()
            return statistics

        # Backup endpoints
        @self.app.post("/backups", response_model=BackupResponse, status_code=status.HTTP_201_CREATED)
        def create_backup(backup_data: BackupRequest):
            """Snapshot a directory into a new backup folder."""
            try:
                destination = self._backup_service.backup_directory(backup_data.source)
            except BackupError as e:
                if e.error_code == "BACKUP_SOURCE_INVALID":
                    raise HTTPException(status_code=400, detail=e.message)
                logger.error("backup_request_failed", source=backup_data.source, error=e.message)
                raise HTTPException(status_code=500, detail=e.message)
            return BackupResponse(source=backup_data.source, destination=str(destination))

    def _enrollment_to_response(self, enrollment: Enrollment) -> EnrollmentResponse:
        """Convert Enrollment entity to response model."""
        return EnrollmentResponse(**enrollment.to_dict())

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(**student.to_dict())

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(**course.to_dict())
