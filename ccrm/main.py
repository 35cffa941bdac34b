"""
Main entry point for the CCRM platform.
"""

import argparse
from typing import Callable, List, Optional

import structlog

from .api import CCRMRestAPI
from .config import Settings, get_settings
from .core.entities import Course, Student
from .core.exceptions import CCRMException, EnrollmentError
from .persistence import (
    BackupService, InMemoryCourseRepository, InMemoryStudentRepository, RegistryExporter
)
from .services import ConcurrencyManager, EnrollmentService

logger = structlog.get_logger(__name__)


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{text}'")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


class CCRMApp:
    """Wires settings, registries and services, and runs the interactive menu."""

    def __init__(self, settings: Optional[Settings] = None,
                 input_fn: Callable[[str], str] = input,
                 output_fn: Callable[[str], None] = print):
        self._settings = settings or get_settings()
        self._input = input_fn
        self._output = output_fn

        self.students = InMemoryStudentRepository()
        self.courses = InMemoryCourseRepository()
        self.concurrency_manager = ConcurrencyManager()
        self.enrollment_service = EnrollmentService(
            max_credits=self._settings.max_credits,
            concurrency_manager=self.concurrency_manager
        )
        self.backup_service = BackupService(self._settings)
        self.exporter = RegistryExporter(self.students, self.courses, self._settings)
        self._rest_api: Optional[CCRMRestAPI] = None

        logger.info("ccrm_initialized", data_folder=str(self._settings.data_folder),
                    max_credits=self._settings.max_credits)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def rest_api(self) -> CCRMRestAPI:
        if self._rest_api is None:
            self._rest_api = CCRMRestAPI(self.students, self.courses,
                                         self.enrollment_service, self.backup_service)
        return self._rest_api

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _confirm(self, prompt: str) -> bool:
        return self._ask(prompt).lower() == "y"

    def run_menu(self) -> None:
        """Line-by-line menu loop; returns when the user picks 0 or input ends."""
        self._output(f"CCRM started. Data folder: {self._settings.data_folder}")
        while True:
            self._output("\n1) Students 2) Courses 3) Enrollment 4) Backup 0) Exit")
            try:
                choice = self._ask("> ")
            except EOFError:
                return
            if choice == "0":
                return
            action = {
                "1": self.manage_students,
                "2": self.manage_courses,
                "3": self.manage_enrollment,
                "4": self.run_backup,
            }.get(choice)
            if action is None:
                self._output("Invalid")
                continue
            try:
                action()
            except EOFError:
                # Input ended inside a sub-prompt.
                return

    def manage_students(self) -> None:
        for student in self.students.list_all():
            self._output(student.profile())
        if self._confirm("Add student? (y/n):"):
            registration_number = self._ask("RegNo:")
            name = self._ask("Name:")
            email = self._ask("Email:")
            try:
                self.students.add(registration_number, name, email)
            except CCRMException as e:
                self._output(e.message)

    def manage_courses(self) -> None:
        for course in self.courses.list_all():
            self._output(str(course))
        if self._confirm("Add course? (y/n):"):
            code = self._ask("Code:")
            title = self._ask("Title:")
            credits_text = self._ask("Credits:")
            try:
                credits = int(credits_text)
            except ValueError:
                self._output(f"Invalid credits: {credits_text}")
                return
            try:
                self.courses.add(Course(code=code, title=title, credits=credits))
            except CCRMException as e:
                self._output(e.message)

    def manage_enrollment(self) -> None:
        student = self.students.find_by_registration_number(self._ask("Student regNo:"))
        if student is None:
            self._output("Not found")
            return
        course = self.courses.find_by_code(self._ask("Course code:"))
        if course is None:
            self._output("Not found")
            return

        try:
            self.enrollment_service.enroll(student, course)
            self._output("Enrolled.")
        except EnrollmentError as e:
            self._output(e.message)

        if self._confirm("Marks? (y/n):"):
            marks_text = self._ask("Enter marks:")
            try:
                marks = float(marks_text)
            except ValueError:
                self._output(f"Invalid marks: {marks_text}")
            else:
                self.enrollment_service.record_marks(student, course, marks)
        self._output(student.transcript())

    def run_backup(self) -> None:
        """Export the registries and snapshot the export directory."""
        try:
            source = self.exporter.export()
            destination = self.backup_service.backup_directory(source)
        except CCRMException as e:
            self._output(f"Backup failed: {e.message}")
            return
        self._output(f"Backup written to {destination}")

    def create_sample_data(self) -> List[Student]:
        """Seed a few courses and students for demonstration."""
        for course in (
            Course(code="CS101", title="Introduction to Programming", credits=4, department="Computer Science"),
            Course(code="MA201", title="Linear Algebra", credits=3, department="Mathematics"),
            Course(code="PH110", title="Physics I", credits=4, department="Physics"),
        ):
            self.courses.add(course)
        return [
            self.students.add("2024CS001", "Alice Johnson", "alice@university.edu"),
            self.students.add("2024CS002", "Bob Smith", "bob@university.edu"),
        ]

    def run_demo(self) -> None:
        """Enroll the sample students, grade them and print transcripts."""
        alice, bob = self.create_sample_data()
        marks = {"CS101": 92.5, "MA201": 78.0, "PH110": 55.0}
        for student in (alice, bob):
            for course in self.courses.list_all():
                self.enrollment_service.enroll(student, course)
        for code, value in marks.items():
            self.enrollment_service.record_marks(alice, self.courses.find_by_code(code), value)
        self.enrollment_service.record_marks(bob, self.courses.find_by_code("CS101"), 64.0)

        for student in (alice, bob):
            self._output(student.transcript())
            self._output("")
        self._output(f"Enrollment statistics: {self.enrollment_service.get_statistics()}")

    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Serve the REST API until interrupted."""
        import uvicorn

        host = host or self._settings.rest_host
        port = port or self._settings.rest_port
        logger.info("rest_server_starting", host=host, port=port)
        uvicorn.run(self.rest_api.app, host=host, port=port, log_level="info")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Campus Course & Records Manager")
    parser.add_argument("--serve", action="store_true", help="Serve the REST API")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--max-credits", type=positive_int, help="Override the per-student credit ceiling")

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.max_credits is not None:
        settings = settings.model_copy(update={'max_credits': args.max_credits})

    app = CCRMApp(settings)
    try:
        if args.demo:
            app.run_demo()
        elif args.serve:
            app.start_rest_server(args.host, args.port)
        else:
            app.run_menu()
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
