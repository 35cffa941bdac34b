import pytest

from ccrm.core.entities import Course
from ccrm.core.exceptions import DuplicateEntityError, ValidationError
from ccrm.persistence import InMemoryCourseRepository, InMemoryStudentRepository


def test_add_and_find_student(students):
    student = students.add("R001", "Alice", "alice@x.edu")
    assert students.find_by_registration_number("R001") is student
    assert students.find_by_id(student.id) is student
    assert students.find_by_registration_number("missing") is None
    assert students.find_by_id("missing") is None


def test_reused_registration_number_overwrites(students):
    first = students.add("R001", "Alice", "alice@x.edu")
    second = students.add("R001", "Alicia", "alicia@x.edu")
    assert first.id != second.id
    assert students.find_by_registration_number("R001") is second
    assert students.count() == 1


def test_add_if_absent_refuses_reused_registration_number(students):
    original = students.add_if_absent("R001", "Alice", "alice@x.edu")
    with pytest.raises(DuplicateEntityError):
        students.add_if_absent("R001", "Alicia", "alicia@x.edu")
    assert students.find_by_registration_number("R001") is original


def test_blank_registration_number_is_rejected(students):
    with pytest.raises(ValidationError):
        students.add("  ", "Nobody", "n@x.edu")


def test_list_all_is_a_snapshot_sharing_entities(students):
    student = students.add("R001", "Alice", "alice@x.edu")
    listed = students.list_all()
    students.add("R002", "Bob", "bob@x.edu")
    assert listed == [student]
    student.deactivate()
    assert students.list_all()[0].is_active is False
    assert students.list_active() == [students.find_by_registration_number("R002")]


def test_course_registry_upsert_and_lookup():
    courses = InMemoryCourseRepository()
    courses.add(Course(code="CS101", title="Old"))
    replacement = courses.add(Course(code="CS101", title="New"))
    assert courses.find_by_code("CS101") is replacement
    assert "CS101" in courses
    assert len(courses) == 1
    assert courses.find_by_code("XX999") is None


def test_course_registry_add_if_absent_and_department_filter(courses):
    with pytest.raises(DuplicateEntityError):
        courses.add_if_absent(Course(code="CS101"))
    courses.add_if_absent(Course(code="MA201", department="Mathematics"))
    assert {c.code for c in courses.list_by_department("Mathematics")} == {"MA101", "MA201"}


def test_clear(students):
    students.add("R001", "Alice", "alice@x.edu")
    students.clear()
    assert students.list_all() == []
