import json

from ccrm.persistence import RegistryExporter


def test_export_writes_both_registries(settings, students, courses, service, alice):
    enrollment = service.enroll(alice, courses.find_by_code("CS101"))
    enrollment.record_marks(91)

    directory = RegistryExporter(students, courses, settings).export()

    assert directory == settings.export_folder
    exported_students = json.loads((directory / "students.json").read_text())
    exported_courses = json.loads((directory / "courses.json").read_text())
    assert [s['registration_number'] for s in exported_students] == ["R001"]
    assert exported_students[0]['enrollments'][0]['grade'] == "S"
    assert {c['code'] for c in exported_courses} == {"CS101", "CS201", "MA101"}


def test_export_then_backup(settings, students, courses, backup_service, tmp_path):
    students.add("R002", "Bob", "bob@x.edu")
    exported = RegistryExporter(students, courses, settings).export(tmp_path / "out")
    destination = backup_service.backup_directory(exported)
    assert json.loads((destination / "students.json").read_text())[0]['full_name'] == "Bob"
