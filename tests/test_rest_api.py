"""
REST API tests driven through an in-process ASGI transport.
"""

import inspect
from unittest import mock

import httpx
import pytest
from httpx import ASGITransport

from ccrm.api import CCRMRestAPI


pytestmark = pytest.mark.anyio


@pytest.fixture
def api(students, courses, service, backup_service):
    return CCRMRestAPI(students, courses, service, backup_service)


@pytest.fixture
async def client(api):
    async with httpx.AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test") as c:
        yield c


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


async def test_create_and_fetch_student(client):
    r = await client.post("/students", json={
        "registration_number": "R100", "full_name": "Carol Davis", "email": "carol@x.edu"
    })
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "active"
    assert body["gpa"] == 0.0

    r = await client.get("/students/R100")
    assert r.status_code == 200
    assert r.json()["id"] == body["id"]

    r = await client.get("/students/NOPE")
    assert r.status_code == 404


async def test_invalid_student_email_is_rejected(client):
    r = await client.post("/students", json={
        "registration_number": "R100", "full_name": "Carol", "email": "not-an-email"
    })
    assert r.status_code == 422


async def test_create_course_with_defaults(client):
    r = await client.post("/courses", json={"code": "HI101", "title": "History"})
    assert r.status_code == 201
    assert r.json() == {"code": "HI101", "title": "History", "credits": 3,
                        "semester": "fall", "department": ""}

    r = await client.get("/courses", params={"department": "Mathematics"})
    assert [c["code"] for c in r.json()] == ["MA101"]


async def test_enrollment_flow(client, alice):
    r = await client.post("/enrollments", json={"registration_number": "R001", "course_code": "CS101"})
    assert r.status_code == 201
    assert r.json()["grade"] is None

    r = await client.post("/enrollments", json={"registration_number": "R001", "course_code": "CS101"})
    assert r.status_code == 409

    r = await client.post("/enrollments", json={"registration_number": "R001", "course_code": "CS201"})
    assert r.status_code == 201
    r = await client.post("/enrollments", json={"registration_number": "R001", "course_code": "MA101"})
    assert r.status_code == 422

    r = await client.put("/enrollments/marks", json={
        "registration_number": "R001", "course_code": "CS101", "marks": 88
    })
    assert r.status_code == 200
    assert r.json()["grade"] == "A"
    assert r.json()["points"] == 9

    r = await client.put("/enrollments/marks", json={
        "registration_number": "R001", "course_code": "MA101", "marks": 88
    })
    assert r.status_code == 404

    r = await client.get("/students/R001/transcript")
    assert r.status_code == 200
    assert r.json()["gpa"] == 9.0
    assert "CS101 Intro to Programming -> A" in r.json()["transcript"]
    assert "CS201 Data Structures -> N/A" in r.json()["transcript"]


async def test_enroll_unknown_course(client, alice):
    r = await client.post("/enrollments", json={"registration_number": "R001", "course_code": "ZZ000"})
    assert r.status_code == 404


async def test_drop_and_deactivate(client, alice, service, courses):
    service.enroll(alice, courses.find_by_code("CS101"))

    r = await client.delete("/students/R001/enrollments/CS101")
    assert r.status_code == 204
    r = await client.delete("/students/R001/enrollments/CS101")
    assert r.status_code == 404

    r = await client.post("/students/R001/deactivate")
    assert r.json()["status"] == "inactive"


async def test_backup_endpoint(client, tmp_path):
    src = tmp_path / "to-backup"
    src.mkdir()
    (src / "a.txt").write_text("a")

    r = await client.post("/backups", json={"source": str(src)})
    assert r.status_code == 201
    destination = r.json()["destination"]
    assert (tmp_path / "ccrm_data").as_posix() in destination

    r = await client.post("/backups", json={"source": str(tmp_path / "missing")})
    assert r.status_code == 400


async def test_backup_endpoint_reports_io_failure_as_server_error(client, tmp_path):
    src = tmp_path / "to-backup"
    src.mkdir()
    (src / "a.txt").write_text("a")

    with mock.patch("ccrm.persistence.backup.shutil.copyfile", side_effect=PermissionError("denied")):
        r = await client.post("/backups", json={"source": str(src)})
    assert r.status_code == 500
    assert "denied" in r.json()["detail"]


async def test_backup_endpoint_runs_off_the_event_loop(api):
    # Blocking file copies must go through the threadpool.
    route = next(r for r in api.app.routes if getattr(r, "path", None) == "/backups")
    assert not inspect.iscoroutinefunction(route.endpoint)


async def test_statistics(client, alice):
    await client.post("/enrollments", json={"registration_number": "R001", "course_code": "CS101"})
    r = await client.get("/statistics")
    assert r.status_code == 200
    assert r.json()["enrolled"] == 1
    assert r.json()["students"] == 1
    assert r.json()["courses"] == 3
