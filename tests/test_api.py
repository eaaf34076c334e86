from __future__ import annotations

from datetime import timedelta

import pytest
from werkzeug.http import parse_options_header

import qr_attendance.attendance.service as attendance_service
import qr_attendance.sessions.service as sessions_service
from qr_attendance.core.exceptions import StorageError


@pytest.fixture
def clock(monkeypatch, fixed_now):
    """Shared mutable clock for issuance and check-in."""
    state = {"now": fixed_now}
    monkeypatch.setattr(sessions_service, "now_local", lambda: state["now"])
    monkeypatch.setattr(attendance_service, "now_local", lambda: state["now"])
    return state


def _issue(client, course_id, minutes=None):
    body = {"courseId": course_id}
    if minutes is not None:
        body["durationMinutes"] = minutes
    resp = client.post("/sessions", json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_course_and_student_admin(client):
    resp = client.post("/courses", json={"name": "Physics", "instructor": "Dr. Ruiz"})
    assert resp.status_code == 201
    course_id = resp.get_json()["id"]

    assert client.get(f"/courses/{course_id}").get_json()["name"] == "Physics"
    assert client.get("/courses/999").status_code == 404
    assert client.post("/courses", json={"name": "No instructor"}).status_code == 400

    resp = client.post("/students", json={"name": "Ada", "studentId": "S1", "enrolledCourses": [course_id]})
    assert resp.status_code == 201
    student = resp.get_json()
    assert student["enrolledCourses"] == [course_id]
    assert student["email"] == "S1@student.local"

    dup = client.post("/students", json={"name": "Ada", "studentId": "S1"})
    assert dup.status_code == 400
    assert "already exists" in dup.get_json()["error"]

    assert client.post("/students", json={"name": "A", "studentId": "S9", "enrolledCourses": 3}).status_code == 400
    assert [s["studentId"] for s in client.get("/students").get_json()] == ["S1"]
    assert client.get(f"/students/{student['id']}").get_json()["name"] == "Ada"


def test_issue_session(client, course, clock, fixed_now):
    data = _issue(client, course.course_id, 10)

    assert data["course"]["id"] == course.course_id
    assert data["issuedAt"] == fixed_now.isoformat()
    assert data["expiresAt"] == (fixed_now + timedelta(minutes=10)).isoformat()
    assert data["tokenPayload"].count(".") == 2
    assert data["qrCode"] is None


@pytest.mark.parametrize(
    "body,status",
    [
        ({}, 400),
        ({"courseId": "abc"}, 400),
        ({"courseId": 999}, 404),
        ({"courseId": 1, "durationMinutes": 0}, 400),
        ({"courseId": 1, "durationMinutes": "soon"}, 400),
    ],
)
def test_issue_session_errors(client, course, body, status):
    resp = client.post("/sessions", json=body)

    assert resp.status_code == status
    assert "error" in resp.get_json()


def test_check_in_flow(client, course, clock, fixed_now):
    short = _issue(client, course.course_id, 1)["tokenPayload"]
    clock["now"] = fixed_now + timedelta(seconds=61)

    resp = client.post("/checkins", json={"tokenPayload": short, "studentName": "Ada", "studentId": "S1"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "QR code has expired"}

    payload = _issue(client, course.course_id, 5)["tokenPayload"]
    resp = client.post(
        "/checkins",
        json={"tokenPayload": payload, "studentName": "Ada", "studentId": "S1", "location": "Lab 2"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Attendance marked successfully"
    assert body["attendance"]["status"] == "present"
    assert body["attendance"]["location"] == "Lab 2"
    assert body["attendance"]["time"] == "09:01:01"

    again = client.post("/checkins", json={"tokenPayload": payload, "studentName": "Ada", "studentId": "S1"})
    assert again.status_code == 400
    assert again.get_json() == {"error": "Attendance already marked for this session"}

    rows = client.get("/attendance", query_string={"courseId": course.course_id, "date": "2026-03-02"}).get_json()
    assert [r["studentIdNumber"] for r in rows] == ["S1"]
    assert rows[0]["courseName"] == "Intro to Databases"


@pytest.mark.parametrize(
    "body,status",
    [
        ({}, 400),
        ({"tokenPayload": "garbage", "studentName": "Ada", "studentId": "S1"}, 400),
        ([1, 2], 400),
    ],
)
def test_check_in_bad_requests(client, body, status):
    assert client.post("/checkins", json=body).status_code == status


def test_check_in_missing_identity(client, course, clock):
    payload = _issue(client, course.course_id)["tokenPayload"]

    resp = client.post("/checkins", json={"tokenPayload": payload, "studentId": "S1"})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "studentName is required"}


def test_storage_failure_is_generic_500(client, course, clock, attendance_repo, monkeypatch):
    payload = _issue(client, course.course_id)["tokenPayload"]

    def fail(**kwargs):
        raise StorageError("Database operation failed: secret details")

    monkeypatch.setattr(attendance_repo, "create", fail)
    resp = client.post("/checkins", json={"tokenPayload": payload, "studentName": "Ada", "studentId": "S1"})

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_unexpected_error_is_500(client, courses_repo, monkeypatch):
    def boom():
        raise RuntimeError("boom")

    monkeypatch.setattr(courses_repo, "list_all", boom)

    resp = client.get("/courses")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_bad_date_filter(client):
    resp = client.get("/attendance", query_string={"date": "02/03/2026"})

    assert resp.status_code == 400
    assert "YYYY-MM-DD" in resp.get_json()["error"]


def test_reports_and_dashboard(client, course, clock):
    payload = _issue(client, course.course_id)["tokenPayload"]
    for number, name in (("S1", "Ada"), ("S2", "Grace")):
        client.post("/checkins", json={"tokenPayload": payload, "studentName": name, "studentId": number})

    by_course = client.get("/reports/courses").get_json()
    assert by_course[str(course.course_id)]["presentCount"] == 2
    assert by_course[str(course.course_id)]["attendancePercentage"] == 100

    by_student = client.get("/reports/students", query_string={"courseId": course.course_id}).get_json()
    assert {s["studentId"] for s in by_student} == {"S1", "S2"}

    report = client.get(f"/attendance/{course.course_id}/session-report", query_string={"date": "2026-03-02"}).get_json()
    assert report["statistics"]["totalStudents"] == 2

    dashboard = client.get("/dashboard").get_json()
    assert dashboard["totalCourses"] == 1
    assert dashboard["totalStudents"] == 2

    activity = client.get("/recent-activity").get_json()
    assert activity[0]["type"] == "attendance_marked"
    assert isinstance(activity[0]["timestamp"], str)

    assert client.get("/attendance/999/session-report").status_code == 404


def test_csv_export_removes_temp_file(client, course, clock, tmp_path):
    payload = _issue(client, course.course_id)["tokenPayload"]
    client.post("/checkins", json={"tokenPayload": payload, "studentName": "Ada", "studentId": "S1"})

    resp = client.get(f"/attendance/{course.course_id}/export", query_string={"date": "2026-03-02"})
    body = resp.data
    resp.close()

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert parse_options_header(resp.headers["Content-Disposition"]) == (
        "attachment",
        {"filename": "Intro_to_Databases_attendance_2026-03-02.csv"},
    )
    assert body.decode("utf-8-sig").splitlines()[1].startswith("Ada,S1,Intro to Databases,Dr. Okafor,2026-03-02,09:00:00")
    assert list(tmp_path.iterdir()) == []


def test_export_unknown_course(client, tmp_path):
    assert client.get("/attendance/404/export").status_code == 404
    assert list(tmp_path.iterdir()) == []


def test_qr_png_only_for_signed_tokens(client, course, clock):
    payload = _issue(client, course.course_id)["tokenPayload"]

    resp = client.get("/sessions/qr.png", query_string={"tokenPayload": payload})
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data.startswith(b"\x89PNG")

    assert client.get("/sessions/qr.png", query_string={"tokenPayload": "forged"}).status_code == 400


def test_csv_export_non_latin_course_name(client, container, clock):
    course = container.course_service.create(name="Математика 101", instructor="Д. Иванова")
    payload = _issue(client, course.course_id)["tokenPayload"]
    client.post("/checkins", json={"tokenPayload": payload, "studentName": "Ада", "studentId": "S1"})

    resp = client.get(f"/attendance/{course.course_id}/export", query_string={"date": "2026-03-02"})
    body = resp.data
    resp.close()

    assert resp.status_code == 200
    header = resp.headers["Content-Disposition"]
    header.encode("latin-1")
    assert header.startswith("attachment")
    assert "filename*=UTF-8''%D0%9C%D0%B0%D1%82%D0%B5%D0%BC%D0%B0%D1%82%D0%B8%D0%BA%D0%B0_101_attendance_2026-03-02.csv" in header
    assert "Математика 101" in body.decode("utf-8-sig")


def test_csv_export_without_date_is_named_all(client, course, tmp_path):
    resp = client.get(f"/attendance/{course.course_id}/export")
    resp.close()

    assert resp.status_code == 200
    assert "Intro_to_Databases_attendance_all.csv" in resp.headers["Content-Disposition"]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "field,value",
    [("studentName", "n" * 201), ("studentId", "9" * 65), ("location", "x" * 256)],
)
def test_check_in_over_long_fields_are_400(client, course, clock, students_repo, field, value):
    payload = _issue(client, course.course_id)["tokenPayload"]
    body = {"tokenPayload": payload, "studentName": "Ada", "studentId": "S1", field: value}

    resp = client.post("/checkins", json=body)

    assert resp.status_code == 400
    assert resp.get_json() == {"error": f"{field} must be at most {len(value) - 1} characters"}
    assert students_repo.count() == 0


def test_course_name_too_long_is_400(client):
    resp = client.post("/courses", json={"name": "c" * 201, "instructor": "Dr. Ruiz"})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "name must be at most 200 characters"}
