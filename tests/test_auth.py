import pytest

from eduflow.core.tokens import decode_access
from eduflow.services.certificates import issue_certificate
from conftest import TEST_PASSWORD

AUTH = "/api/v1/auth"


@pytest.fixture
def register_payload():
    return {"name": "Karim Nassar", "email": "Karim.Nassar@EduFlow.io", "password": "s3cretpass"}


def test_register_user(client, register_payload):
    resp = client.post(f"{AUTH}/register", json=register_payload)

    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    assert data["user"]["email"] == "karim.nassar@eduflow.io"
    assert data["user"]["role"] == "student"
    assert data["expiresIn"] == "7d"
    assert decode_access(data["token"])["sub"] == str(data["user"]["id"])


def test_register_duplicate_email(client, register_payload):
    client.post(f"{AUTH}/register", json=register_payload)
    resp = client.post(f"{AUTH}/register", json=register_payload)

    assert resp.status_code == 409
    assert resp.json()["code"] == "EMAIL_TAKEN"


def test_register_short_password(client, register_payload):
    register_payload["password"] = "123"
    assert client.post(f"{AUTH}/register", json=register_payload).status_code == 422


def test_login_success(client, student):
    resp = client.post(f"{AUTH}/login", json={"email": student.email, "password": TEST_PASSWORD})

    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Login successful"
    assert data["expiresIn"] == "1d"
    assert data["user"]["id"] == student.id


def test_login_remember_me(client, student):
    resp = client.post(
        f"{AUTH}/login",
        json={"email": student.email, "password": TEST_PASSWORD, "rememberMe": True},
    )
    assert resp.json()["expiresIn"] == "30d"


def test_login_invalid_credentials(client, student):
    wrong = client.post(f"{AUTH}/login", json={"email": student.email, "password": "wrongpassword"})
    unknown = client.post(f"{AUTH}/login", json={"email": "ghost@eduflow.io", "password": TEST_PASSWORD})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["message"] == unknown.json()["message"]


def test_me_includes_enrollments_and_certificates(client, db_session, student, student_headers,
                                                   make_course, enroll):
    done, ongoing = make_course(), make_course()
    enroll(student, done, progress=100)
    enroll(student, ongoing, progress=30)
    cert, _ = issue_certificate(db_session, user_id=student.id, course_id=done.id)

    resp = client.get(f"{AUTH}/me", headers=student_headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == student.email
    assert {e["courseId"] for e in data["enrolledCourses"]} == {done.id, ongoing.id}
    assert [c["certificateNumber"] for c in data["certificates"]] == [cert.certificate_number]


def test_unauthorized_access(client):
    assert client.get(f"{AUTH}/me").status_code == 401
    malformed = client.get(f"{AUTH}/me", headers={"Authorization": "Token abc"})
    assert malformed.status_code == 401
    assert malformed.json()["code"] == "UNAUTHORIZED"
