from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from intern_tracker.routes import students as students_routes
from intern_tracker.models import DailyReport, QuizEntry, User, VideoEntry, Workflow, WorkflowAssignment

NEW_STUDENT = {
    "name": "A",
    "email": "a@x.com",
    "department": "Backend",
    "supervisor": "S",
}


def test_create_student_defaults(client, admin_headers, db):
    response = client.post("/students", json=NEW_STUDENT, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "active"
    assert data["email"] == "a@x.com"
    assert data["startDate"] == datetime.utcnow().date().isoformat()
    assert data["temporaryPassword"]

    stored = db.query(User).filter(User.email == "a@x.com").one()
    assert stored.role == "student"
    assert stored.must_reset_password is True
    assert stored.password_hash != data["temporaryPassword"]


def test_temporary_password_logs_in_and_requires_reset(client, admin_headers):
    created = client.post("/students", json=NEW_STUDENT, headers=admin_headers).json()
    login = client.post(
        "/auth/login", json={"email": "a@x.com", "password": created["temporaryPassword"]}
    )
    assert login.status_code == 200
    assert login.json()["mustResetPassword"] is True


def test_duplicate_email_conflicts(client, admin_headers, admin):
    assert client.post("/students", json=NEW_STUDENT, headers=admin_headers).status_code == 201
    response = client.post("/students", json=NEW_STUDENT, headers=admin_headers)
    assert response.status_code == 409

    # Colliding with an admin account conflicts as well
    clash = dict(NEW_STUDENT, email=admin.email)
    assert client.post("/students", json=clash, headers=admin_headers).status_code == 409


def test_create_student_requires_fields(client, admin_headers):
    for field in ("name", "email", "department", "supervisor"):
        body = dict(NEW_STUDENT)
        body[field] = ""
        response = client.post("/students", json=body, headers=admin_headers)
        assert response.status_code == 400, field
        assert response.json()["error"] == "Validation error"

    body = dict(NEW_STUDENT)
    del body["supervisor"]
    assert client.post("/students", json=body, headers=admin_headers).status_code == 400


def test_list_students_with_counts(client, admin_headers, admin, student, make_user, db):
    other = make_user("Jane Smith", "jane@mail.com", department="Backend", supervisor="Mike Davis")
    report = DailyReport(user_id=student.id, notes="day one")
    report.video_entries = [
        VideoEntry(title="v1", duration="10 minutes", category="frontend", user_id=student.id),
        VideoEntry(title="v2", duration="20 minutes", category="frontend", user_id=student.id),
    ]
    report.quiz_entries = [
        QuizEntry(title="q1", score=3, total_questions=5, category="frontend", user_id=student.id),
    ]
    db.add(report)
    db.commit()

    response = client.get("/students", headers=admin_headers)
    assert response.status_code == 200
    students = response.json()["students"]

    # Admin accounts are not listed, newest first
    assert [s["id"] for s in students] == [other.id, student.id]
    by_id = {s["id"]: s for s in students}
    assert by_id[student.id]["stats"] == {"dailyReports": 1, "videosWatched": 2, "quizzesCompleted": 1}
    assert by_id[other.id]["stats"] == {"dailyReports": 0, "videosWatched": 0, "quizzesCompleted": 0}


def test_get_student(client, admin_headers, student, admin):
    response = client.get(f"/students/{student.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "John Doe"
    assert "stats" in response.json()

    assert client.get("/students/9999", headers=admin_headers).status_code == 404
    # An admin account is not a student
    assert client.get(f"/students/{admin.id}", headers=admin_headers).status_code == 404


def test_update_student(client, admin_headers, student, make_user):
    make_user("Jane Smith", "jane@mail.com")
    body = {
        "name": "John Updated",
        "email": "john.updated@mail.com",
        "department": "Database",
        "supervisor": "Emily Chen",
        "status": "completed",
    }
    response = client.put(f"/students/{student.id}", json=body, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["department"] == "Database"

    # Keeping your own email is fine, taking someone else's is not
    assert client.put(f"/students/{student.id}", json=body, headers=admin_headers).status_code == 200
    clash = dict(body, email="jane@mail.com")
    assert client.put(f"/students/{student.id}", json=clash, headers=admin_headers).status_code == 409

    assert client.put("/students/9999", json=body, headers=admin_headers).status_code == 404

    bad = dict(body, status="graduated")
    assert client.put(f"/students/{student.id}", json=bad, headers=admin_headers).status_code == 400


def test_delete_student_cascades(client, admin_headers, student, admin, db):
    report = DailyReport(user_id=student.id)
    report.video_entries = [VideoEntry(title="v", user_id=student.id)]
    report.quiz_entries = [QuizEntry(title="q", score=1, total_questions=2, user_id=student.id)]
    workflow = Workflow(title="W", category="backend")
    workflow.assignments = [WorkflowAssignment(user_id=student.id)]
    db.add_all([report, workflow])
    db.commit()
    ids = (report.id, report.video_entries[0].id, report.quiz_entries[0].id)

    response = client.delete(f"/students/{student.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Student deleted successfully"}

    db.expire_all()
    assert db.query(DailyReport).filter_by(id=ids[0]).first() is None
    assert db.query(VideoEntry).filter_by(id=ids[1]).first() is None
    assert db.query(QuizEntry).filter_by(id=ids[2]).first() is None
    assert db.query(WorkflowAssignment).count() == 0
    # The shared workflow definition survives
    assert db.query(Workflow).count() == 1

    assert client.get(f"/students/{student.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/students/{student.id}", headers=admin_headers).status_code == 404


def test_student_stats(client, admin_headers, admin, make_user):
    make_user("A", "a1@mail.com", status="active")
    make_user("B", "b1@mail.com", status="active")
    make_user("C", "c1@mail.com", status="inactive")
    make_user("D", "d1@mail.com", status="completed")

    response = client.get("/students/stats", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"total": 4, "active": 2, "inactive": 1, "completed": 1}


def test_students_ordered_by_creation(client, admin_headers, make_user, db):
    older = make_user("Old", "old@mail.com")
    newer = make_user("New", "new@mail.com")
    older.created_at = datetime.utcnow() - timedelta(days=3)
    db.commit()

    students = client.get("/students", headers=admin_headers).json()["students"]
    assert [s["id"] for s in students] == [newer.id, older.id]


def test_update_without_status_keeps_it(client, admin_headers, make_user):
    graduate = make_user("Grace", "grace@mail.com", status="completed")
    body = {"name": "Grace H", "email": "grace@mail.com", "department": "Backend", "supervisor": "S"}

    response = client.put(f"/students/{graduate.id}", json=body, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["name"] == "Grace H"


def test_create_email_race_conflicts(client, admin_headers, make_user, monkeypatch):
    make_user("Jane Smith", "a@x.com")
    # Another request committed the same email after the pre-check
    monkeypatch.setattr(students_routes, "email_taken", lambda *args, **kwargs: False)

    response = client.post("/students", json=NEW_STUDENT, headers=admin_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "User with this email already exists"}


def test_update_email_race_conflicts(client, admin_headers, student, make_user, monkeypatch):
    make_user("Jane Smith", "jane@mail.com")
    monkeypatch.setattr(students_routes, "email_taken", lambda *args, **kwargs: False)

    body = dict(NEW_STUDENT, email="jane@mail.com")
    response = client.put(f"/students/{student.id}", json=body, headers=admin_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Email already taken by another user"}


def test_failed_delete_leaves_everything(client, admin_headers, student, db, monkeypatch):
    report = DailyReport(user_id=student.id)
    report.video_entries = [VideoEntry(title="v", user_id=student.id)]
    report.quiz_entries = [QuizEntry(title="q", score=1, total_questions=2, user_id=student.id)]
    workflow = Workflow(title="W", category="backend")
    workflow.assignments = [WorkflowAssignment(user_id=student.id)]
    db.add_all([report, workflow])
    db.commit()

    def broken_delete(self, instance):
        raise SQLAlchemyError("disk full")

    # The bulk child deletes run first, then the account delete fails
    monkeypatch.setattr(Session, "delete", broken_delete)
    response = client.delete(f"/students/{student.id}", headers=admin_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to delete student"}

    db.expire_all()
    assert db.query(QuizEntry).count() == 1
    assert db.query(VideoEntry).count() == 1
    assert db.query(DailyReport).count() == 1
    assert db.query(WorkflowAssignment).count() == 1
    assert db.query(User).filter_by(id=student.id).first() is not None
