# intern_tracker/routes/students.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..aggregation import iso_date
from ..config import STUDENT, STUDENT_STATUSES
from ..database import get_db
from ..errors import Conflict, NotFound
from ..models import User, DailyReport, VideoEntry, QuizEntry, WorkflowAssignment
from ..schemas import StudentCreate, StudentUpdate
from ..security import generate_temporary_password, hash_password
from .auth import Identity, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"])


def format_student(student: User, counts: dict = None) -> dict:
    data = {
        "id": student.id,
        "name": student.name,
        "email": student.email,
        "department": student.department or "",
        "startDate": iso_date(student.created_at),
        "supervisor": student.supervisor or "",
        "status": student.status,
    }
    if counts is not None:
        data["stats"] = {
            "dailyReports": counts.get("dailyReports", 0),
            "videosWatched": counts.get("videosWatched", 0),
            "quizzesCompleted": counts.get("quizzesCompleted", 0),
        }
    return data


def _count_by_user(db: Session, model, user_ids) -> dict:
    if not user_ids:
        return {}
    rows = (
        db.query(model.user_id, func.count(model.id))
        .filter(model.user_id.in_(user_ids))
        .group_by(model.user_id)
        .all()
    )
    return dict(rows)


def activity_counts(db: Session, user_ids) -> dict:
    """Owned row counts per student id."""
    reports = _count_by_user(db, DailyReport, user_ids)
    videos = _count_by_user(db, VideoEntry, user_ids)
    quizzes = _count_by_user(db, QuizEntry, user_ids)
    return {
        uid: {
            "dailyReports": reports.get(uid, 0),
            "videosWatched": videos.get(uid, 0),
            "quizzesCompleted": quizzes.get(uid, 0),
        }
        for uid in user_ids
    }


def get_student_or_404(db: Session, student_id: int) -> User:
    student = (
        db.query(User)
        .filter(User.id == student_id, User.role == STUDENT)
        .first()
    )
    if not student:
        raise NotFound("Student not found")
    return student


def email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


@router.get("")
def list_students(
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    students = (
        db.query(User)
        .filter(User.role == STUDENT)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )
    counts = activity_counts(db, [s.id for s in students])
    return {"students": [format_student(s, counts[s.id]) for s in students]}


@router.get("/stats")
def student_stats(
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    query = db.query(User).filter(User.role == STUDENT)
    stats = {"total": query.count()}
    for status in STUDENT_STATUSES:
        stats[status] = query.filter(User.status == status).count()
    return stats


@router.get("/{student_id}")
def get_student(
    student_id: int,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    student = get_student_or_404(db, student_id)
    counts = activity_counts(db, [student.id])
    return format_student(student, counts[student.id])


@router.post("", status_code=201)
def create_student(
    data: StudentCreate,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if email_taken(db, data.email):
        raise Conflict("User with this email already exists")

    temporary_password = generate_temporary_password()
    student = User(
        name=data.name,
        email=data.email,
        department=data.department,
        supervisor=data.supervisor,
        status=data.status,
        role=STUDENT,
        password_hash=hash_password(temporary_password),
        must_reset_password=True,
    )
    try:
        db.add(student)
        db.commit()
        db.refresh(student)
    except IntegrityError:
        # Lost a race on the unique email
        db.rollback()
        raise Conflict("User with this email already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create student %s", data.email)
        return JSONResponse({"error": "Failed to create student"}, status_code=500)

    logger.info("Admin %s created student %s", identity.user_id, student.id)
    result = format_student(student)
    # Shown once; only the hash is stored
    result["temporaryPassword"] = temporary_password
    return result


@router.put("/{student_id}")
def update_student(
    student_id: int,
    data: StudentUpdate,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    student = get_student_or_404(db, student_id)

    if email_taken(db, data.email, exclude_id=student_id):
        raise Conflict("Email already taken by another user")

    try:
        student.name = data.name
        student.email = data.email
        student.department = data.department
        student.supervisor = data.supervisor
        if data.status is not None:
            student.status = data.status
        db.commit()
        db.refresh(student)
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already taken by another user")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update student %s", student_id)
        return JSONResponse({"error": "Failed to update student"}, status_code=500)

    logger.info("Admin %s updated student %s", identity.user_id, student_id)
    return format_student(student)


@router.delete("/{student_id}")
def delete_student(
    student_id: int,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    student = get_student_or_404(db, student_id)

    # Children before parents; one commit for the whole cascade
    try:
        db.query(QuizEntry).filter(QuizEntry.user_id == student_id).delete(synchronize_session=False)
        db.query(VideoEntry).filter(VideoEntry.user_id == student_id).delete(synchronize_session=False)
        db.query(DailyReport).filter(DailyReport.user_id == student_id).delete(synchronize_session=False)
        db.query(WorkflowAssignment).filter(
            WorkflowAssignment.user_id == student_id
        ).delete(synchronize_session=False)
        db.delete(student)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete student %s", student_id)
        return JSONResponse({"error": "Failed to delete student"}, status_code=500)

    logger.info("Admin %s deleted student %s", identity.user_id, student_id)
    return {"success": True, "message": "Student deleted successfully"}
