# intern_tracker/routes/daily_reports.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..database import get_db
from ..models import DailyReport, VideoEntry, QuizEntry
from ..schemas import DailyReportCreate
from .auth import Identity, get_current_identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/daily-reports", tags=["Daily Reports"])


def scope_user_id(identity: Identity, user_id: Optional[int]) -> Optional[int]:
    """Owner filter for activity reads.

    Admins see everything, or one student when they ask for one. Anyone else
    only ever sees their own rows, whatever filter they pass.
    """
    if identity.is_admin:
        return user_id
    return identity.user_id


def format_video(entry: VideoEntry) -> dict:
    return {
        "id": entry.id,
        "title": entry.title,
        "duration": entry.duration,
        "category": entry.category,
        "userId": entry.user_id,
        "dailyReportId": entry.daily_report_id,
        "createdAt": entry.created_at.isoformat(),
    }


def format_quiz(entry: QuizEntry) -> dict:
    return {
        "id": entry.id,
        "title": entry.title,
        "score": entry.score,
        "totalQuestions": entry.total_questions,
        "category": entry.category,
        "userId": entry.user_id,
        "dailyReportId": entry.daily_report_id,
        "createdAt": entry.created_at.isoformat(),
    }


def format_report(report: DailyReport, include_user: bool = True) -> dict:
    data = {
        "id": report.id,
        "userId": report.user_id,
        "date": report.date.isoformat(),
        "notes": report.notes,
        "createdAt": report.created_at.isoformat(),
        "videoEntries": [format_video(v) for v in report.video_entries],
        "quizEntries": [format_quiz(q) for q in report.quiz_entries],
    }
    if include_user and report.user is not None:
        data["user"] = {
            "id": report.user.id,
            "name": report.user.name,
            "email": report.user.email,
        }
    return data


@router.get("")
def list_daily_reports(
    user_id: Optional[int] = Query(None, alias="userId"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    query = db.query(DailyReport).options(
        selectinload(DailyReport.user),
        selectinload(DailyReport.video_entries),
        selectinload(DailyReport.quiz_entries),
    )
    owner_id = scope_user_id(identity, user_id)
    if owner_id is not None:
        query = query.filter(DailyReport.user_id == owner_id)

    reports = query.order_by(DailyReport.date.desc(), DailyReport.id.desc()).all()
    return {"dailyReports": [format_report(r) for r in reports]}


@router.post("")
def create_daily_report(
    data: DailyReportCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    owner_id = identity.user_id
    report = DailyReport(user_id=owner_id, notes=data.notes)
    report.video_entries = [
        VideoEntry(
            title=video.title,
            duration=video.duration,
            category=video.category,
            user_id=owner_id,
        )
        for video in data.video_entries
    ]
    report.quiz_entries = [
        QuizEntry(
            title=quiz.title,
            score=quiz.score,
            total_questions=quiz.total_questions,
            category=quiz.category,
            user_id=owner_id,
        )
        for quiz in data.quiz_entries
    ]

    try:
        db.add(report)
        db.commit()
        db.refresh(report)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create daily report for user %s", owner_id)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    logger.info(
        "User %s submitted daily report %s (%d videos, %d quizzes)",
        owner_id, report.id, len(report.video_entries), len(report.quiz_entries)
    )
    return {"dailyReport": format_report(report, include_user=False)}
