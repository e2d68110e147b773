# intern_tracker/routes/progress.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload

from ..aggregation import build_timeline, summarize_timeline
from ..database import get_db
from ..errors import InternalError
from ..models import VideoEntry, QuizEntry
from .auth import Identity, get_current_identity
from .daily_reports import scope_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.get("")
def get_progress(
    user_id: Optional[int] = Query(None, alias="userId"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Video and quiz activity merged into one timeline, newest day first."""
    owner_id = scope_user_id(identity, user_id)
    try:
        videos = db.query(VideoEntry).options(selectinload(VideoEntry.user))
        quizzes = db.query(QuizEntry).options(selectinload(QuizEntry.user))
        if owner_id is not None:
            videos = videos.filter(VideoEntry.user_id == owner_id)
            quizzes = quizzes.filter(QuizEntry.user_id == owner_id)

        timeline = build_timeline(videos.all(), quizzes.all())
        summary = summarize_timeline(timeline)
    except Exception:
        logger.exception("Failed to build progress timeline for user %s", owner_id)
        raise InternalError()

    return {"progressData": timeline, "summary": summary}
