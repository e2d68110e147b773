# intern_tracker/routes/reports.py
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ..aggregation import student_report, summarize_report
from ..config import STUDENT, COMPLETED
from ..database import get_db
from ..models import User, WorkflowAssignment
from .auth import Identity, require_admin
from .students import get_student_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def assignment_counts(db: Session, user_ids) -> dict:
    """{user_id: (completed, total)} over workflow assignments."""
    if not user_ids:
        return {}
    totals = dict(
        db.query(WorkflowAssignment.user_id, func.count(WorkflowAssignment.id))
        .filter(WorkflowAssignment.user_id.in_(user_ids))
        .group_by(WorkflowAssignment.user_id)
        .all()
    )
    done = dict(
        db.query(WorkflowAssignment.user_id, func.count(WorkflowAssignment.id))
        .filter(
            WorkflowAssignment.user_id.in_(user_ids),
            WorkflowAssignment.status == COMPLETED,
        )
        .group_by(WorkflowAssignment.user_id)
        .all()
    )
    return {uid: (done.get(uid, 0), totals.get(uid, 0)) for uid in user_ids}


@router.get("")
def generate_report(
    user_id: Optional[int] = Query(None, alias="userId"),
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Progress report over all students, or a single one when ``userId`` is given
    """
    if user_id is not None:
        get_student_or_404(db, user_id)

    query = (
        db.query(User)
        .options(
            selectinload(User.daily_reports),
            selectinload(User.video_entries),
            selectinload(User.quiz_entries),
        )
        .filter(User.role == STUDENT)
    )
    if user_id is not None:
        query = query.filter(User.id == user_id)
    students = query.order_by(User.name, User.id).all()

    counts = assignment_counts(db, [s.id for s in students])
    rows = [student_report(s, *counts[s.id]) for s in students]

    logger.info("Admin %s generated a report over %d students", identity.user_id, len(rows))
    return {
        "report": {
            "generatedAt": datetime.utcnow().isoformat(),
            "summary": summarize_report(rows),
            "students": rows,
        }
    }
