# intern_tracker/routes/workflows.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..aggregation import bucket_workflows, derive_workflow_status, task_progress
from ..config import STUDENT, NOT_STARTED
from ..database import get_db
from ..errors import NotFound, ValidationFailed
from ..models import User, Workflow, WorkflowTask, WorkflowAssignment
from ..schemas import WorkflowCreate, AssignmentStatusUpdate
from .auth import Identity, get_current_identity, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflows", tags=["Workflows"])


def format_task(task: WorkflowTask) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "type": task.type,
        "order": task.order,
        "completed": bool(task.completed),
        "score": task.score,
        "totalQuestions": task.total_questions,
        "duration": task.duration,
    }


def _due(workflow: Workflow):
    return workflow.due_date.isoformat() if workflow.due_date else None


def format_admin_workflow(workflow: Workflow) -> dict:
    tasks = list(workflow.tasks)
    data = {
        "id": workflow.id,
        "title": workflow.title,
        "description": workflow.description,
        "category": workflow.category,
        "dueDate": _due(workflow),
        "assignedBy": workflow.assigned_by,
        "createdAt": workflow.created_at.isoformat(),
        "status": derive_workflow_status(tasks),
        "tasks": [format_task(t) for t in tasks],
        "assignments": [
            {
                "id": a.id,
                "userId": a.user_id,
                "status": a.status,
                "assignedAt": a.assigned_at.isoformat(),
                "user": {"id": a.user.id, "name": a.user.name, "email": a.user.email},
            }
            for a in workflow.assignments
        ],
    }
    data.update(task_progress(tasks))
    return data


def format_assignment(assignment: WorkflowAssignment) -> dict:
    workflow = assignment.workflow
    tasks = list(workflow.tasks)
    data = {
        "id": workflow.id,
        "assignmentId": assignment.id,
        "title": workflow.title,
        "description": workflow.description,
        "category": workflow.category,
        "dueDate": _due(workflow),
        "assignedBy": workflow.assigned_by,
        "status": assignment.status,
        "assignedAt": assignment.assigned_at.isoformat(),
        "tasks": [format_task(t) for t in tasks],
    }
    data.update(task_progress(tasks))
    return data


def bucket_counts(workflows) -> dict:
    return {name: len(items) for name, items in bucket_workflows(workflows).items()}


@router.get("")
def list_workflows(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    if identity.is_admin:
        workflows = (
            db.query(Workflow)
            .options(
                selectinload(Workflow.tasks),
                selectinload(Workflow.assignments).selectinload(WorkflowAssignment.user),
            )
            .order_by(Workflow.created_at.desc(), Workflow.id.desc())
            .all()
        )
        shaped = [format_admin_workflow(w) for w in workflows]
    else:
        assignments = (
            db.query(WorkflowAssignment)
            .options(selectinload(WorkflowAssignment.workflow).selectinload(Workflow.tasks))
            .filter(WorkflowAssignment.user_id == identity.user_id)
            .order_by(WorkflowAssignment.created_at.desc(), WorkflowAssignment.id.desc())
            .all()
        )
        shaped = [format_assignment(a) for a in assignments]

    return {"workflows": shaped, "buckets": bucket_counts(shaped)}


@router.post("")
def create_workflow(
    data: WorkflowCreate,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    assignee_ids = list(dict.fromkeys(data.assigned_users))
    if assignee_ids:
        found = {
            uid for (uid,) in db.query(User.id)
            .filter(User.id.in_(assignee_ids), User.role == STUDENT)
            .all()
        }
        missing = [uid for uid in assignee_ids if uid not in found]
        if missing:
            raise ValidationFailed(f"Unknown students: {missing}")

    admin = db.query(User).filter(User.id == identity.user_id).first()
    workflow = Workflow(
        title=data.title,
        description=data.description,
        category=data.category,
        due_date=data.due_date,
        assigned_by=admin.name if admin else str(identity.user_id),
    )
    workflow.tasks = [
        WorkflowTask(
            title=task.title,
            type=task.type,
            order=index,
            score=task.score,
            total_questions=task.total_questions,
            duration=task.duration,
        )
        for index, task in enumerate(data.tasks)
    ]
    workflow.assignments = [
        WorkflowAssignment(user_id=uid, status=NOT_STARTED)
        for uid in assignee_ids
    ]

    try:
        db.add(workflow)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create workflow %r", data.title)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    workflow = (
        db.query(Workflow)
        .options(
            selectinload(Workflow.tasks),
            selectinload(Workflow.assignments).selectinload(WorkflowAssignment.user),
        )
        .filter(Workflow.id == workflow.id)
        .populate_existing()
        .one()
    )
    logger.info(
        "Admin %s created workflow %s with %d tasks for %d students",
        identity.user_id, workflow.id, len(workflow.tasks), len(workflow.assignments)
    )
    return {"workflow": format_admin_workflow(workflow)}


@router.patch("/{workflow_id}/assignment")
def update_assignment_status(
    workflow_id: int,
    data: AssignmentStatusUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    assignment = (
        db.query(WorkflowAssignment)
        .filter(
            WorkflowAssignment.workflow_id == workflow_id,
            WorkflowAssignment.user_id == identity.user_id,
        )
        .first()
    )
    if not assignment:
        raise NotFound("Assignment not found")

    try:
        assignment.status = data.status
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update assignment %s", assignment.id)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    logger.info("User %s set workflow %s to %s", identity.user_id, workflow_id, data.status)
    return {"workflow": format_assignment(assignment)}
