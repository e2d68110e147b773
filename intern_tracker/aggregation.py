# intern_tracker/aggregation.py
"""Pure aggregation and derivation helpers.

Nothing in here touches the database: callers fetch rows first and hand them
over. Rows only need the attributes the ORM models expose (``created_at``,
``title``, ``user`` ...), which keeps the helpers easy to test with plain
objects.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import NOT_STARTED, IN_PROGRESS, COMPLETED

BUCKETS = {
    IN_PROGRESS: "active",
    NOT_STARTED: "upcoming",
    COMPLETED: "completed",
}


def iso_date(value: Optional[datetime]) -> Optional[str]:
    """Calendar day of a timestamp as ``YYYY-MM-DD``."""
    if value is None:
        return None
    return value.date().isoformat()


def percentage(part: float, whole: float) -> Optional[int]:
    """Rounded percentage, or None when the denominator is zero."""
    if not whole:
        return None
    return int(round(part * 100.0 / whole))


def _student_name(entry) -> Optional[str]:
    user = getattr(entry, "user", None)
    return user.name if user is not None else None


def video_to_timeline(entry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "date": iso_date(entry.created_at),
        "type": "video",
        "title": entry.title,
        "category": entry.category,
        "duration": entry.duration,
        "studentName": _student_name(entry),
    }


def quiz_to_timeline(entry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "date": iso_date(entry.created_at),
        "type": "quiz",
        "title": entry.title,
        "category": entry.category,
        "score": entry.score,
        "totalQuestions": entry.total_questions,
        "studentName": _student_name(entry),
    }


def build_timeline(video_entries: Iterable, quiz_entries: Iterable) -> List[Dict[str, Any]]:
    """Merge video and quiz entries into one list, newest calendar day first.

    Entries on the same day are ordered by their full creation timestamp
    (newest first), then videos before quizzes, then by descending id.
    """
    keyed = []
    for entry in video_entries:
        keyed.append(((entry.created_at, 1, entry.id), video_to_timeline(entry)))
    for entry in quiz_entries:
        keyed.append(((entry.created_at, 0, entry.id), quiz_to_timeline(entry)))

    # date strings sort lexically in calendar order
    keyed.sort(key=lambda item: (item[1]["date"], item[0]), reverse=True)
    return [record for _, record in keyed]


def quiz_percentages(records: Iterable[Dict[str, Any]]) -> List[float]:
    """Score percentages of quiz timeline records; quizzes without questions are skipped."""
    values = []
    for record in records:
        if record.get("type") != "quiz" or not record.get("totalQuestions"):
            continue
        values.append(record["score"] * 100.0 / record["totalQuestions"])
    return values


def mean(values: Sequence[float]) -> Optional[int]:
    if not values:
        return None
    return int(round(sum(values) / len(values)))


def summarize_timeline(records: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "videosWatched": sum(1 for r in records if r["type"] == "video"),
        "quizzesCompleted": sum(1 for r in records if r["type"] == "quiz"),
        "averageScore": mean(quiz_percentages(records)),
    }


def task_progress(tasks: Sequence) -> Dict[str, Any]:
    """Completed/total counts for a task list; ``progress`` is None for an empty list."""
    total = len(tasks)
    done = sum(1 for task in tasks if task.completed)
    return {
        "completedTasks": done,
        "totalTasks": total,
        "progress": percentage(done, total),
    }


def derive_workflow_status(tasks: Sequence) -> str:
    """Status of a workflow as implied by its task list."""
    done = sum(1 for task in tasks if task.completed)
    if done == 0:
        return NOT_STARTED
    if done == len(tasks):
        return COMPLETED
    return IN_PROGRESS


def bucket_workflows(workflows: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Split shaped workflows into the active / upcoming / completed tabs.

    Every workflow lands in exactly one bucket.
    """
    buckets = {"active": [], "upcoming": [], "completed": []}
    for workflow in workflows:
        buckets[BUCKETS[workflow["status"]]].append(workflow)
    return buckets


def student_report(student, workflows_completed: int, total_workflows: int) -> Dict[str, Any]:
    """Per-student line of the admin progress report."""
    records = build_timeline(student.video_entries, student.quiz_entries)
    dates = [r["date"] for r in records]
    dates.extend(iso_date(report.date) for report in student.daily_reports)
    return {
        "id": student.id,
        "name": student.name,
        "department": student.department or "",
        "status": student.status,
        "dailyReports": len(student.daily_reports),
        "videosWatched": len(student.video_entries),
        "quizzesCompleted": len(student.quiz_entries),
        "averageScore": mean(quiz_percentages(records)),
        "workflowsCompleted": workflows_completed,
        "totalWorkflows": total_workflows,
        "completionRate": percentage(workflows_completed, total_workflows),
        "lastActivity": max(dates) if dates else None,
    }


def summarize_report(rows: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    scores = [r["averageScore"] for r in rows if r["averageScore"] is not None]
    rates = [r["completionRate"] for r in rows if r["completionRate"] is not None]
    return {
        "totalStudents": len(rows),
        "totalVideos": sum(r["videosWatched"] for r in rows),
        "totalQuizzes": sum(r["quizzesCompleted"] for r in rows),
        "averageScore": mean(scores),
        "averageCompletionRate": mean(rates),
    }
