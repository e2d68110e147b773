import logging
from datetime import datetime, timedelta

from intern_tracker.config import ADMIN, STUDENT, IN_PROGRESS
from intern_tracker.database import engine, Base, SessionLocal
from intern_tracker.models import (
    User, DailyReport, VideoEntry, QuizEntry, Workflow, WorkflowTask, WorkflowAssignment
)
from intern_tracker.reference_data import seed_reference_data
from intern_tracker.security import hash_password

logger = logging.getLogger("intern_tracker.init_db")


def init_db():
    logger.info("Dropping all tables...")
    Base.metadata.drop_all(bind=engine)

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_reference_data(db)

        admin_password = hash_password("admin123")
        student_password = hash_password("student123")

        logger.info("Creating users...")
        admin = User(
            email="admin@enigmacamp.com",
            name="System Administrator",
            password_hash=admin_password,
            role=ADMIN,
        )
        supervisor = User(
            email="supervisor@enigmacamp.com",
            name="Sarah Johnson",
            password_hash=admin_password,
            role=ADMIN,
        )
        students = [
            User(email="john.doe@mail.com", name="John Doe", department="Frontend Development",
                 supervisor="Sarah Johnson", status="active"),
            User(email="jane.smith@mail.com", name="Jane Smith", department="Backend Development",
                 supervisor="Mike Davis", status="active"),
            User(email="alex.johnson@mail.com", name="Alex Johnson", department="UI/UX Design",
                 supervisor="Emily Chen", status="active"),
            # Inactive on purpose, exercises the status filters
            User(email="maria.garcia@mail.com", name="Maria Garcia", department="Database",
                 supervisor="John Smith", status="inactive"),
        ]
        for student in students:
            student.role = STUDENT
            student.password_hash = student_password
        db.add_all([admin, supervisor] + students)
        db.commit()

        logger.info("Creating workflows...")
        react = Workflow(
            title="React Fundamentals",
            description="Learn the basics of React.js framework",
            category="frontend",
            due_date=datetime(2025, 8, 1),
            assigned_by=supervisor.name,
        )
        react.tasks = [
            WorkflowTask(title="React Components Introduction", type="video", order=0,
                         duration="45 minutes", completed=True),
            WorkflowTask(title="React Basics Quiz", type="quiz", order=1, total_questions=10),
        ]
        node = Workflow(
            title="Node.js Backend Development",
            description="Build REST APIs with Node.js and Express",
            category="backend",
            due_date=datetime(2025, 8, 15),
            assigned_by="Mike Davis",
        )
        node.tasks = [
            WorkflowTask(title="Express Routing", type="video", order=0, duration="30 minutes"),
        ]
        react.assignments = [WorkflowAssignment(user_id=students[0].id, status=IN_PROGRESS)]
        node.assignments = [WorkflowAssignment(user_id=students[1].id, status=IN_PROGRESS)]
        db.add_all([react, node])

        logger.info("Creating daily reports...")
        yesterday = datetime.utcnow() - timedelta(days=1)
        report = DailyReport(
            user_id=students[0].id,
            date=yesterday,
            notes="Completed React component basics tutorial",
            created_at=yesterday,
        )
        report.video_entries = [
            VideoEntry(title="React Components Introduction", duration="45 minutes",
                       category="frontend", user_id=students[0].id, created_at=yesterday),
        ]
        report.quiz_entries = [
            QuizEntry(title="React Basics Quiz", score=8, total_questions=10,
                      category="frontend", user_id=students[0].id, created_at=yesterday),
        ]
        db.add(report)
        db.commit()

        for user in db.query(User).order_by(User.id).all():
            logger.info("- ID: %s, Email: %s, Role: %s, Status: %s", user.id, user.email, user.role, user.status)
        logger.info("Admin login: admin@enigmacamp.com / admin123; students use student123")
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
