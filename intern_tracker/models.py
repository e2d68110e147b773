# intern_tracker/models.py
from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, Text, DateTime
from datetime import datetime
from sqlalchemy.orm import relationship
from .database import Base
from .config import STUDENT, NOT_STARTED


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=STUDENT)  # "admin" or "student"
    department = Column(String, nullable=True)
    supervisor = Column(String, nullable=True)
    status = Column(String, nullable=False, default="active")
    must_reset_password = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    daily_reports = relationship("DailyReport", back_populates="user")
    video_entries = relationship("VideoEntry", back_populates="user")
    quiz_entries = relationship("QuizEntry", back_populates="user")
    assignments = relationship("WorkflowAssignment", back_populates="user")


class DailyReport(Base):
    __tablename__ = "daily_reports"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="daily_reports")
    video_entries = relationship("VideoEntry", back_populates="daily_report")
    quiz_entries = relationship("QuizEntry", back_populates="daily_report")


class VideoEntry(Base):
    __tablename__ = "video_entries"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    duration = Column(String, nullable=True)  # Free text, e.g. "45 minutes"
    category = Column(String, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    daily_report_id = Column(Integer, ForeignKey("daily_reports.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="video_entries")
    daily_report = relationship("DailyReport", back_populates="video_entries")


class QuizEntry(Base):
    __tablename__ = "quiz_entries"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    score = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    daily_report_id = Column(Integer, ForeignKey("daily_reports.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="quiz_entries")
    daily_report = relationship("DailyReport", back_populates="quiz_entries")


class Workflow(Base):
    __tablename__ = "workflows"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    due_date = Column(DateTime, nullable=True)
    assigned_by = Column(String, nullable=True)  # Admin name
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    tasks = relationship(
        "WorkflowTask",
        back_populates="workflow",
        order_by="WorkflowTask.order",
    )
    assignments = relationship("WorkflowAssignment", back_populates="workflow")


class WorkflowTask(Base):
    __tablename__ = "workflow_tasks"
    id = Column(Integer, primary_key=True, index=True)
    workflow_id = Column(Integer, ForeignKey("workflows.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False)  # "video" or "quiz"
    order = Column(Integer, nullable=False, default=0)
    # Shared by every assignee of the workflow, see DESIGN.md
    completed = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=True)
    total_questions = Column(Integer, nullable=True)
    duration = Column(String, nullable=True)

    workflow = relationship("Workflow", back_populates="tasks")


class WorkflowAssignment(Base):
    __tablename__ = "workflow_assignments"
    id = Column(Integer, primary_key=True, index=True)
    workflow_id = Column(Integer, ForeignKey("workflows.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default=NOT_STARTED)
    assigned_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    workflow = relationship("Workflow", back_populates="assignments")
    user = relationship("User", back_populates="assignments")


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    value = Column(String, unique=True, nullable=False)


class Department(Base):
    __tablename__ = "departments"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)


class Supervisor(Base):
    __tablename__ = "supervisors"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
