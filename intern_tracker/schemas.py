# intern_tracker/schemas.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Literal
from datetime import datetime

StudentStatus = Literal["active", "inactive", "completed"]
AssignmentStatus = Literal["not-started", "in-progress", "completed"]
TaskType = Literal["video", "quiz"]


# --- Auth ---
class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChange(BaseModel):
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=128)

    class Config:
        populate_by_name = True


# --- Students ---
class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    department: str = Field(..., min_length=1)
    supervisor: str = Field(..., min_length=1)
    status: StudentStatus = "active"

    class Config:
        str_strip_whitespace = True


class StudentUpdate(BaseModel):
    """Full replace of the profile fields; status is left alone when omitted."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    department: str = Field(..., min_length=1)
    supervisor: str = Field(..., min_length=1)
    status: Optional[StudentStatus] = None

    class Config:
        str_strip_whitespace = True


# --- Daily reports ---
class VideoEntryCreate(BaseModel):
    title: str = Field(..., min_length=1)
    duration: Optional[str] = None
    category: Optional[str] = None


class QuizEntryCreate(BaseModel):
    title: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., alias="totalQuestions", ge=0)
    category: Optional[str] = None

    class Config:
        populate_by_name = True


class DailyReportCreate(BaseModel):
    """Body of a report submission; any client supplied owner id is ignored."""
    notes: Optional[str] = None
    video_entries: List[VideoEntryCreate] = Field(default_factory=list, alias="videoEntries")
    quiz_entries: List[QuizEntryCreate] = Field(default_factory=list, alias="quizEntries")

    class Config:
        populate_by_name = True


# --- Workflows ---
class WorkflowTaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    type: TaskType
    score: Optional[int] = None
    total_questions: Optional[int] = Field(None, alias="totalQuestions")
    duration: Optional[str] = None

    class Config:
        populate_by_name = True


class WorkflowCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    category: str = Field(..., min_length=1)
    due_date: Optional[datetime] = Field(None, alias="dueDate")
    tasks: List[WorkflowTaskCreate] = Field(default_factory=list)
    assigned_users: List[int] = Field(default_factory=list, alias="assignedUsers")

    class Config:
        populate_by_name = True


class AssignmentStatusUpdate(BaseModel):
    status: AssignmentStatus


# --- Reference lists ---
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class NamedItemCreate(BaseModel):
    name: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True
