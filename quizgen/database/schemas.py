"""
Pydantic schemas for request/response validation
Separate from SQLAlchemy models for clean API contracts
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ==========================================
# SUBJECT SCHEMAS
# ==========================================

class SubjectCreate(BaseModel):
    """Schema for creating a new Subject"""
    name: str = Field(..., min_length=1, max_length=255, description="Subject name")
    description: Optional[str] = Field(None, description="Subject description")


class SubjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ==========================================
# QUESTION SCHEMAS
# ==========================================

class QuestionResponse(BaseModel):
    """Pool question as returned by the API"""
    id: int
    subject_id: int
    teacher_id: Optional[int] = None
    text: str
    options: List[str]
    correct_answer: int
    difficulty: str
    marks: int
    source: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ==========================================
# EXAM SCHEMAS
# ==========================================

class ExamCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    subject_id: int = Field(..., gt=0)
    duration_minutes: Optional[int] = Field(None, ge=1, le=600)


class SelectedQuestionResponse(BaseModel):
    """One selected question, in exam order, with its per-exam marks"""
    position: int
    marks: int
    question: QuestionResponse


class ExamSummary(BaseModel):
    id: int
    title: str
    subject_id: int
    teacher_id: Optional[int] = None
    duration_minutes: Optional[int] = None
    question_count: int
    total_marks: int
    created_at: Optional[datetime] = None


class ExamDetail(ExamSummary):
    questions: List[SelectedQuestionResponse]
