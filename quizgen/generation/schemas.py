"""
Pydantic schemas for the question generation pipeline.

GeneratedQuestion  → one validated item from the completion service (answer as index)
QuestionCreate     → one insertion request for the question store
"""

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

Difficulty = Literal["easy", "medium", "hard"]
DIFFICULTIES = ("easy", "medium", "hard")
OPTION_COUNT = 4


class GeneratedQuestion(BaseModel):
    """Normalized question produced by the completion service."""
    text: str
    options: List[str] = Field(..., min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answer: int = Field(..., ge=0, le=OPTION_COUNT - 1)
    difficulty: Difficulty = "medium"


class QuestionCreate(BaseModel):
    """Insertion request handed to a PersistenceAdapter."""
    text: str
    options: List[str]
    correct_answer: int = Field(..., ge=0, le=OPTION_COUNT - 1)
    difficulty: Difficulty = "medium"
    subject_id: int
    teacher_id: int
    marks: int = Field(1, ge=1)
    source: str = "topic"   # "topic" | "document" | "manual"

    @field_validator("options")
    @classmethod
    def _four_options(cls, v: List[str]) -> List[str]:
        if len(v) != OPTION_COUNT:
            raise ValueError(f"exactly {OPTION_COUNT} options are required")
        return v

    @classmethod
    def from_generated(
        cls,
        question: GeneratedQuestion,
        subject_id: int,
        teacher_id: int,
        marks: int = 1,
        source: str = "topic",
    ) -> "QuestionCreate":
        return cls(
            text=question.text,
            options=list(question.options),
            correct_answer=question.correct_answer,
            difficulty=question.difficulty,
            subject_id=subject_id,
            teacher_id=teacher_id,
            marks=marks,
            source=source,
        )
