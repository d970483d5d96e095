"""
Exam assembly router (teacher-facing).
Create an exam for a subject, then select questions from the subject's pool,
remove them again, adjust per-question marks and export the paper as PDF.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizgen.database import crud
from quizgen.database.database import get_db
from quizgen.database.models import Exam, ExamQuestion, Teacher
from quizgen.database.schemas import (
    ExamCreate, ExamDetail, ExamSummary, QuestionResponse, SelectedQuestionResponse,
)
from quizgen.errors import SelectionError
from quizgen.exporter import export_exam_pdf
from quizgen.routers.auth_teacher import get_current_teacher
from quizgen.selection import QuestionSelection, SelectedQuestion

router = APIRouter(prefix="/exams", tags=["exams"])


# ─── Schemas ───────────────────────────────────────────────────────────────────

class SelectQuestionRequest(BaseModel):
    question_id: int
    marks: Optional[int] = None

class UpdateMarksRequest(BaseModel):
    marks: int


# ─── Helpers ───────────────────────────────────────────────────────────────────

def _get_exam_or_404(db: Session, exam_id: int, teacher: Teacher) -> Exam:
    exam = crud.get_exam(db, exam_id, teacher_id=teacher.id)
    if not exam:
        raise HTTPException(status_code=404, detail="Exam not found")
    return exam


def _load_selection(db: Session, exam: Exam) -> QuestionSelection:
    pool = crud.subject_pool(db, exam.subject_id)
    selected = [SelectedQuestion(question=eq.question, marks=eq.marks) for eq in exam.questions]
    return QuestionSelection(pool, selected)


def _exam_summary(exam: Exam) -> ExamSummary:
    return ExamSummary(
        id=exam.id,
        title=exam.title,
        subject_id=exam.subject_id,
        teacher_id=exam.teacher_id,
        duration_minutes=exam.duration_minutes,
        question_count=len(exam.questions),
        total_marks=sum(eq.marks for eq in exam.questions),
        created_at=exam.created_at,
    )


def _exam_detail(exam: Exam) -> ExamDetail:
    return ExamDetail(
        **_exam_summary(exam).model_dump(),
        questions=[
            SelectedQuestionResponse(
                position=eq.position,
                marks=eq.marks,
                question=QuestionResponse.model_validate(eq.question),
            )
            for eq in exam.questions
        ],
    )


# ─── Routes ────────────────────────────────────────────────────────────────────

@router.post("/", response_model=ExamDetail, status_code=201)
def create_exam(request: ExamCreate, teacher: Teacher = Depends(get_current_teacher), db: Session = Depends(get_db)):
    """Create an empty exam; questions are added through /exams/{id}/questions."""
    if not crud.get_subject(db, request.subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")
    exam = crud.create_exam(db, request, teacher_id=teacher.id)
    return _exam_detail(exam)


@router.get("/", response_model=List[ExamSummary])
def list_exams(teacher: Teacher = Depends(get_current_teacher), db: Session = Depends(get_db)):
    """List all exams created by the current teacher."""
    return [_exam_summary(e) for e in crud.list_exams(db, teacher.id)]


@router.get("/{exam_id}", response_model=ExamDetail)
def get_exam(exam_id: int, teacher: Teacher = Depends(get_current_teacher), db: Session = Depends(get_db)):
    """Exam with its questions in selection order."""
    return _exam_detail(_get_exam_or_404(db, exam_id, teacher))


@router.delete("/{exam_id}", status_code=204)
def delete_exam(exam_id: int, teacher: Teacher = Depends(get_current_teacher), db: Session = Depends(get_db)):
    """Delete an exam. Pool questions are kept."""
    exam = _get_exam_or_404(db, exam_id, teacher)
    db.delete(exam)
    db.commit()


@router.get("/{exam_id}/available", response_model=List[QuestionResponse])
def available_questions(
    exam_id: int,
    search: Optional[str] = Query(None, description="Case-insensitive match on question text"),
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Subject pool questions that are not yet part of this exam."""
    exam = _get_exam_or_404(db, exam_id, teacher)
    return _load_selection(db, exam).filter_available(search)


@router.post("/{exam_id}/questions", response_model=ExamDetail, status_code=201)
def select_question(
    exam_id: int,
    request: SelectQuestionRequest,
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Append a pool question to the end of the exam."""
    exam = _get_exam_or_404(db, exam_id, teacher)
    question = crud.get_question(db, request.question_id)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")

    entry = _load_selection(db, exam).select(question, marks=request.marks)

    position = max((eq.position for eq in exam.questions), default=0) + 1
    exam.questions.append(
        ExamQuestion(exam_id=exam.id, question_id=question.id, position=position, marks=entry.marks)
    )
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request selected the same question first
        db.rollback()
        raise SelectionError(f"Question {question.id} is already selected")
    db.refresh(exam)
    return _exam_detail(exam)


@router.delete("/{exam_id}/questions/{question_id}", response_model=ExamDetail)
def remove_question(
    exam_id: int,
    question_id: int,
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Take a question out of the exam. It stays in the pool and becomes available again."""
    exam = _get_exam_or_404(db, exam_id, teacher)
    selection = _load_selection(db, exam)
    if not selection.is_selected(question_id):
        raise HTTPException(status_code=404, detail="Question is not part of this exam")
    selection.remove(question_id)

    for eq in list(exam.questions):
        if eq.question_id == question_id:
            exam.questions.remove(eq)
    for position, eq in enumerate(exam.questions, start=1):
        eq.position = position

    db.commit()
    db.refresh(exam)
    return _exam_detail(exam)


@router.patch("/{exam_id}/questions/{question_id}", response_model=ExamDetail)
def update_marks(
    exam_id: int,
    question_id: int,
    request: UpdateMarksRequest,
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Change the marks a selected question carries in this exam (at least 1)."""
    exam = _get_exam_or_404(db, exam_id, teacher)
    selection = _load_selection(db, exam)
    if not selection.is_selected(question_id):
        raise HTTPException(status_code=404, detail="Question is not part of this exam")
    entry = selection.update_marks(question_id, request.marks)

    for eq in exam.questions:
        if eq.question_id == question_id:
            eq.marks = entry.marks

    db.commit()
    db.refresh(exam)
    return _exam_detail(exam)


@router.get("/{exam_id}/export")
def export_exam(
    exam_id: int,
    answers: bool = Query(False, description="Export the answer key instead of the question paper"),
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Download the exam as a PDF, questions in selection order."""
    exam = _get_exam_or_404(db, exam_id, teacher)
    if not exam.questions:
        raise HTTPException(status_code=400, detail="Exam has no questions")

    selection = _load_selection(db, exam)
    subject_name = exam.subject.name if exam.subject else ""
    buffer = export_exam_pdf(exam.title, subject_name, selection.selected, exam.duration_minutes, answers=answers)

    kind = "answer_key" if answers else "paper"
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="exam_{exam.id}_{kind}.pdf"'},
    )
