"""
Question pool router.
Teachers generate MCQs from a topic or a PDF document, or add them manually.
Pool questions are tagged with subject, difficulty and default marks.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from quizgen import config
from quizgen.database import crud
from quizgen.database.database import SessionLocal, get_db
from quizgen.database.models import Question, Teacher
from quizgen.database.schemas import QuestionResponse
from quizgen.errors import InvalidAnswerKeyError
from quizgen.generation import pipeline
from quizgen.generation.answer_key import resolve_answer_index
from quizgen.generation.completion_client import CompletionClient, get_completion_client
from quizgen.generation.schemas import Difficulty, OPTION_COUNT
from quizgen.ingestion.pdf_extractor import extract_document, read_upload
from quizgen.persistence import PersistenceAdapter, SessionContext, SqlQuestionStore
from quizgen.routers.auth_teacher import get_current_teacher, get_session_context

router = APIRouter(prefix="/questions", tags=["questions"])


# ─── Schemas ───────────────────────────────────────────────────────────────────

class TopicGenerateRequest(BaseModel):
    subject_id: int
    topic: str
    count: int = Field(config.DEFAULT_QUESTION_COUNT, ge=1, le=config.MAX_QUESTION_COUNT)
    marks: Optional[int] = Field(None, ge=1, description="Marks for every generated question (default 1)")
    atomic: bool = Field(False, description="Roll back saved questions if any insertion fails")

class QuestionCreateRequest(BaseModel):
    subject_id: int
    text: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answer: Union[int, str] = Field(..., description="Index 0-3 or letter A-D")
    difficulty: Difficulty = "medium"
    marks: int = Field(1, ge=1)

class GenerateResponse(BaseModel):
    generated: int
    questions: List[QuestionResponse]


# ─── Dependencies ──────────────────────────────────────────────────────────────

def get_question_store() -> PersistenceAdapter:
    return SqlQuestionStore(SessionLocal)


def _require_subject(db: Session, subject_id: int) -> None:
    if not crud.get_subject(db, subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")


# ─── Pool routes ───────────────────────────────────────────────────────────────

@router.get("/", response_model=List[QuestionResponse])
def list_questions(
    subject_id: Optional[int] = None,
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """List pool questions with optional filters."""
    return crud.list_questions(db, subject_id=subject_id, difficulty=difficulty, search=search, skip=skip, limit=limit)


@router.get("/{question_id}", response_model=QuestionResponse)
def get_question(question_id: int, teacher: Teacher = Depends(get_current_teacher), db: Session = Depends(get_db)):
    q = crud.get_question(db, question_id)
    if not q:
        raise HTTPException(status_code=404, detail="Question not found")
    return q


@router.post("/", response_model=QuestionResponse, status_code=201)
def create_question(
    request: QuestionCreateRequest,
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """Manually add a question to the pool."""
    _require_subject(db, request.subject_id)
    try:
        answer = resolve_answer_index(request.correct_answer, request.options)
    except InvalidAnswerKeyError as e:
        raise HTTPException(status_code=400, detail=e.message)

    q = Question(
        subject_id=request.subject_id,
        teacher_id=teacher.id,
        text=request.text.strip(),
        options=request.options,
        correct_answer=answer,
        difficulty=request.difficulty,
        marks=request.marks,
        source="manual",
    )
    db.add(q)
    db.commit()
    db.refresh(q)
    return q


@router.delete("/{question_id}", status_code=204)
def delete_question(question_id: int, teacher: Teacher = Depends(get_current_teacher), db: Session = Depends(get_db)):
    """Delete a pool question (also drops it from any exam)."""
    if not crud.delete_question(db, question_id):
        raise HTTPException(status_code=404, detail="Question not found")


# ─── Generation routes ─────────────────────────────────────────────────────────

@router.post("/generate/topic", response_model=GenerateResponse, status_code=201)
async def generate_from_topic(
    request: TopicGenerateRequest,
    session: SessionContext = Depends(get_session_context),
    client: CompletionClient = Depends(get_completion_client),
    store: PersistenceAdapter = Depends(get_question_store),
    db: Session = Depends(get_db),
):
    """Generate MCQs for a topic and save every one of them to the pool."""
    if not request.topic.strip():
        raise HTTPException(status_code=400, detail="Please enter a topic")
    _require_subject(db, request.subject_id)

    saved = await pipeline.generate_from_topic(
        client, store, session, request.subject_id, request.topic.strip(), request.count,
        marks=request.marks, atomic=request.atomic,
    )
    return GenerateResponse(generated=len(saved), questions=[QuestionResponse.model_validate(q.model_dump()) for q in saved])


@router.post("/generate/document", response_model=GenerateResponse, status_code=201)
async def generate_from_document(
    file: UploadFile = File(...),
    subject_id: int = Form(...),
    count: int = Form(config.DEFAULT_QUESTION_COUNT, ge=1, le=config.MAX_QUESTION_COUNT),
    marks: Optional[int] = Form(None, ge=1),
    atomic: bool = Form(False),
    session: SessionContext = Depends(get_session_context),
    client: CompletionClient = Depends(get_completion_client),
    store: PersistenceAdapter = Depends(get_question_store),
    db: Session = Depends(get_db),
):
    """Extract text from an uploaded PDF (max 2MB), generate MCQs from it and save them."""
    content = await read_upload(file)
    _require_subject(db, subject_id)

    document = extract_document(content)
    saved = await pipeline.generate_from_document(
        client, store, session, subject_id, document.text, count, marks=marks, atomic=atomic
    )
    return GenerateResponse(generated=len(saved), questions=[QuestionResponse.model_validate(q.model_dump()) for q in saved])
