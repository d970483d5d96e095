"""
Persistence adapter for generated questions.

The pipeline never touches the database directly: it receives a
PersistenceAdapter and a SessionContext and issues one insertion per question,
all concurrently (fan-out/fan-in).

save_questions(..., atomic=False)
    Fail-fast join. The first failed insertion is surfaced as PersistenceError;
    insertions that already committed stay in the pool.
save_questions(..., atomic=True)
    Waits for every insertion; on any failure the committed ones are deleted
    again (compensating action) before PersistenceError is raised.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import sessionmaker

from quizgen.database.models import Question
from quizgen.errors import PersistenceError
from quizgen.generation.schemas import QuestionCreate

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Who is acting: attached as teacher_id to every insertion."""
    teacher_id: int


class PersistedQuestion(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    options: List[str]
    correct_answer: int
    difficulty: str
    subject_id: int
    teacher_id: Optional[int] = None
    marks: int = 1
    source: str = "topic"
    created_at: Optional[datetime] = None


class PersistenceAdapter:
    """Interface for the question store."""

    async def add_question(self, request: QuestionCreate) -> PersistedQuestion:
        raise NotImplementedError

    async def delete_question(self, question_id: int) -> None:
        raise NotImplementedError


class SqlQuestionStore(PersistenceAdapter):
    """
    SQLAlchemy-backed store. Every call runs in a worker thread with its own
    session, so each insertion is its own transaction.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _insert(self, request: QuestionCreate) -> PersistedQuestion:
        db = self.session_factory()
        try:
            q = Question(**request.model_dump())
            db.add(q)
            db.commit()
            db.refresh(q)
            return PersistedQuestion.model_validate(q)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _delete(self, question_id: int) -> None:
        db = self.session_factory()
        try:
            q = db.query(Question).filter(Question.id == question_id).first()
            if q is not None:
                db.delete(q)
                db.commit()
        finally:
            db.close()

    async def add_question(self, request: QuestionCreate) -> PersistedQuestion:
        return await asyncio.to_thread(self._insert, request)

    async def delete_question(self, question_id: int) -> None:
        await asyncio.to_thread(self._delete, question_id)


# ─── Fan-out ───────────────────────────────────────────────────────────────────

def _log_late_failure(task: asyncio.Future) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        log.warning("Question insertion failed after the batch was reported: %s", error)


async def _save_fail_fast(store: PersistenceAdapter, requests: List[QuestionCreate]) -> List[PersistedQuestion]:
    saved: List[PersistedQuestion] = []

    async def _one(request: QuestionCreate) -> PersistedQuestion:
        record = await store.add_question(request)
        saved.append(record)
        return record

    tasks = [asyncio.ensure_future(_one(r)) for r in requests]
    try:
        return list(await asyncio.gather(*tasks))
    except Exception as e:
        failed = sum(1 for t in tasks if t.done() and not t.cancelled() and t.exception() is not None)
        # insertions still running keep going; their errors are logged, not raised
        for t in tasks:
            if not t.done():
                t.add_done_callback(_log_late_failure)
        log.warning("Question insertion failed after %s of %s saved: %s", len(saved), len(requests), e)
        raise PersistenceError(
            f"Failed to save generated questions: {e}",
            saved_ids=[q.id for q in saved],
            failed=failed,
        ) from e


async def _save_compensating(store: PersistenceAdapter, requests: List[QuestionCreate]) -> List[PersistedQuestion]:
    results = await asyncio.gather(*(store.add_question(r) for r in requests), return_exceptions=True)
    saved = [r for r in results if not isinstance(r, BaseException)]
    failures = [r for r in results if isinstance(r, BaseException)]
    if not failures:
        return saved

    log.warning("%s of %s insertions failed; rolling back %s", len(failures), len(requests), len(saved))
    undo = await asyncio.gather(*(store.delete_question(q.id) for q in saved), return_exceptions=True)
    left_behind = [q.id for q, res in zip(saved, undo) if isinstance(res, BaseException)]
    if left_behind:
        log.error("Rollback left questions %s in the pool", left_behind)

    raise PersistenceError(
        f"Failed to save generated questions: {failures[0]}",
        saved_ids=left_behind,
        failed=len(failures),
        rolled_back=not left_behind,
    ) from failures[0]


async def save_questions(
    store: PersistenceAdapter,
    requests: List[QuestionCreate],
    atomic: bool = False,
) -> List[PersistedQuestion]:
    """Insert all requests concurrently; results come back in request order."""
    if not requests:
        return []
    if atomic:
        return await _save_compensating(store, requests)
    return await _save_fail_fast(store, requests)
