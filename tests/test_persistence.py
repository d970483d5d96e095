"""
Tests for quizgen.persistence against a SQLite database

Test Coverage:
- SqlQuestionStore: concurrent insertions, each in its own transaction
- save_questions(): empty input, atomic rollback through the real store
"""
import asyncio

import pytest

from quizgen.database.models import Question
from quizgen.errors import PersistenceError
from quizgen.generation.schemas import QuestionCreate
from quizgen.persistence import SqlQuestionStore, save_questions


def _request(subject, teacher, text="Which organelle makes ATP?", **overrides):
    data = dict(
        text=text,
        options=["Nucleus", "Mitochondrion", "Ribosome", "Vacuole"],
        correct_answer=1,
        difficulty="medium",
        subject_id=subject.id,
        teacher_id=teacher.id,
        marks=1,
        source="topic",
    )
    data.update(overrides)
    return QuestionCreate(**data)


class TestSqlQuestionStore:
    def test_save_when_three_requests_then_three_rows_in_request_order(self, session_factory, db, subject, teacher):
        store = SqlQuestionStore(session_factory)
        requests = [_request(subject, teacher, text=f"Q{i}") for i in range(3)]

        saved = asyncio.run(save_questions(store, requests))

        assert [q.text for q in saved] == ["Q0", "Q1", "Q2"]
        assert all(q.id for q in saved)
        assert db.query(Question).count() == 3
        row = db.query(Question).filter(Question.id == saved[0].id).first()
        assert row.options == ["Nucleus", "Mitochondrion", "Ribosome", "Vacuole"]
        assert row.teacher_id == teacher.id

    def test_save_when_no_requests_then_nothing_written(self, session_factory, db):
        assert asyncio.run(save_questions(SqlQuestionStore(session_factory), [])) == []
        assert db.query(Question).count() == 0

    def test_delete_when_id_unknown_then_no_error(self, session_factory):
        asyncio.run(SqlQuestionStore(session_factory).delete_question(12345))


class FlakySqlStore(SqlQuestionStore):
    """Real store that rejects questions whose text starts with 'BAD'."""

    def _insert(self, request):
        if request.text.startswith("BAD"):
            raise RuntimeError("constraint violated")
        return super()._insert(request)


def test_atomic_save_when_one_insert_fails_then_database_left_clean(session_factory, db, subject, teacher):
    store = FlakySqlStore(session_factory)
    requests = [_request(subject, teacher, text=t) for t in ("Q1", "BAD Q2", "Q3")]

    with pytest.raises(PersistenceError) as exc:
        asyncio.run(save_questions(store, requests, atomic=True))

    assert exc.value.rolled_back is True
    assert db.query(Question).count() == 0


def test_default_save_when_one_insert_fails_then_error_reports_failure(session_factory, db, subject, teacher):
    store = FlakySqlStore(session_factory)
    requests = [_request(subject, teacher, text=t) for t in ("BAD Q1", "Q2")]

    with pytest.raises(PersistenceError) as exc:
        asyncio.run(save_questions(store, requests))

    assert exc.value.rolled_back is False
    assert exc.value.failed == 1
