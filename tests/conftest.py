import asyncio
import os
from io import BytesIO

# Must be set before quizgen is imported: the module-level engine is built from it.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from sqlalchemy.orm import sessionmaker

from quizgen.api import app
from quizgen.auth.security import hash_password
from quizgen.database import models  # noqa: F401  (registers tables on Base)
from quizgen.database.database import Base, get_db, make_engine
from quizgen.database.models import Subject, Teacher
from quizgen.generation.completion_client import CompletionClient, get_completion_client
from quizgen.persistence import PersistedQuestion, PersistenceAdapter, SqlQuestionStore
from quizgen.routers.auth_teacher import get_current_teacher
from quizgen.routers.questions import get_question_store


# ─── Fakes ─────────────────────────────────────────────────────────────────────

class FakeCompletionClient(CompletionClient):
    """Returns a canned response (or raises) and records every prompt."""

    def __init__(self, response: str = "[]", error: Exception = None):
        self.response = response
        self.error = error
        self.prompts = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


class FakeQuestionStore(PersistenceAdapter):
    """
    In-memory question store.

    Insertion n (1-based, in call order) completes after n * step seconds, so
    completion order is deterministic. Insertions listed in fail_on raise.
    """

    def __init__(self, fail_on=(), step: float = 0.01):
        self.fail_on = set(fail_on)
        self.step = step
        self.records = {}
        self.deleted = []
        self.calls = 0

    async def add_question(self, request):
        self.calls += 1
        n = self.calls
        await asyncio.sleep(n * self.step)
        if n in self.fail_on:
            raise RuntimeError(f"insert {n} rejected")
        record = PersistedQuestion(id=n, **request.model_dump())
        self.records[n] = record
        return record

    async def delete_question(self, question_id):
        self.deleted.append(question_id)
        self.records.pop(question_id, None)


def make_question_json(n: int = 3, answer=1, difficulty="medium") -> list:
    return [
        {
            "text": f"Question {i + 1} about chlorophyll?",
            "options": ["Water", "Light", "Oxygen", "Soil"],
            "correct_answer": answer,
            "difficulty": difficulty,
        }
        for i in range(n)
    ]


def make_pdf(pages) -> bytes:
    """One page per entry; each entry is a list of text lines."""
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    for lines in pages:
        y = 780
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buffer.getvalue()


# ─── Database ──────────────────────────────────────────────────────────────────

@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'quizgen.db'}")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def teacher(db):
    t = Teacher(
        email="teacher@school.test",
        hashed_password=hash_password("secret"),
        full_name="Test Teacher",
    )
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@pytest.fixture
def subject(db):
    s = Subject(name="Biology", description="Plants and cells")
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


# ─── API ───────────────────────────────────────────────────────────────────────

@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def client(session_factory, teacher, fake_client):
    """
    TestClient wired to the temp database, the fake completion client and a
    SqlQuestionStore on the same database. Auth resolves to `teacher`.
    """
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def _current_teacher():
        session = session_factory()
        try:
            return session.query(Teacher).filter(Teacher.id == teacher.id).first()
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_teacher] = _current_teacher
    app.dependency_overrides[get_completion_client] = lambda: fake_client
    app.dependency_overrides[get_question_store] = lambda: SqlQuestionStore(session_factory)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(session_factory):
    """TestClient with the real auth dependency (only the database is swapped)."""
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
