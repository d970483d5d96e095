"""
QuizGen API - Main Application
FastAPI application for teacher-facing MCQ generation and exam assembly.
Generates questions from a topic or a PDF, keeps them in a subject pool and
lets teachers select pool questions into exams.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quizgen import __version__, config
from quizgen.auth.security import hash_password
from quizgen.database.database import Base, SessionLocal, engine
from quizgen.database.models import Teacher
from quizgen.errors import PersistenceError, QuizGenError
from quizgen.routers import auth_teacher, documents, exams, questions, subjects

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)


def _seed_defaults():
    """Create the default admin teacher if no teacher exists yet."""
    db = SessionLocal()
    try:
        if db.query(Teacher).count() == 0:
            admin = Teacher(
                email=config.ADMIN_EMAIL,
                hashed_password=hash_password(config.ADMIN_PASSWORD),
                full_name="Admin",
                is_admin=True,
                is_active=True,
            )
            db.add(admin)
            db.commit()
            log.info("Default admin teacher created: %s", config.ADMIN_EMAIL)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables + seed defaults."""
    Base.metadata.create_all(bind=engine)
    _seed_defaults()
    yield


app = FastAPI(
    title="QuizGen API",
    description="MCQ generation from topics and documents, question pool and exam assembly",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Error handling ────────────────────────────────────────────────────────────

@app.exception_handler(QuizGenError)
async def quizgen_error_handler(request: Request, exc: QuizGenError):
    log.warning("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    content = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, PersistenceError):
        content.update(saved_ids=exc.saved_ids, failed=exc.failed, rolled_back=exc.rolled_back)
    return JSONResponse(status_code=exc.status_code, content=content)


# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(auth_teacher.router)       # /auth/teacher/*
app.include_router(subjects.router)           # /subjects/*
app.include_router(questions.router)          # /questions/*
app.include_router(documents.router)          # /documents/*
app.include_router(exams.router)              # /exams/*


@app.get("/")
def root():
    return {
        "name": "QuizGen API",
        "version": __version__,
        "endpoints": {
            "docs": "/docs",
            "auth": "/auth/teacher",
            "subjects": "/subjects",
            "questions": "/questions",
            "documents": "/documents",
            "exams": "/exams",
        },
    }


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "service": "quizgen-api",
        "completion_provider": config.COMPLETION_PROVIDER,
    }


def main():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)


if __name__ == "__main__":
    main()
