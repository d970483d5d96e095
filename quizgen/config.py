"""
Runtime configuration, read from the environment (.env supported).

Credentials are looked up at call time through the helpers below so that a
missing key surfaces as a ConfigurationError on the request that needs it.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ─── Completion service ───────────────────────────────────────────────────────

COMPLETION_PROVIDER = os.getenv("QUIZGEN_COMPLETION_PROVIDER", "gemini").lower()
COMPLETION_TIMEOUT = float(os.getenv("QUIZGEN_COMPLETION_TIMEOUT", "60"))

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")

GPT_MODEL = os.getenv("GPT_MODEL", "gpt-4o-mini")

# ─── Generation ───────────────────────────────────────────────────────────────

MAX_SOURCE_CHARS = int(os.getenv("QUIZGEN_MAX_SOURCE_CHARS", "60000"))
DEFAULT_MARKS = int(os.getenv("QUIZGEN_DEFAULT_MARKS", "1"))
DEFAULT_QUESTION_COUNT = 5
MAX_QUESTION_COUNT = 20

# ─── Documents ────────────────────────────────────────────────────────────────

MAX_DOCUMENT_BYTES = 2 * 1024 * 1024  # 2 MiB
PDF_MIME_TYPE = "application/pdf"

# ─── Database ─────────────────────────────────────────────────────────────────

POSTGRES_USER = os.getenv("POSTGRES_USER", "quizgen")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "quizgen")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_DB = os.getenv("POSTGRES_DB", "quizgen")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# ─── Auth ─────────────────────────────────────────────────────────────────────

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "quizgen-secret-key-change-in-production")
ADMIN_EMAIL = os.getenv("QUIZGEN_ADMIN_EMAIL", "admin@org.com")
ADMIN_PASSWORD = os.getenv("QUIZGEN_ADMIN_PASSWORD", "admin")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def gemini_api_key():
    return os.getenv("GEMINI_API_KEY") or None


def openai_api_key():
    return os.getenv("OPENAI_API_KEY") or None
