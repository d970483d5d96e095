"""
Error taxonomy for generation, extraction, persistence and exam assembly.

Every error carries the HTTP status the API boundary reports it with
(see quizgen.api). Nothing here is retried automatically.
"""

from typing import List, Optional


class QuizGenError(Exception):
    """Base class for all quizgen domain errors."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


# ─── Completion service ───────────────────────────────────────────────────────

class ConfigurationError(QuizGenError):
    """A required setting (e.g. the completion API key) is missing."""
    status_code = 500


class ServiceError(QuizGenError):
    """The completion service answered with a non-success status or was unreachable."""
    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class EmptyResponseError(QuizGenError):
    """Well-formed response without any candidate content."""
    status_code = 502


class MalformedResponseError(QuizGenError):
    """Response text is not a JSON array of questions."""
    status_code = 502


class InvalidQuestionError(MalformedResponseError):
    """One generated item does not have the required question shape."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class InvalidAnswerKeyError(QuizGenError):
    """Answer designation does not resolve to one of the options."""
    status_code = 502


class PromptTooLargeError(QuizGenError):
    """Source text exceeds the prompt budget."""
    status_code = 413


# ─── Documents ────────────────────────────────────────────────────────────────

class FileValidationError(QuizGenError):
    """Uploaded document has the wrong type or is too large."""
    status_code = 400

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(QuizGenError):
    """Text could not be extracted from the document."""
    status_code = 422


# ─── Persistence ──────────────────────────────────────────────────────────────

class PersistenceError(QuizGenError):
    """
    One or more question insertions failed.

    saved_ids: ids committed before the failure was observed (they stay in
    the pool unless rolled_back is True).
    """
    status_code = 500

    def __init__(
        self,
        message: str,
        saved_ids: Optional[List[int]] = None,
        failed: int = 0,
        rolled_back: bool = False,
    ):
        super().__init__(message)
        self.saved_ids = list(saved_ids or [])
        self.failed = failed
        self.rolled_back = rolled_back


# ─── Exam assembly ────────────────────────────────────────────────────────────

class SelectionError(QuizGenError):
    """Select/remove transition that does not apply to the current selection."""
    status_code = 409


class InvalidMarksError(QuizGenError):
    status_code = 422
