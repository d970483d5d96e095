"""
Exam question selection.

Two disjoint sets derived from one pool:
  selected  : ordered by selection time (exam layout order), with per-exam marks
  available : pool minus selected, always recomputed, never stored

Membership is by question id only. Pool items only need .id, .text and
(optionally) .marks, so ORM rows and pydantic records both work.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from quizgen.errors import InvalidMarksError, SelectionError


@dataclass
class SelectedQuestion:
    question: Any
    marks: int = 1

    @property
    def id(self):
        return self.question.id


class QuestionSelection:
    def __init__(self, pool: Iterable[Any], selected: Iterable[SelectedQuestion] = ()):
        self.pool = list(pool)
        self._selected: List[SelectedQuestion] = []
        for entry in selected:
            if self.is_selected(entry.id):
                raise SelectionError(f"Question {entry.id} is selected twice")
            self._selected.append(entry)

    # ─── Views ────────────────────────────────────────────────────────────────

    @property
    def selected(self) -> List[SelectedQuestion]:
        return list(self._selected)

    @property
    def available(self) -> list:
        selected_ids = {entry.id for entry in self._selected}
        return [q for q in self.pool if q.id not in selected_ids]

    @property
    def total_marks(self) -> int:
        return sum(entry.marks for entry in self._selected)

    def is_selected(self, question_id) -> bool:
        return any(entry.id == question_id for entry in self._selected)

    def filter_available(self, query: Optional[str]) -> list:
        """Case-insensitive substring match on question text; blank query matches all."""
        needle = (query or "").lower()
        return [q for q in self.available if needle in (q.text or "").lower()]

    # ─── Transitions ──────────────────────────────────────────────────────────

    def _find(self, question_id) -> SelectedQuestion:
        for entry in self._selected:
            if entry.id == question_id:
                return entry
        raise SelectionError(f"Question {question_id} is not selected")

    def select(self, question: Any, marks: Optional[int] = None) -> SelectedQuestion:
        """Move an available question to the end of the selection."""
        if self.is_selected(question.id):
            raise SelectionError(f"Question {question.id} is already selected")
        if not any(q.id == question.id for q in self.pool):
            raise SelectionError(f"Question {question.id} is not in the question pool")

        if marks is None:
            marks = getattr(question, "marks", None) or 1
        _check_marks(marks)
        entry = SelectedQuestion(question=question, marks=marks)
        self._selected.append(entry)
        return entry

    def remove(self, question_id) -> SelectedQuestion:
        """Drop a question from the selection; it becomes available again."""
        entry = self._find(question_id)
        self._selected.remove(entry)
        return entry

    def update_marks(self, question_id, marks: int) -> SelectedQuestion:
        _check_marks(marks)
        entry = self._find(question_id)
        entry.marks = marks
        return entry


def _check_marks(marks) -> None:
    if isinstance(marks, bool) or not isinstance(marks, int) or marks < 1:
        raise InvalidMarksError(f"Marks must be a whole number of at least 1, got {marks!r}")
