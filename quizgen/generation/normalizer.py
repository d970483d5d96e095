"""
Response normalization: raw completion text → validated GeneratedQuestion list.

The service is told to answer with a bare JSON array but sometimes wraps it in
prose. Parsing order:
  1. json.loads on the whole text
  2. json.loads on the greedy first-'[' … last-']' span
Anything else is a MalformedResponseError.
"""

import json
import logging
import re
from typing import Any, List

from quizgen.errors import InvalidQuestionError, MalformedResponseError
from quizgen.generation.answer_key import resolve_answer_index
from quizgen.generation.schemas import DIFFICULTIES, OPTION_COUNT, GeneratedQuestion

log = logging.getLogger(__name__)

_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")


# ─── JSON extraction ───────────────────────────────────────────────────────────

def parse_question_array(raw: str) -> List[Any]:
    """Parse the response text into a list, falling back to the bracketed span."""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        match = _ARRAY_SPAN.search(raw or "")
        if not match:
            log.warning("No JSON array in completion response: %.300s", raw)
            raise MalformedResponseError("Failed to parse generated questions")
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            log.warning("Bracketed span is not valid JSON: %.300s", match.group(0))
            raise MalformedResponseError("Failed to parse generated questions")

    if not isinstance(parsed, list):
        raise MalformedResponseError(
            f"Generated content is not an array of questions (got {type(parsed).__name__})"
        )
    return parsed


# ─── Item validation ───────────────────────────────────────────────────────────

def _normalize_item(item: Any, index: int) -> GeneratedQuestion:
    if not isinstance(item, dict):
        raise InvalidQuestionError(f"Question {index + 1} is not an object", index=index)

    text = item.get("text")
    if not isinstance(text, str) or not text.strip():
        raise InvalidQuestionError(f"Question {index + 1} has no text", index=index)

    options = item.get("options")
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        got = len(options) if isinstance(options, list) else type(options).__name__
        raise InvalidQuestionError(
            f"Question {index + 1} must have exactly {OPTION_COUNT} options (got {got})",
            index=index,
        )
    if not all(isinstance(opt, str) for opt in options):
        raise InvalidQuestionError(f"Question {index + 1} has non-text options", index=index)

    answer = resolve_answer_index(item.get("correct_answer"), options)

    difficulty = item.get("difficulty") or "medium"
    if not isinstance(difficulty, str) or difficulty.strip().lower() not in DIFFICULTIES:
        raise InvalidQuestionError(
            f"Question {index + 1} has unknown difficulty {difficulty!r}", index=index
        )

    return GeneratedQuestion(
        text=text.strip(),
        options=[opt.strip() for opt in options],
        correct_answer=answer,
        difficulty=difficulty.strip().lower(),
    )


def normalize_response(raw: str) -> List[GeneratedQuestion]:
    """
    Turn raw completion text into validated questions, in response order.

    Raises:
        MalformedResponseError: unparseable text, non-array JSON or an invalid item
        InvalidAnswerKeyError:  an item's correct_answer does not land on an option
    """
    items = parse_question_array(raw)
    return [_normalize_item(item, idx) for idx, item in enumerate(items)]
