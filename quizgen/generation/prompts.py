"""
Prompt builder for MCQ generation.

Two templates, one per source kind:
  - topic    → correct_answer as an index (0-3)
  - document → correct_answer as a letter (A-D)

Both embed the source text verbatim and ask for a bare JSON array.
"""

import logging

from quizgen import config
from quizgen.errors import PromptTooLargeError

log = logging.getLogger(__name__)

SOURCE_TOPIC = "topic"
SOURCE_DOCUMENT = "document"


# ─── Templates ─────────────────────────────────────────────────────────────────

TOPIC_PROMPT = """Generate {count} multiple choice questions from the following topic.
Format each question as a JSON object with properties:
- text: the question text
- options: array of 4 possible answers
- correct_answer: index of correct answer (0-3)
- difficulty: "easy", "medium", or "hard"

Topic: {source}

Return ONLY a JSON array of questions with no additional text.
Example format:
[
  {{
    "text": "What is the capital of France?",
    "options": ["London", "Paris", "Berlin", "Madrid"],
    "correct_answer": 1,
    "difficulty": "easy"
  }}
]"""


DOCUMENT_PROMPT = """Generate {count} multiple-choice questions (MCQs) based on the following text.
Each question should have 4 options (A, B, C, D) and specify the correct answer as the option letter.
Return ONLY a JSON array with no additional text, in this format:
[
  {{
    "text": "Question text",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correct_answer": "A",
    "difficulty": "medium"
  }}
]
difficulty must be one of "easy", "medium" or "hard".

Text: {source}"""


_TEMPLATES = {
    SOURCE_TOPIC: TOPIC_PROMPT,
    SOURCE_DOCUMENT: DOCUMENT_PROMPT,
}


def build_prompt(source_text: str, count: int, source_kind: str = SOURCE_TOPIC, max_chars: int = None) -> str:
    """
    Build the generation instruction for `count` questions.

    Args:
        source_text: Topic string or extracted document text (embedded verbatim)
        count:       Number of questions to ask for (range is enforced by callers)
        source_kind: "topic" or "document"
        max_chars:   Source text budget; defaults to QUIZGEN_MAX_SOURCE_CHARS

    Raises:
        PromptTooLargeError: source text is longer than the budget
        ValueError:          unknown source kind
    """
    template = _TEMPLATES.get(source_kind)
    if template is None:
        raise ValueError(f"Unknown source kind: {source_kind}")

    budget = config.MAX_SOURCE_CHARS if max_chars is None else max_chars
    if len(source_text) > budget:
        raise PromptTooLargeError(
            f"Source text is {len(source_text)} characters; the limit is {budget}"
        )

    prompt = template.format(count=count, source=source_text)
    log.info("Built %s prompt: count=%s source_chars=%s", source_kind, count, len(source_text))
    return prompt
