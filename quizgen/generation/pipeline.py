"""
Generation pipeline: source text → prompt → completion → questions → question pool.

All collaborators are passed in (completion client, question store, session),
so the same code serves the API and the tests.
"""

import logging
from typing import List, Optional

from quizgen import config
from quizgen.errors import EmptyResponseError
from quizgen.generation.completion_client import CompletionClient
from quizgen.generation.normalizer import normalize_response
from quizgen.generation.prompts import SOURCE_DOCUMENT, SOURCE_TOPIC, build_prompt
from quizgen.generation.schemas import GeneratedQuestion, QuestionCreate
from quizgen.persistence import PersistedQuestion, PersistenceAdapter, SessionContext, save_questions

log = logging.getLogger(__name__)


async def generate_questions(
    client: CompletionClient,
    source_text: str,
    count: int = config.DEFAULT_QUESTION_COUNT,
    source_kind: str = SOURCE_TOPIC,
) -> List[GeneratedQuestion]:
    """Ask the completion service for `count` questions and normalize the answer."""
    prompt = build_prompt(source_text, count, source_kind)
    raw = await client.complete(prompt)
    questions = normalize_response(raw)

    if not questions:
        raise EmptyResponseError("No questions generated")
    if len(questions) != count:
        log.warning("Requested %s questions, service returned %s", count, len(questions))
    return questions


async def generate_and_save(
    client: CompletionClient,
    store: PersistenceAdapter,
    session: SessionContext,
    subject_id: int,
    source_text: str,
    count: int = config.DEFAULT_QUESTION_COUNT,
    source_kind: str = SOURCE_TOPIC,
    marks: Optional[int] = None,
    atomic: bool = False,
) -> List[PersistedQuestion]:
    """
    Generate questions and persist every one of them with subject/teacher/marks.

    Nothing is persisted unless generation and normalization fully succeed.
    """
    questions = await generate_questions(client, source_text, count, source_kind)
    requests = [
        QuestionCreate.from_generated(
            q,
            subject_id=subject_id,
            teacher_id=session.teacher_id,
            marks=config.DEFAULT_MARKS if marks is None else marks,
            source=source_kind,
        )
        for q in questions
    ]
    saved = await save_questions(store, requests, atomic=atomic)
    log.info("Saved %s %s-generated questions for subject %s", len(saved), source_kind, subject_id)
    return saved


async def generate_from_topic(client, store, session, subject_id, topic, count=config.DEFAULT_QUESTION_COUNT,
                              marks=None, atomic=False):
    return await generate_and_save(
        client, store, session, subject_id, topic, count, source_kind=SOURCE_TOPIC, marks=marks, atomic=atomic
    )


async def generate_from_document(client, store, session, subject_id, document_text, count=config.DEFAULT_QUESTION_COUNT,
                                 marks=None, atomic=False):
    return await generate_and_save(
        client, store, session, subject_id, document_text, count, source_kind=SOURCE_DOCUMENT, marks=marks, atomic=atomic
    )
