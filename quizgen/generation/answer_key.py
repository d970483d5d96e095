"""
Answer-key mapping: letter (A-D) or index (0-3) → zero-based option index.

Mapping is positional: "C" is whatever option sits at index 2.
"""

from typing import Any, Sequence

from quizgen.errors import InvalidAnswerKeyError


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


def resolve_answer_index(correct_answer: Any, options: Sequence[Any]) -> int:
    """
    Resolve an answer designation against `options`.

    Integers (and digit strings) are range-checked and used directly.
    A single letter is matched against each option's computed letter.
    Anything that does not land on an option raises InvalidAnswerKeyError.
    """
    if isinstance(correct_answer, bool):
        raise InvalidAnswerKeyError(f"Answer key must be an index or a letter, got {correct_answer!r}")

    if isinstance(correct_answer, float) and correct_answer.is_integer():
        correct_answer = int(correct_answer)

    if isinstance(correct_answer, str):
        designation = correct_answer.strip()
        if designation.isdecimal():
            correct_answer = int(designation)
        elif len(designation) == 1 and designation.isalpha():
            letter = designation.upper()
            for idx in range(len(options)):
                if option_letter(idx) == letter:
                    return idx
            raise InvalidAnswerKeyError(
                f"Answer letter {letter!r} does not match any of {len(options)} options"
            )
        else:
            raise InvalidAnswerKeyError(f"Unrecognised answer designation: {correct_answer!r}")

    if isinstance(correct_answer, int):
        if 0 <= correct_answer < len(options):
            return correct_answer
        raise InvalidAnswerKeyError(
            f"Answer index {correct_answer} is out of range for {len(options)} options"
        )

    raise InvalidAnswerKeyError(f"Answer key must be an index or a letter, got {correct_answer!r}")
