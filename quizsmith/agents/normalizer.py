"""Question Normalizer - Turns a raw model question into a QuizQuestion."""

import math
import re
from typing import Any

from quizsmith.errors import SchemaMismatchError
from quizsmith.models.question_types import QuestionVariant, match_question_type
from quizsmith.models.quiz import QuizQuestion

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def coerce_index(value: Any) -> int | None:
    """
    Coerce a loosely typed answer index to an integer.

    Numbers are truncated toward zero and strings are read by their leading
    integer, so "2", "2.0" and 2.9 all give 2.

    Returns:
        The integer, or None when value holds no finite number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT_RE.match(str(value)) if value is not None else None
    return int(match.group(1)) if match else None


def normalize_question(raw: Any, choices_count: int) -> QuizQuestion:
    """
    Validate a raw question and convert it to a QuizQuestion.

    Only multiple choice questions can be normalized; other shapes are
    recognized but rejected as unsupported.

    Args:
        raw: Decoded JSON value for one question
        choices_count: Exact number of choices every question must have

    Returns:
        Normalized question with a fresh id and no user answer

    Raises:
        SchemaMismatchError: If the question cannot be used
    """
    matched = match_question_type(raw)
    if matched is None:
        raise SchemaMismatchError(
            "Bad model output: question did not match any expected schema."
        )
    if matched.variant != QuestionVariant.MULTIPLE_CHOICE:
        raise SchemaMismatchError(
            f"Bad model output: unsupported question type ({matched.description})."
        )

    text = str(raw.get("q") or "").strip()
    choices = [str(c).strip() for c in raw.get("choices") or []]
    choices = [c for c in choices if c]

    if not text:
        raise SchemaMismatchError("Bad model output: missing question text.")
    if len(choices) != choices_count:
        raise SchemaMismatchError(
            f"Bad model output: choices must be exactly {choices_count}."
        )

    answer_index = coerce_index(raw.get("answer_index"))
    if answer_index is None:
        answer_index = 0
    answer_index = max(0, min(len(choices) - 1, answer_index))

    return QuizQuestion(
        text=text,
        choices=choices,
        answer_index=answer_index,
        explanation=str(raw.get("explanation") or "").strip(),
        user_answer_index=None,
    )


def normalize_questions(raw_questions: list[Any], choices_count: int) -> list[QuizQuestion]:
    """
    Normalize a whole batch, failing on the first bad question.

    Args:
        raw_questions: Raw questions from the model
        choices_count: Exact number of choices every question must have

    Returns:
        Normalized questions in the original order
    """
    return [normalize_question(q, choices_count) for q in raw_questions]
