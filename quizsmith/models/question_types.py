"""Question type registry and structural matching of raw model output."""

import math
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel


class QuestionVariant(str, Enum):
    """The closed set of question shapes a model may return."""

    MATCHING = "matching"
    SELECT_ALL = "select_all"
    FILL_BLANK = "fill_blank"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_LONG = "short_long"


class QuestionTypeEntry(BaseModel):
    """A registered question shape with its prompt text and type guard."""

    variant: QuestionVariant
    description: str
    schema_shape: str
    type_guard: Callable[[Any], bool]

    model_config = {"frozen": True}


def _is_record(value: Any) -> bool:
    return isinstance(value, dict)


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a JSON number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(_is_string(v) for v in value)


def _is_number_list(value: Any) -> bool:
    return isinstance(value, list) and all(_is_number(v) for v in value)


def is_matching_question(value: Any) -> bool:
    if not _is_record(value) or not _is_string(value.get("prompt")):
        return False
    pairs = value.get("pairs")
    if not isinstance(pairs, list) or not pairs:
        return False
    return all(
        _is_record(pair) and _is_string(pair.get("left")) and _is_string(pair.get("right"))
        for pair in pairs
    )


def is_select_all_question(value: Any) -> bool:
    if not _is_record(value):
        return False
    return (
        _is_string(value.get("q"))
        and _is_string_list(value.get("choices"))
        and _is_number_list(value.get("correct_indexes"))
        and len(value["correct_indexes"]) > 0
    )


def is_fill_blank_question(value: Any) -> bool:
    if not _is_record(value):
        return False
    return _is_string(value.get("q")) and _is_string(value.get("answer"))


def is_multiple_choice_question(value: Any) -> bool:
    if not _is_record(value):
        return False
    return (
        _is_string(value.get("q"))
        and _is_string_list(value.get("choices"))
        and _is_number(value.get("answer_index"))
    )


def is_true_false_question(value: Any) -> bool:
    if not _is_record(value):
        return False
    return _is_string(value.get("q")) and _is_boolean(value.get("answer"))


def is_short_long_question(value: Any) -> bool:
    if not _is_record(value):
        return False
    return (
        _is_string(value.get("q"))
        and _is_string(value.get("ideal_answer"))
        and _is_string(value.get("grading_criteria"))
    )


# Order matters: match_question_type returns the first entry that fits.
QUESTION_TYPE_REGISTRY: list[QuestionTypeEntry] = [
    QuestionTypeEntry(
        variant=QuestionVariant.MATCHING,
        description="Matching (pair terms with definitions)",
        schema_shape='{ "prompt": string, "pairs": [ { "left": string, "right": string } ], "explanation": string }',
        type_guard=is_matching_question,
    ),
    QuestionTypeEntry(
        variant=QuestionVariant.SELECT_ALL,
        description="Select All (multiple correct choices)",
        schema_shape='{ "q": string, "choices": string[], "correct_indexes": number[], "explanation": string }',
        type_guard=is_select_all_question,
    ),
    QuestionTypeEntry(
        variant=QuestionVariant.FILL_BLANK,
        description="Fill in the Blank (short text answer)",
        schema_shape='{ "q": string, "answer": string, "explanation": string }',
        type_guard=is_fill_blank_question,
    ),
    QuestionTypeEntry(
        variant=QuestionVariant.MULTIPLE_CHOICE,
        description="Multiple Choice (single correct choice)",
        schema_shape='{ "q": string, "choices": string[], "answer_index": number, "explanation": string }',
        type_guard=is_multiple_choice_question,
    ),
    QuestionTypeEntry(
        variant=QuestionVariant.TRUE_FALSE,
        description="True/False",
        schema_shape='{ "q": string, "answer": boolean, "explanation": string }',
        type_guard=is_true_false_question,
    ),
    QuestionTypeEntry(
        variant=QuestionVariant.SHORT_LONG,
        description="Short/Long Answer (graded response)",
        schema_shape='{ "q": string, "ideal_answer": string, "grading_criteria": string, "explanation": string }',
        type_guard=is_short_long_question,
    ),
]

DEFAULT_VARIANT = QuestionVariant.MULTIPLE_CHOICE


def register_question_type(
    entry: QuestionTypeEntry,
    registry: list[QuestionTypeEntry] | None = None,
) -> None:
    """
    Append a question type to a registry.

    New entries are evaluated after the existing ones, so they never
    shadow an earlier match.

    Args:
        entry: Entry to add
        registry: Registry to extend (defaults to the global one)
    """
    target = QUESTION_TYPE_REGISTRY if registry is None else registry
    if any(existing.variant == entry.variant for existing in target):
        raise ValueError(f"Question type already registered: {entry.variant.value}")
    target.append(entry)


def get_question_type(
    variant: QuestionVariant,
    registry: list[QuestionTypeEntry] | None = None,
) -> QuestionTypeEntry | None:
    """Look up the registry entry for a variant."""
    entries = QUESTION_TYPE_REGISTRY if registry is None else registry
    return next((entry for entry in entries if entry.variant == variant), None)


def match_question_type(
    question: Any,
    registry: list[QuestionTypeEntry] | None = None,
) -> QuestionTypeEntry | None:
    """
    Find the first registered shape a raw question fits.

    Args:
        question: Decoded JSON value for a single question
        registry: Registry to evaluate (defaults to the global one)

    Returns:
        The matching entry, or None when no shape fits
    """
    entries = QUESTION_TYPE_REGISTRY if registry is None else registry
    for entry in entries:
        if entry.type_guard(question):
            return entry
    return None
