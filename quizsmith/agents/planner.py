"""Plan Builder - Decides how many questions of each type to request."""

import logging
from typing import Any

from quizsmith.errors import PlanEmptyError
from quizsmith.models.question_types import (
    DEFAULT_VARIANT,
    QUESTION_TYPE_REGISTRY,
    QuestionTypeEntry,
)
from quizsmith.models.quiz import PlanEntry, QuestionTypeSettings

logger = logging.getLogger(__name__)


def clamp_int(value: Any, minimum: int, maximum: int, fallback: int) -> int:
    """
    Parse a loosely typed integer and clamp it into a range.

    Args:
        value: Value to parse (int, float or numeric string)
        minimum: Lower bound
        maximum: Upper bound
        fallback: Returned when value is not a number

    Returns:
        Clamped integer
    """
    try:
        parsed = int(str(value).strip())
    except ValueError:
        try:
            parsed = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return fallback
    return max(minimum, min(maximum, parsed))


def build_question_type_plan(
    settings: QuestionTypeSettings,
    total_count: int,
    registry: list[QuestionTypeEntry] | None = None,
) -> list[PlanEntry]:
    """
    Build the per-type question breakdown for a generation request.

    With several types enabled the configured quantities are passed through
    as-is (clamped to the total), so the plan total can differ from
    total_count.

    Args:
        settings: Question type settings
        total_count: Number of questions the caller asked for
        registry: Registry to plan over (defaults to the global one)

    Returns:
        Plan entries in registry order
    """
    entries = QUESTION_TYPE_REGISTRY if registry is None else registry
    enabled = [e for e in entries if settings.for_variant(e.variant).enabled]

    if not enabled:
        fallback = next((e for e in entries if e.variant == DEFAULT_VARIANT), None)
        if fallback is None:
            raise PlanEmptyError(
                "Question plan is empty. Enable at least one question type."
            )
        return [PlanEntry(entry=fallback, quantity=total_count)]

    if len(enabled) == 1:
        return [PlanEntry(entry=enabled[0], quantity=total_count)]

    plan = []
    for entry in enabled:
        quantity = clamp_int(settings.for_variant(entry.variant).quantity, 0, total_count, 0)
        if quantity > 0:
            plan.append(PlanEntry(entry=entry, quantity=quantity))

    if not plan:
        logger.debug("All enabled quantities are zero, using %s", enabled[0].variant.value)
        return [PlanEntry(entry=enabled[0], quantity=total_count)]

    return plan


def total_questions_from_plan(plan: list[PlanEntry]) -> int:
    """Sum the quantities of a plan."""
    return sum(item.quantity for item in plan)


def recommended_max_output_tokens(question_count: int) -> int:
    """
    Estimate the output token budget a request needs.

    Args:
        question_count: Number of questions requested

    Returns:
        Token budget between 1200 and 12000
    """
    count = clamp_int(question_count, 1, 60, 10)
    # ~190 tokens per question plus overhead
    estimate = 900 + count * 190
    return max(1200, min(12000, estimate))
