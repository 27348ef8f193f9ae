"""LangGraph state for quiz generation and question collection."""

import random
from typing import Any, TypedDict

from quizsmith.agents.dedup import DuplicateTracker
from quizsmith.agents.prompts import build_avoid_list
from quizsmith.models.quiz import GenerationRequest, PlanEntry, Quiz, QuizQuestion, UserSettings

MAX_COLLECT_ATTEMPTS = 3


class GenerationState(TypedDict):
    """State for generating a fresh quiz."""

    request: GenerationRequest
    settings: UserSettings
    rng: random.Random | None
    plan: list[PlanEntry] | None
    parsed: Any
    final_quiz: Quiz | None


class CollectState(TypedDict):
    """State for collecting more questions for an existing quiz."""

    quiz: Quiz
    settings: UserSettings
    source_text: str
    rng: random.Random | None
    desired: int
    attempts: int
    max_attempts: int
    avoid_questions: list[str]
    tracker: DuplicateTracker
    raw_questions: list[Any]
    collected: list[QuizQuestion]
    skipped: int


def create_generation_state(
    request: GenerationRequest,
    settings: UserSettings,
    rng: random.Random | None = None,
) -> GenerationState:
    """
    Create the initial state for a fresh generation.

    Args:
        request: What to generate
        settings: User settings for the session
        rng: Random source for shuffling

    Returns:
        Initial GenerationState
    """
    return GenerationState(
        request=request,
        settings=settings,
        rng=rng,
        plan=None,
        parsed=None,
        final_quiz=None,
    )


def create_collect_state(
    quiz: Quiz,
    settings: UserSettings,
    source_text: str,
    desired: int,
    rng: random.Random | None = None,
) -> CollectState:
    """
    Create the initial state for collecting more questions.

    Duplicate tracking and the avoid list are both seeded from the quiz's
    existing questions.

    Args:
        quiz: Quiz the questions are for
        settings: User settings for the session
        source_text: Text the quiz was generated from
        desired: Number of new questions wanted
        rng: Random source for shuffling

    Returns:
        Initial CollectState
    """
    existing = quiz.question_texts
    return CollectState(
        quiz=quiz,
        settings=settings,
        source_text=source_text,
        rng=rng,
        desired=desired,
        attempts=0,
        max_attempts=MAX_COLLECT_ATTEMPTS,
        avoid_questions=build_avoid_list(existing),
        tracker=DuplicateTracker(existing),
        raw_questions=[],
        collected=[],
        skipped=0,
    )
