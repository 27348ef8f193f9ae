"""Quiz Generator Agent - Generates a fresh quiz in one request.

Generation is all-or-nothing: a single question that fails normalization
fails the whole batch and no quiz is built.
"""

import logging
from datetime import datetime
from typing import Any

from quizsmith.agents.extractor import extract_output_text
from quizsmith.agents.normalizer import normalize_questions
from quizsmith.agents.planner import (
    build_question_type_plan,
    recommended_max_output_tokens,
    total_questions_from_plan,
)
from quizsmith.agents.prompts import build_user_prompt, system_prompt
from quizsmith.agents.randomizer import randomize_questions
from quizsmith.agents.recovery import safe_parse_json
from quizsmith.errors import PlanEmptyError, SchemaMismatchError
from quizsmith.graph.state import GenerationState
from quizsmith.llm.client import GenerationClient
from quizsmith.models.quiz import Quiz

logger = logging.getLogger(__name__)


def plan_quiz(state: GenerationState) -> dict[str, Any]:
    """
    Planner node: decide the question type mix for the request.

    Args:
        state: Current generation state

    Returns:
        Dictionary with updated state containing plan
    """
    request = state["request"]
    plan = build_question_type_plan(state["settings"].question_types, request.question_count)
    if not total_questions_from_plan(plan):
        raise PlanEmptyError("Question plan is empty. Enable at least one question type.")

    logger.debug(
        "Plan: %s",
        ", ".join(f"{item.entry.variant.value}={item.quantity}" for item in plan),
    )
    return {"plan": plan}


async def request_quiz(state: GenerationState, client: GenerationClient) -> dict[str, Any]:
    """
    Generator node: ask the model for the quiz and recover its JSON.

    Args:
        state: Current generation state containing plan
        client: Generation client to call

    Returns:
        Dictionary with updated state containing parsed
    """
    request = state["request"]
    settings = state["settings"]
    plan = state["plan"]

    user_prompt = build_user_prompt(
        request.source_text,
        request.title,
        plan,
        request.difficulty,
        request.choices_count,
        settings.custom_instructions,
    )
    max_tokens = max(
        settings.max_tokens,
        recommended_max_output_tokens(total_questions_from_plan(plan)),
    )

    response = await client.generate(
        system_prompt(),
        user_prompt,
        temperature=settings.temperature,
        max_output_tokens=max_tokens,
    )
    return {"parsed": safe_parse_json(extract_output_text(response))}


def assemble_quiz(state: GenerationState) -> dict[str, Any]:
    """
    Coordinator node: normalize every question and build the quiz.

    Args:
        state: Current generation state containing parsed

    Returns:
        Dictionary with updated state containing final_quiz
    """
    request = state["request"]
    settings = state["settings"]
    parsed = state["parsed"]

    raw_questions = parsed.get("questions") if isinstance(parsed, dict) else None
    if not isinstance(raw_questions, list) or not raw_questions:
        raise SchemaMismatchError("Bad model output: missing questions.")

    questions = normalize_questions(raw_questions, request.choices_count)

    title = str(parsed.get("title") or request.title or "Quiz").strip() or "Quiz"
    now = datetime.now()
    quiz = Quiz(
        title=title,
        source_path=request.source_path,
        source_text=None if request.source_path else request.source_text,
        created_at=now,
        updated_at=now,
        difficulty=request.difficulty,
        choices_count=request.choices_count,
        model=settings.model,
        temperature=settings.temperature,
        questions=randomize_questions(questions, state["rng"]),
    )

    logger.info("Generated quiz %r with %d questions", quiz.title, len(questions))
    return {"final_quiz": quiz}
