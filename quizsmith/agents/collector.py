"""Question Collector Agent - Collects new questions for an existing quiz.

Runs small generation rounds until enough non-duplicate questions are
collected or the attempts run out. The attempt cap bounds duplicate
avoidance only; there is no backoff between rounds.
"""

import logging
from typing import Any, Literal

from quizsmith.agents.extractor import extract_output_text
from quizsmith.agents.normalizer import normalize_question
from quizsmith.agents.planner import (
    build_question_type_plan,
    recommended_max_output_tokens,
    total_questions_from_plan,
)
from quizsmith.agents.prompts import build_avoid_list, build_user_prompt, system_prompt
from quizsmith.agents.randomizer import randomize_question_choices
from quizsmith.agents.recovery import safe_parse_json
from quizsmith.errors import EmptyInputError, ParseError, SchemaMismatchError
from quizsmith.graph.state import CollectState
from quizsmith.llm.client import GenerationClient

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 12


async def request_batch(state: CollectState, client: GenerationClient) -> dict[str, Any]:
    """
    Request node: ask the model for one batch of new questions.

    Once any question has been collected, an unparseable batch is logged
    and counted as an empty attempt instead of ending the run.

    Args:
        state: Current collect state
        client: Generation client to call

    Returns:
        Dictionary with updated state containing raw_questions and attempts
    """
    quiz = state["quiz"]
    settings = state["settings"]
    remaining = state["desired"] - len(state["collected"])
    batch_size = min(MAX_BATCH_SIZE, remaining)

    plan = build_question_type_plan(settings.question_types, batch_size)
    user_prompt = build_user_prompt(
        state["source_text"],
        quiz.title,
        plan,
        quiz.difficulty,
        quiz.choices_count,
        settings.custom_instructions,
        state["avoid_questions"],
    )
    max_tokens = max(
        settings.max_tokens,
        recommended_max_output_tokens(total_questions_from_plan(plan)),
    )

    attempt = state["attempts"] + 1
    logger.debug("Collect attempt %d: requesting %d questions", attempt, batch_size)

    response = await client.generate(
        system_prompt(),
        user_prompt,
        temperature=settings.temperature,
        max_output_tokens=max_tokens,
    )
    try:
        parsed = safe_parse_json(extract_output_text(response))
    except (EmptyInputError, ParseError) as e:
        # Only fatal while nothing has been collected yet
        if not state["collected"]:
            raise
        logger.warning("Discarding unparseable batch on attempt %d: %s", attempt, e)
        return {"raw_questions": [], "attempts": attempt}
    raw_questions = parsed.get("questions") if isinstance(parsed, dict) else None

    return {
        "raw_questions": raw_questions if isinstance(raw_questions, list) else [],
        "attempts": attempt,
    }


def screen_batch(state: CollectState) -> dict[str, Any]:
    """
    Screen node: normalize, de-duplicate and keep new questions.

    Questions are checked against the quiz's existing questions and
    against everything accepted earlier in this session. Accepted texts
    join the avoid list for the next round.

    Args:
        state: Current collect state containing raw_questions

    Returns:
        Dictionary with updated state containing collected and skipped
    """
    desired = state["desired"]
    tracker = state["tracker"]
    collected = list(state["collected"])
    skipped = state["skipped"]
    accepted: list[str] = []

    for raw in state["raw_questions"]:
        if len(collected) >= desired:
            break
        try:
            question = normalize_question(raw, state["quiz"].choices_count)
        except SchemaMismatchError as e:
            logger.warning("Skipping generated question: %s", e)
            skipped += 1
            continue
        if not tracker.accept(question.text):
            logger.debug("Skipping duplicate question: %s", question.text)
            skipped += 1
            continue
        collected.append(randomize_question_choices(question, state["rng"]))
        accepted.append(question.text)

    return {
        "collected": collected,
        "raw_questions": [],
        "skipped": skipped,
        "avoid_questions": build_avoid_list(state["avoid_questions"] + accepted),
    }


def should_request_more(state: CollectState) -> Literal["request", "finish"]:
    """
    Determine whether to run another collection round.

    Args:
        state: Current collect state

    Returns:
        "request" while short of the target and attempts remain, "finish" otherwise
    """
    if len(state["collected"]) >= state["desired"]:
        return "finish"
    if state["attempts"] >= state["max_attempts"]:
        return "finish"
    return "request"
