"""Entry points that run the workflows against a session and persist results."""

import logging
import random
from datetime import datetime

from quizsmith.agents.planner import (
    build_question_type_plan,
    clamp_int,
    total_questions_from_plan,
)
from quizsmith.agents.randomizer import shuffle_in_place
from quizsmith.errors import (
    NoNewQuestionsError,
    PlanEmptyError,
    QuizStateError,
    SourceTextError,
)
from quizsmith.graph.state import create_collect_state, create_generation_state
from quizsmith.graph.workflow import compile_collect_workflow, compile_generation_workflow
from quizsmith.llm.client import GenerationClient
from quizsmith.models.quiz import GenerationRequest, Quiz, QuizQuestion
from quizsmith.session import QuizSession

logger = logging.getLogger(__name__)

MAX_COLLECT_COUNT = 50
DEFAULT_COLLECT_COUNT = 5


async def generate_quiz(
    session: QuizSession,
    request: GenerationRequest,
    client: GenerationClient,
    rng: random.Random | None = None,
) -> Quiz:
    """
    Generate a new quiz, add it to the library and make it current.

    Nothing is added or saved unless every returned question is valid.

    Args:
        session: Open quiz session
        request: What to generate
        client: Generation client
        rng: Random source for shuffling

    Returns:
        The new quiz
    """
    if not request.source_text.strip():
        raise SourceTextError("Source text is empty.")

    workflow = compile_generation_workflow(client)
    final_state = await workflow.ainvoke(
        create_generation_state(request, session.settings, rng)
    )
    quiz = final_state["final_quiz"]

    session.add_quiz(quiz)
    await session.save()
    return quiz


async def collect_more_questions(
    session: QuizSession,
    count: int,
    client: GenerationClient,
    rng: random.Random | None = None,
) -> list[QuizQuestion]:
    """
    Add new, non-duplicate questions to the current quiz.

    Accepts a partial result: whatever was collected is appended even when
    it is fewer than count.

    Args:
        session: Open quiz session
        count: Number of questions wanted (clamped to 1..50)
        client: Generation client
        rng: Random source for shuffling

    Returns:
        The questions that were appended

    Raises:
        NoNewQuestionsError: If no new question was collected; the quiz is unchanged
    """
    quiz = session.require_current_quiz()
    if quiz.submitted:
        raise QuizStateError("Quiz already submitted.")

    desired = clamp_int(count, 1, MAX_COLLECT_COUNT, DEFAULT_COLLECT_COUNT)
    plan = build_question_type_plan(session.settings.question_types, desired)
    if not total_questions_from_plan(plan):
        raise PlanEmptyError("Question plan is empty. Enable at least one question type.")

    source_text = await session.resolve_source_text(quiz)

    workflow = compile_collect_workflow(client)
    final_state = await workflow.ainvoke(
        create_collect_state(quiz, session.settings, source_text, desired, rng)
    )
    collected = final_state["collected"]

    if not collected:
        raise NoNewQuestionsError(
            "No new, non-duplicate questions were produced. Try again."
        )

    added = shuffle_in_place(list(collected), rng)
    quiz.questions.extend(added)
    quiz.updated_at = datetime.now()
    await session.save()

    logger.info(
        "Added %d of %d requested questions after %d attempts",
        len(added),
        desired,
        final_state["attempts"],
    )
    return added
