"""Choice/Question Randomizer - Shuffles without losing the correct answer."""

import random
from typing import TypeVar

from quizsmith.models.quiz import QuizQuestion

T = TypeVar("T")


def shuffle_in_place(items: list[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates shuffle a list in place and return it."""
    (rng or random).shuffle(items)
    return items


def randomize_question_choices(
    question: QuizQuestion, rng: random.Random | None = None
) -> QuizQuestion:
    """
    Shuffle a question's choices and remap its answer indexes.

    Args:
        question: Question to shuffle (left untouched)
        rng: Random source, for reproducible shuffles

    Returns:
        A new question whose answer_index points at the same choice text
    """
    pairs = list(enumerate(question.choices))
    shuffle_in_place(pairs, rng)
    positions = {original: new for new, (original, _) in enumerate(pairs)}

    user_answer_index = question.user_answer_index
    if user_answer_index is not None:
        user_answer_index = positions.get(user_answer_index)

    return QuizQuestion(
        id=question.id,
        text=question.text,
        choices=[text for _, text in pairs],
        answer_index=max(0, positions.get(question.answer_index, -1)),
        explanation=question.explanation,
        user_answer_index=user_answer_index,
    )


def randomize_questions(
    questions: list[QuizQuestion], rng: random.Random | None = None
) -> list[QuizQuestion]:
    """
    Shuffle the choices of every question, then the question order.

    Args:
        questions: Questions to shuffle (left untouched)
        rng: Random source, for reproducible shuffles

    Returns:
        New list of shuffled questions
    """
    shuffled = [randomize_question_choices(q, rng) for q in questions]
    return shuffle_in_place(shuffled, rng)
