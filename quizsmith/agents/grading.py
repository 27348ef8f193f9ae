"""Grading Engine - Scores a quiz against the user's answers."""

from decimal import ROUND_HALF_UP, Decimal

from quizsmith.models.quiz import Grade, QuestionGrade, QuizQuestion


def percent(part: int, whole: int) -> int:
    """
    Whole-number percentage rounded half up.

    Returns:
        round(100 * part / whole), or 0 when whole is 0
    """
    if not whole:
        return 0
    value = Decimal(100 * part) / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_grade(questions: list[QuizQuestion]) -> Grade:
    """
    Grade a list of questions.

    Args:
        questions: Questions with user answers filled in where answered

    Returns:
        Grade with totals, accuracies and per-question results
    """
    per_question = []
    for q in questions:
        is_answered = q.user_answer_index is not None
        per_question.append(
            QuestionGrade(
                is_answered=is_answered,
                is_correct=is_answered and q.user_answer_index == q.answer_index,
                user_choice=q.user_answer_index,
                correct_choice=q.answer_index,
            )
        )

    total = len(per_question)
    answered = sum(1 for r in per_question if r.is_answered)
    correct = sum(1 for r in per_question if r.is_correct)

    return Grade(
        total=total,
        answered=answered,
        correct=correct,
        accuracy_total=percent(correct, total),
        accuracy_answered=percent(correct, answered),
        per_question=per_question,
    )
