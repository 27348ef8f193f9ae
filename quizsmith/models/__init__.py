"""Data models for quiz generation."""

from .question_types import (
    DEFAULT_VARIANT,
    QUESTION_TYPE_REGISTRY,
    QuestionTypeEntry,
    QuestionVariant,
    get_question_type,
    match_question_type,
    register_question_type,
)
from .quiz import (
    Difficulty,
    GenerationRequest,
    Grade,
    ModelProvider,
    PlanEntry,
    QuestionGrade,
    QuestionTypeSetting,
    QuestionTypeSettings,
    Quiz,
    QuizQuestion,
    UserSettings,
    VaultData,
)

__all__ = [
    "QuestionVariant",
    "QuestionTypeEntry",
    "QUESTION_TYPE_REGISTRY",
    "DEFAULT_VARIANT",
    "get_question_type",
    "match_question_type",
    "register_question_type",
    "Difficulty",
    "ModelProvider",
    "QuestionTypeSetting",
    "QuestionTypeSettings",
    "PlanEntry",
    "QuizQuestion",
    "QuestionGrade",
    "Grade",
    "Quiz",
    "GenerationRequest",
    "UserSettings",
    "VaultData",
]
