"""Pydantic models for quiz data structures."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from .question_types import QuestionTypeEntry, QuestionVariant


class Difficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    VERY_HARD = "very_hard"


class ModelProvider(str, Enum):
    """Chat model backends the default generation client can talk to."""

    BEDROCK = "bedrock"
    ANTHROPIC = "anthropic"


class QuestionTypeSetting(BaseModel):
    """Whether a question type is requested and how many of it."""

    enabled: bool = False
    quantity: int = Field(default=0, ge=0)


class QuestionTypeSettings(BaseModel):
    """Per-variant question type settings."""

    matching: QuestionTypeSetting = Field(default_factory=QuestionTypeSetting)
    select_all: QuestionTypeSetting = Field(default_factory=QuestionTypeSetting)
    fill_blank: QuestionTypeSetting = Field(default_factory=QuestionTypeSetting)
    multiple_choice: QuestionTypeSetting = Field(
        default_factory=lambda: QuestionTypeSetting(enabled=True, quantity=10)
    )
    true_false: QuestionTypeSetting = Field(default_factory=QuestionTypeSetting)
    short_long: QuestionTypeSetting = Field(default_factory=QuestionTypeSetting)

    def for_variant(self, variant: QuestionVariant) -> QuestionTypeSetting:
        """Get the setting for a question variant."""
        return getattr(self, variant.value)


class PlanEntry(BaseModel):
    """How many questions of one type to request."""

    entry: QuestionTypeEntry
    quantity: int = Field(..., ge=0)


class QuizQuestion(BaseModel):
    """A single normalized multiple choice question."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the question",
    )
    text: str = Field(..., min_length=1, description="The question text")
    choices: list[str] = Field(..., min_length=1, description="Answer choices in display order")
    answer_index: int = Field(..., ge=0, description="Index of the correct choice")
    explanation: str = Field(default="", description="Why the correct choice is correct")
    user_answer_index: int | None = Field(
        default=None,
        description="Index the user picked, None until answered",
    )

    @model_validator(mode="after")
    def validate_indexes(self) -> "QuizQuestion":
        """Ensure both indexes point at a live choice."""
        if self.answer_index >= len(self.choices):
            raise ValueError("answer_index must index one of the choices")
        if self.user_answer_index is not None and not (
            0 <= self.user_answer_index < len(self.choices)
        ):
            raise ValueError("user_answer_index must index one of the choices")
        return self

    @property
    def correct_choice(self) -> str:
        """The literal text of the correct choice."""
        return self.choices[self.answer_index]

    model_config = {
        "json_schema_extra": {
            "example": {
                "text": "What is the capital of France?",
                "choices": ["London", "Paris", "Berlin", "Madrid"],
                "answer_index": 1,
                "explanation": "Paris has been the capital of France since 987 AD.",
                "user_answer_index": None,
            }
        }
    }


class QuestionGrade(BaseModel):
    """Grading result for a single question."""

    is_answered: bool
    is_correct: bool
    user_choice: int | None
    correct_choice: int


class Grade(BaseModel):
    """Grading result for a whole quiz."""

    total: int = Field(..., ge=0)
    answered: int = Field(..., ge=0)
    correct: int = Field(..., ge=0)
    accuracy_total: int = Field(..., ge=0, le=100)
    accuracy_answered: int = Field(..., ge=0, le=100)
    per_question: list[QuestionGrade] = Field(default_factory=list)


class Quiz(BaseModel):
    """A generated quiz and the user's progress through it."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = Field(..., min_length=1, description="Quiz title")
    source_path: str = Field(default="", description="File the quiz was generated from")
    source_text: str | None = Field(
        default=None,
        description="Inline source text, kept when there is no source file",
    )
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM)
    choices_count: int = Field(..., ge=2, description="Choices every question has")
    model: str = Field(default="", description="Model that generated the questions")
    temperature: float = Field(default=0.7, ge=0.0)
    questions: list[QuizQuestion] = Field(default_factory=list)
    current_index: int = Field(default=0, ge=0)
    submitted: bool = False
    submitted_at: datetime | None = None
    grade: Grade | None = None

    @property
    def total_questions(self) -> int:
        """Get the number of questions in the quiz."""
        return len(self.questions)

    @property
    def question_texts(self) -> list[str]:
        """Get the text of every question, in order."""
        return [q.text for q in self.questions]


class GenerationRequest(BaseModel):
    """Caller input for generating a fresh quiz."""

    source_text: str = Field(..., description="Text the quiz is generated from")
    source_path: str = Field(default="", description="File the text was read from")
    question_count: int = Field(default=10, ge=1, le=50)
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM)
    choices_count: int = Field(default=4, ge=4, le=8)
    title: str | None = Field(default=None, description="Preferred quiz title")

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str | None) -> str | None:
        """Treat a blank title as no preference."""
        if v is None or not v.strip():
            return None
        return v.strip()


class UserSettings(BaseModel):
    """Generation settings persisted with the vault."""

    provider: ModelProvider = Field(default=ModelProvider.BEDROCK)
    model: str = Field(default="anthropic.claude-3-7-sonnet-20250219-v1:0")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=6000, ge=1)
    default_difficulty: Difficulty = Field(default=Difficulty.MEDIUM)
    default_choices: int = Field(default=4, ge=4, le=8)
    immediate_feedback: bool = False
    custom_instructions: str = ""
    question_types: QuestionTypeSettings = Field(default_factory=QuestionTypeSettings)


class VaultData(BaseModel):
    """Everything the persistence layer stores."""

    api_key: str = Field(default="", description="API key for the Anthropic provider")
    settings: UserSettings = Field(default_factory=UserSettings)
    quizzes: list[Quiz] = Field(default_factory=list)
    current_quiz_id: str | None = None

    def find_quiz(self, quiz_id: str) -> Quiz | None:
        """Get a quiz by id."""
        return next((q for q in self.quizzes if q.id == quiz_id), None)
