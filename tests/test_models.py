"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from quizsmith.models.question_types import QuestionVariant
from quizsmith.models.quiz import (
    Difficulty,
    GenerationRequest,
    Quiz,
    QuestionTypeSettings,
    QuizQuestion,
    UserSettings,
    VaultData,
)


class TestQuizQuestion:
    """Test QuizQuestion model."""

    def test_create_valid_question(self):
        """Test creating a valid question."""
        question = QuizQuestion(
            text="What is 2+2?",
            choices=["3", "4", "5", "6"],
            answer_index=1,
        )
        assert question.text == "What is 2+2?"
        assert question.correct_choice == "4"
        assert question.user_answer_index is None
        assert question.explanation == ""

    def test_generates_unique_ids(self):
        """Test that every question gets its own id."""
        a = QuizQuestion(text="A?", choices=["x", "y"], answer_index=0)
        b = QuizQuestion(text="B?", choices=["x", "y"], answer_index=0)
        assert a.id != b.id

    def test_answer_index_out_of_range(self):
        """Test that answer_index must point at a choice."""
        with pytest.raises(ValidationError):
            QuizQuestion(text="Q?", choices=["a", "b"], answer_index=2)

    def test_negative_answer_index(self):
        """Test that answer_index cannot be negative."""
        with pytest.raises(ValidationError):
            QuizQuestion(text="Q?", choices=["a", "b"], answer_index=-1)

    def test_user_answer_index_out_of_range(self):
        """Test that user_answer_index must point at a choice."""
        with pytest.raises(ValidationError):
            QuizQuestion(text="Q?", choices=["a", "b"], answer_index=0, user_answer_index=5)

    def test_empty_text(self):
        """Test that question text is required."""
        with pytest.raises(ValidationError):
            QuizQuestion(text="", choices=["a", "b"], answer_index=0)


class TestQuiz:
    """Test Quiz model."""

    def test_total_questions(self, sample_quiz: Quiz):
        """Test total_questions property."""
        assert sample_quiz.total_questions == 3

    def test_question_texts(self, sample_quiz: Quiz):
        """Test question_texts keeps question order."""
        assert sample_quiz.question_texts[0] == "What is the capital of France?"
        assert len(sample_quiz.question_texts) == 3

    def test_defaults(self):
        """Test a new quiz starts unsubmitted at the first question."""
        quiz = Quiz(title="T", choices_count=4)
        assert quiz.current_index == 0
        assert quiz.submitted is False
        assert quiz.grade is None
        assert quiz.questions == []

    def test_json_roundtrip_keeps_answers(self, sample_quiz: Quiz):
        """Test serialization keeps user answers and timestamps."""
        sample_quiz.questions[0].user_answer_index = 1
        restored = Quiz.model_validate_json(sample_quiz.model_dump_json())
        assert restored.questions[0].user_answer_index == 1
        assert restored.created_at == sample_quiz.created_at


class TestGenerationRequest:
    """Test GenerationRequest model."""

    def test_defaults(self):
        """Test default values."""
        request = GenerationRequest(source_text="Some text")
        assert request.question_count == 10
        assert request.difficulty == Difficulty.MEDIUM
        assert request.choices_count == 4
        assert request.title is None

    def test_blank_title_becomes_none(self):
        """Test that a whitespace title means no preference."""
        request = GenerationRequest(source_text="x", title="   ")
        assert request.title is None

    def test_title_is_stripped(self):
        """Test that the title is trimmed."""
        request = GenerationRequest(source_text="x", title="  Rivers  ")
        assert request.title == "Rivers"

    @pytest.mark.parametrize("count", [0, 51])
    def test_question_count_bounds(self, count: int):
        """Test question count must be between 1 and 50."""
        with pytest.raises(ValidationError):
            GenerationRequest(source_text="x", question_count=count)

    @pytest.mark.parametrize("choices", [3, 9])
    def test_choices_count_bounds(self, choices: int):
        """Test choices count must be between 4 and 8."""
        with pytest.raises(ValidationError):
            GenerationRequest(source_text="x", choices_count=choices)


class TestSettingsModels:
    """Test the user settings models."""

    def test_multiple_choice_enabled_by_default(self):
        """Test only multiple choice is enabled out of the box."""
        settings = QuestionTypeSettings()
        enabled = [v for v in QuestionVariant if settings.for_variant(v).enabled]
        assert enabled == [QuestionVariant.MULTIPLE_CHOICE]
        assert settings.multiple_choice.quantity == 10

    def test_negative_quantity_rejected(self):
        """Test that quantities cannot be negative."""
        with pytest.raises(ValidationError):
            QuestionTypeSettings(true_false={"enabled": True, "quantity": -1})

    def test_temperature_bounds(self):
        """Test temperature must be between 0 and 2."""
        with pytest.raises(ValidationError):
            UserSettings(temperature=2.5)


class TestVaultData:
    """Test VaultData model."""

    def test_find_quiz(self, sample_quiz: Quiz):
        """Test looking up a quiz by id."""
        vault = VaultData(quizzes=[sample_quiz])
        assert vault.find_quiz(sample_quiz.id) is sample_quiz
        assert vault.find_quiz("missing") is None
