"""Tests for the question type registry and matcher."""

import pytest

from quizsmith.models.question_types import (
    QUESTION_TYPE_REGISTRY,
    QuestionTypeEntry,
    QuestionVariant,
    get_question_type,
    is_multiple_choice_question,
    match_question_type,
    register_question_type,
)


class TestRegistry:
    """Test the registry contents."""

    def test_registry_order(self):
        """Test the evaluation order of the registered shapes."""
        assert [e.variant for e in QUESTION_TYPE_REGISTRY] == [
            QuestionVariant.MATCHING,
            QuestionVariant.SELECT_ALL,
            QuestionVariant.FILL_BLANK,
            QuestionVariant.MULTIPLE_CHOICE,
            QuestionVariant.TRUE_FALSE,
            QuestionVariant.SHORT_LONG,
        ]

    def test_get_question_type(self):
        """Test lookup by variant."""
        entry = get_question_type(QuestionVariant.TRUE_FALSE)
        assert entry is not None
        assert entry.description == "True/False"

    def test_register_appends(self):
        """Test that new entries are evaluated last."""
        registry = [QUESTION_TYPE_REGISTRY[3]]
        entry = get_question_type(QuestionVariant.TRUE_FALSE)
        register_question_type(entry, registry)

        assert [e.variant for e in registry] == [
            QuestionVariant.MULTIPLE_CHOICE,
            QuestionVariant.TRUE_FALSE,
        ]

    def test_register_rejects_duplicates(self):
        """Test that a variant cannot be registered twice."""
        registry = list(QUESTION_TYPE_REGISTRY)
        duplicate = QuestionTypeEntry(
            variant=QuestionVariant.MULTIPLE_CHOICE,
            description="Other",
            schema_shape="{}",
            type_guard=lambda value: True,
        )
        with pytest.raises(ValueError):
            register_question_type(duplicate, registry)


class TestMatchQuestionType:
    """Test structural matching of raw questions."""

    @pytest.mark.parametrize(
        "raw,variant",
        [
            (
                {"prompt": "Match", "pairs": [{"left": "a", "right": "b"}]},
                QuestionVariant.MATCHING,
            ),
            (
                {"q": "Pick", "choices": ["a", "b"], "correct_indexes": [0, 1]},
                QuestionVariant.SELECT_ALL,
            ),
            ({"q": "Fill ___", "answer": "x"}, QuestionVariant.FILL_BLANK),
            (
                {"q": "Pick one", "choices": ["a", "b"], "answer_index": 1},
                QuestionVariant.MULTIPLE_CHOICE,
            ),
            ({"q": "True?", "answer": False}, QuestionVariant.TRUE_FALSE),
            (
                {"q": "Explain", "ideal_answer": "x", "grading_criteria": "y"},
                QuestionVariant.SHORT_LONG,
            ),
        ],
    )
    def test_matches_each_shape(self, raw, variant):
        """Test that each shape maps to its variant."""
        assert match_question_type(raw).variant == variant

    def test_first_match_wins(self):
        """Test that a question fitting two shapes gets the earlier one."""
        raw = {"q": "Both", "choices": ["a", "b"], "correct_indexes": [0], "answer_index": 0}
        assert match_question_type(raw).variant == QuestionVariant.SELECT_ALL

    def test_empty_pairs_do_not_match(self):
        """Test that matching questions need at least one pair."""
        assert match_question_type({"prompt": "Match", "pairs": []}) is None

    def test_empty_correct_indexes_fall_through(self):
        """Test that select-all needs at least one correct index."""
        raw = {"q": "Pick", "choices": ["a"], "correct_indexes": [], "answer_index": 0}
        assert match_question_type(raw).variant == QuestionVariant.MULTIPLE_CHOICE

    @pytest.mark.parametrize("raw", [None, "text", 3, [], {"q": "only text"}])
    def test_no_match(self, raw):
        """Test that unknown shapes match nothing."""
        assert match_question_type(raw) is None

    def test_custom_registry(self):
        """Test matching against a caller-supplied registry."""
        registry = [get_question_type(QuestionVariant.TRUE_FALSE)]
        raw = {"q": "Pick one", "choices": ["a", "b"], "answer_index": 1}
        assert match_question_type(raw, registry) is None


class TestMultipleChoiceGuard:
    """Test the multiple choice type guard."""

    def test_string_answer_index_rejected(self):
        """Test that a quoted answer index is not a number."""
        assert not is_multiple_choice_question({"q": "x", "choices": ["a"], "answer_index": "1"})

    def test_boolean_answer_index_rejected(self):
        """Test that booleans are not numbers."""
        assert not is_multiple_choice_question({"q": "x", "choices": ["a"], "answer_index": True})

    def test_non_finite_answer_index_rejected(self):
        """Test that infinities are not numbers."""
        assert not is_multiple_choice_question(
            {"q": "x", "choices": ["a"], "answer_index": float("inf")}
        )

    def test_non_string_choices_rejected(self):
        """Test that every choice must be a string."""
        assert not is_multiple_choice_question({"q": "x", "choices": ["a", 2], "answer_index": 0})
