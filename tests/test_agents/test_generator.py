"""Tests for the Quiz Generator nodes."""

import random

import pytest

from conftest import ScriptedClient, envelope, mc
from quizsmith.agents.generator import assemble_quiz, plan_quiz, request_quiz
from quizsmith.errors import ParseTruncatedError, SchemaMismatchError
from quizsmith.graph.state import create_generation_state
from quizsmith.models.quiz import GenerationRequest, UserSettings


@pytest.fixture
def state(generation_request: GenerationRequest):
    """Generation state with a plan already built."""
    state = create_generation_state(
        generation_request, UserSettings(model="test-model"), random.Random(5)
    )
    state.update(plan_quiz(state))
    return state


class TestPlanQuiz:
    """Test the planner node."""

    def test_plans_requested_count(self, state):
        """Test that the plan covers the requested count."""
        assert sum(p.quantity for p in state["plan"]) == 2


class TestRequestQuiz:
    """Test the generator node."""

    @pytest.mark.asyncio
    async def test_parses_response(self, state):
        """Test that the response text is recovered as JSON."""
        client = ScriptedClient([envelope({"title": "T", "questions": [mc("Q1?")]})])
        result = await request_quiz(state, client)

        assert result["parsed"]["title"] == "T"
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_uses_larger_token_budget(self, state):
        """Test that max tokens is the larger of setting and estimate."""
        state["settings"] = UserSettings(max_tokens=500)
        client = ScriptedClient([envelope({"questions": []})])
        await request_quiz(state, client)

        assert client.calls[0]["max_output_tokens"] == 1280

    @pytest.mark.asyncio
    async def test_source_text_in_prompt(self, state):
        """Test that the source text is sent verbatim."""
        client = ScriptedClient([envelope({"questions": []})])
        await request_quiz(state, client)

        assert "The Nile is the longest river in Africa." in client.calls[0]["user_prompt"]

    @pytest.mark.asyncio
    async def test_truncated_response(self, state):
        """Test that truncated output propagates."""
        client = ScriptedClient([envelope('{"title":"t","questions":[{"q":"x"')])
        with pytest.raises(ParseTruncatedError):
            await request_quiz(state, client)


class TestAssembleQuiz:
    """Test the coordinator node."""

    def test_builds_quiz(self, state):
        """Test that a valid batch becomes a quiz."""
        state["parsed"] = {
            "title": "Rivers",
            "questions": [
                mc("Which is longest?", ["Nile", "Congo", "Niger", "Volga"], 0),
                mc("Capital of France?", ["Paris", "Rome", "Oslo", "Bern"], 0),
            ],
        }
        quiz = assemble_quiz(state)["final_quiz"]

        assert quiz.title == "Rivers"
        assert quiz.total_questions == 2
        assert quiz.model == "test-model"
        assert quiz.choices_count == 4
        answers = {q.text: q.correct_choice for q in quiz.questions}
        assert answers == {"Which is longest?": "Nile", "Capital of France?": "Paris"}

    def test_title_falls_back_to_request(self, state):
        """Test the request title is used when the model gives none."""
        state["parsed"] = {"questions": [mc("Q1?")]}
        assert assemble_quiz(state)["final_quiz"].title == "Geography"

    def test_keeps_inline_source_text(self, state):
        """Test that inline text is stored when there is no source file."""
        state["parsed"] = {"questions": [mc("Q1?")]}
        quiz = assemble_quiz(state)["final_quiz"]

        assert quiz.source_text == state["request"].source_text
        assert quiz.source_path == ""

    @pytest.mark.parametrize("parsed", [{"questions": []}, {"title": "x"}, [1, 2], "text"])
    def test_missing_questions(self, state, parsed):
        """Test that output without questions is rejected."""
        state["parsed"] = parsed
        with pytest.raises(SchemaMismatchError, match="missing questions"):
            assemble_quiz(state)

    def test_one_bad_question_fails(self, state):
        """Test that one invalid question fails the whole quiz."""
        state["parsed"] = {"questions": [mc("Good?"), mc("Bad?", ["a", "b", "c"])]}
        with pytest.raises(SchemaMismatchError, match="exactly 4"):
            assemble_quiz(state)
