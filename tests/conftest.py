"""Shared test fixtures and configuration for pytest."""

import asyncio
import json
import random
from datetime import datetime
from typing import Any

import pytest

from quizsmith.models.quiz import (
    Difficulty,
    GenerationRequest,
    Quiz,
    QuizQuestion,
    UserSettings,
    VaultData,
)
from quizsmith.session import QuizSession
from quizsmith.storage.vault import InMemoryVaultStore


class ScriptedClient:
    """Generation client that replays canned responses in order."""

    def __init__(self, responses: list[Any]):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> Any:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        # Yield to the event loop like a network call would
        await asyncio.sleep(0)
        if not self.responses:
            raise AssertionError("No scripted responses left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def mc(text: str, choices: list[str] | None = None, answer_index: Any = 0, **extra) -> dict:
    """Build a raw multiple choice question as a model would return it."""
    question = {
        "q": text,
        "choices": choices if choices is not None else ["A1", "B1", "C1", "D1"],
        "answer_index": answer_index,
        "explanation": "Because the text says so.",
    }
    question.update(extra)
    return question


def envelope(payload: Any) -> dict:
    """Wrap a payload the way the Responses API does."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"output": [{"type": "message", "content": [{"type": "output_text", "text": text}]}]}


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles."""
    return random.Random(1234)


@pytest.fixture
def sample_question() -> QuizQuestion:
    """Create a sample QuizQuestion for testing."""
    return QuizQuestion(
        text="What is the capital of France?",
        choices=["London", "Berlin", "Paris", "Madrid"],
        answer_index=2,
        explanation="Paris is the capital and largest city of France.",
    )


@pytest.fixture
def sample_questions() -> list[QuizQuestion]:
    """Create a list of sample questions for testing."""
    return [
        QuizQuestion(
            text="What is the capital of France?",
            choices=["London", "Berlin", "Paris", "Madrid"],
            answer_index=2,
        ),
        QuizQuestion(
            text="Which gas do plants absorb during photosynthesis?",
            choices=["Oxygen", "Carbon dioxide", "Nitrogen", "Helium"],
            answer_index=1,
        ),
        QuizQuestion(
            text="Who wrote the novel 1984?",
            choices=["Aldous Huxley", "George Orwell", "Ray Bradbury", "Philip K. Dick"],
            answer_index=1,
        ),
    ]


@pytest.fixture
def sample_quiz(sample_questions: list[QuizQuestion]) -> Quiz:
    """Create a sample Quiz for testing."""
    return Quiz(
        title="Test Quiz",
        source_text="Paris is the capital of France. Plants absorb carbon dioxide.",
        created_at=datetime(2024, 1, 1, 12, 0, 0),
        updated_at=datetime(2024, 1, 1, 12, 0, 0),
        difficulty=Difficulty.MEDIUM,
        choices_count=4,
        model="test-model",
        questions=sample_questions,
    )


@pytest.fixture
def generation_request() -> GenerationRequest:
    """Create a sample GenerationRequest for testing."""
    return GenerationRequest(
        source_text="The Nile is the longest river in Africa. Paris is the capital of France.",
        question_count=2,
        difficulty=Difficulty.EASY,
        choices_count=4,
        title="Geography",
    )


@pytest.fixture
def store() -> InMemoryVaultStore:
    """Empty in-memory vault store."""
    return InMemoryVaultStore()


@pytest.fixture
def session(store: InMemoryVaultStore) -> QuizSession:
    """Session over an empty vault."""
    return QuizSession(VaultData(settings=UserSettings(model="test-model")), store)


@pytest.fixture
def quiz_session(store: InMemoryVaultStore, sample_quiz: Quiz) -> QuizSession:
    """Session whose current quiz is sample_quiz."""
    vault = VaultData(settings=UserSettings(model="test-model"))
    session = QuizSession(vault, store)
    session.add_quiz(sample_quiz)
    return session
