"""Quiz session - Explicit state threaded through every pipeline call."""

import asyncio
import logging
import random
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quizsmith.agents.grading import compute_grade
from quizsmith.agents.randomizer import randomize_questions
from quizsmith.errors import QuizStateError, SettingsError, SourceTextError
from quizsmith.models.question_types import QuestionVariant
from quizsmith.models.quiz import Grade, Quiz, UserSettings, VaultData
from quizsmith.storage.vault import VaultStore

logger = logging.getLogger(__name__)


class QuizSession:
    """
    The open vault, where it is stored and which quiz is current.

    Every mutation is applied in memory first and then persisted with
    save(). Nothing here serializes two overlapping operations on the same
    quiz; callers that run them concurrently get whatever interleaving the
    event loop produces.
    """

    def __init__(self, vault: VaultData, store: VaultStore):
        self.vault = vault
        self.store = store

    @classmethod
    async def open(
        cls, store: VaultStore, defaults: UserSettings | None = None
    ) -> "QuizSession":
        """
        Load the vault from a store, creating a new one if none exists.

        Args:
            store: Where the vault lives
            defaults: Settings for a newly created vault

        Returns:
            Session over the loaded vault
        """
        vault = await store.load()
        if vault is None:
            vault = VaultData(settings=defaults or UserSettings())
            await store.save(vault)
            logger.info("Created a new vault")
        return cls(vault, store)

    @property
    def settings(self) -> UserSettings:
        return self.vault.settings

    async def save(self) -> None:
        """Persist the vault."""
        await self.store.save(self.vault)

    async def update_settings(self, **changes: Any) -> UserSettings:
        """
        Change generation settings and save them.

        Values are validated the way a loaded vault is, so strings such as
        "0.4" or "hard" are accepted for numeric and enum fields.

        Args:
            **changes: UserSettings fields to change

        Returns:
            The new settings

        Raises:
            SettingsError: If a field is unknown or a value is invalid
        """
        data = self.vault.settings.model_dump()
        for key, value in changes.items():
            if key not in data or key == "question_types":
                raise SettingsError(f"Unknown setting: {key}")
            data[key] = value
        self.vault.settings = _validate_settings(data)
        await self.save()
        return self.vault.settings

    async def set_question_type(
        self,
        variant: QuestionVariant,
        enabled: bool | None = None,
        quantity: int | None = None,
    ) -> UserSettings:
        """
        Enable, disable or resize one question type and save.

        Args:
            variant: Question type to change
            enabled: New enabled flag, unchanged when None
            quantity: New quantity, unchanged when None

        Returns:
            The new settings
        """
        data = self.vault.settings.model_dump()
        entry = data["question_types"][variant.value]
        if enabled is not None:
            entry["enabled"] = enabled
        if quantity is not None:
            entry["quantity"] = quantity
        self.vault.settings = _validate_settings(data)
        await self.save()
        return self.vault.settings

    async def set_api_key(self, api_key: str) -> None:
        """Store the API key used by the Anthropic provider."""
        self.vault.api_key = api_key.strip()
        await self.save()

    def current_quiz(self) -> Quiz | None:
        """Get the current quiz, falling back to the first one in the library."""
        quiz_id = self.vault.current_quiz_id
        if quiz_id is None and self.vault.quizzes:
            quiz_id = self.vault.quizzes[0].id
        if quiz_id is None:
            return None
        quiz = self.vault.find_quiz(quiz_id)
        if quiz is not None:
            self.vault.current_quiz_id = quiz.id
        return quiz

    def require_current_quiz(self) -> Quiz:
        """Get the current quiz or raise if there is none."""
        quiz = self.current_quiz()
        if quiz is None:
            raise QuizStateError("No quiz loaded.")
        return quiz

    def set_current_quiz(self, quiz_id: str) -> Quiz:
        """Make a quiz the current one."""
        quiz = self.vault.find_quiz(quiz_id)
        if quiz is None:
            raise QuizStateError(f"Quiz not found: {quiz_id}")
        self.vault.current_quiz_id = quiz.id
        return quiz

    def add_quiz(self, quiz: Quiz) -> None:
        """Add a quiz to the library and make it current."""
        self.vault.quizzes.append(quiz)
        self.vault.current_quiz_id = quiz.id

    async def resolve_source_text(self, quiz: Quiz) -> str:
        """
        Get the text a quiz was generated from.

        Inline text wins over the source file.

        Raises:
            SourceTextError: If neither is available
        """
        if quiz.source_text and quiz.source_text.strip():
            return quiz.source_text.strip()
        if quiz.source_path:
            path = Path(quiz.source_path)
            if not path.is_file():
                raise SourceTextError("Source file not found for this quiz.")
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return text.strip()
        raise SourceTextError(
            "This quiz has no source text. Regenerate it from a file or custom text."
        )

    async def select_answer(self, choice_index: int, question_index: int | None = None) -> None:
        """
        Record the user's choice for a question.

        Args:
            choice_index: Index of the chosen answer
            question_index: Question to answer (defaults to the current one)
        """
        quiz = self.require_current_quiz()
        if quiz.submitted:
            raise QuizStateError("Quiz already submitted.")
        index = quiz.current_index if question_index is None else question_index
        if not 0 <= index < len(quiz.questions):
            raise QuizStateError(f"Question {index + 1} does not exist.")
        question = quiz.questions[index]
        if not 0 <= choice_index < len(question.choices):
            raise QuizStateError(f"Choice {choice_index + 1} does not exist.")
        question.user_answer_index = choice_index
        quiz.updated_at = datetime.now()
        await self.save()

    async def go_to(self, index: int) -> int:
        """Move to a question, clamped to the quiz bounds."""
        quiz = self.require_current_quiz()
        quiz.current_index = max(0, min(len(quiz.questions) - 1, index))
        await self.save()
        return quiz.current_index

    async def submit(self) -> Grade:
        """Grade the current quiz and lock it."""
        quiz = self.require_current_quiz()
        if quiz.submitted:
            raise QuizStateError("Quiz already submitted.")
        quiz.grade = compute_grade(quiz.questions)
        quiz.submitted = True
        quiz.submitted_at = datetime.now()
        quiz.updated_at = quiz.submitted_at
        await self.save()
        return quiz.grade

    async def copy_quiz(self, quiz_id: str, rng: random.Random | None = None) -> Quiz:
        """
        Clone a quiz with answers cleared and questions reshuffled.

        Returns:
            The copy, which becomes the current quiz
        """
        original = self.vault.find_quiz(quiz_id)
        if original is None:
            raise QuizStateError(f"Quiz not found: {quiz_id}")

        now = datetime.now()
        clone = original.model_copy(deep=True)
        for question in clone.questions:
            question.user_answer_index = None
        clone = clone.model_copy(
            update={
                "id": str(uuid.uuid4()),
                "title": f"{original.title} (copy)",
                "created_at": now,
                "updated_at": now,
                "current_index": 0,
                "submitted": False,
                "submitted_at": None,
                "grade": None,
                "questions": randomize_questions(clone.questions, rng),
            }
        )
        self.add_quiz(clone)
        await self.save()
        return clone

    async def delete_quiz(self, quiz_id: str) -> None:
        """Remove a quiz; the first remaining quiz becomes current."""
        if self.vault.find_quiz(quiz_id) is None:
            raise QuizStateError(f"Quiz not found: {quiz_id}")
        self.vault.quizzes = [q for q in self.vault.quizzes if q.id != quiz_id]
        if self.vault.current_quiz_id == quiz_id:
            self.vault.current_quiz_id = self.vault.quizzes[0].id if self.vault.quizzes else None
        await self.save()


def _validate_settings(data: dict[str, Any]) -> UserSettings:
    try:
        return UserSettings.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise SettingsError(f"Invalid value for {field}: {error['msg']}") from e
