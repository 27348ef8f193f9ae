"""Typer CLI application for quiz generation."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from quizsmith.config.settings import get_settings
from quizsmith.errors import QuizError
from quizsmith.llm.client import create_generation_client
from quizsmith.models.question_types import QuestionVariant
from quizsmith.models.quiz import Difficulty, GenerationRequest, Grade, Quiz
from quizsmith.pipeline import collect_more_questions, generate_quiz
from quizsmith.session import QuizSession
from quizsmith.storage.vault import JsonFileVaultStore

app = typer.Typer(
    name="quizsmith",
    help="Generate and take quizzes built from your own notes",
    add_completion=False,
)

console = Console()

config_app = typer.Typer(help="Show or change the generation settings stored in the vault")
app.add_typer(config_app, name="config")


def open_session() -> QuizSession:
    """Open the session over the configured vault file."""
    settings = get_settings()
    store = JsonFileVaultStore(settings.vault_path)
    return asyncio.run(QuizSession.open(store, settings.to_user_settings()))


def fail(message: str) -> None:
    """Print an error and exit."""
    console.print(f"[red]Error:[/red] {message}", style="bold")
    raise typer.Exit(code=1)


def require_quiz_with_questions(session: QuizSession) -> Quiz:
    """Get the current quiz, exiting unless it has questions to show."""
    quiz = session.current_quiz()
    if quiz is None:
        fail("No quiz loaded.")
    if not quiz.questions:
        fail("The current quiz has no questions.")
    return quiz


def choice_label(index: int) -> str:
    return chr(ord("A") + index)


def parse_choice(value: str) -> int:
    """Turn a choice letter (A, b, ...) or 1-based number into an index."""
    value = value.strip()
    if value.isdigit():
        return int(value) - 1
    if len(value) == 1 and value.isalpha():
        return ord(value.upper()) - ord("A")
    raise typer.BadParameter(f"Not a choice: {value}")


@app.command()
def generate(
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="Note or text file to generate the quiz from",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    text: Optional[str] = typer.Option(
        None,
        "--text",
        help="Source text to generate the quiz from (instead of a file)",
    ),
    questions: int = typer.Option(
        10,
        "--questions",
        "-q",
        help="Number of questions",
        min=1,
        max=50,
    ),
    difficulty: Optional[Difficulty] = typer.Option(
        None,
        "--difficulty",
        "-d",
        help="Difficulty level (defaults to the vault setting)",
        case_sensitive=False,
    ),
    choices: Optional[int] = typer.Option(
        None,
        "--choices",
        "-c",
        help="Choices per question (defaults to the vault setting)",
        min=4,
        max=8,
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        help="Preferred quiz title",
    ),
) -> None:
    """
    Generate a quiz from a file or pasted text.

    Example:
        quizsmith generate -f notes/biology.md -q 15 -d hard
    """
    if (file is None) == (text is None):
        fail("Pass exactly one of --file or --text.")

    session = open_session()
    settings = session.settings

    if file is not None:
        source_text = file.read_text(encoding="utf-8")
        source_path = str(file)
        title = title or file.stem
    else:
        source_text = text
        source_path = ""

    request = GenerationRequest(
        source_text=source_text,
        source_path=source_path,
        question_count=questions,
        difficulty=difficulty or settings.default_difficulty,
        choices_count=choices or settings.default_choices,
        title=title,
    )
    client = create_generation_client(settings, session.vault.api_key or None)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Generating quiz...", total=None)
            quiz = asyncio.run(generate_quiz(session, request, client))
            progress.update(task, description="[green]Quiz generation complete!")
    except QuizError as e:
        fail(str(e))
    except Exception as e:
        console.print(f"\n[red]Error during quiz generation:[/red] {e}", style="bold")
        raise typer.Exit(code=1)

    display_quiz_summary(quiz)


@app.command()
def add(
    count: int = typer.Option(
        5,
        "--count",
        "-n",
        help="Number of new questions to add",
        min=1,
        max=50,
    ),
) -> None:
    """Add new, non-duplicate questions to the current quiz."""
    session = open_session()
    client = create_generation_client(session.settings, session.vault.api_key or None)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("[cyan]Collecting new questions...", total=None)
            added = asyncio.run(collect_more_questions(session, count, client))
    except QuizError as e:
        fail(str(e))
    except Exception as e:
        console.print(f"\n[red]Error while adding questions:[/red] {e}", style="bold")
        raise typer.Exit(code=1)

    plural = "" if len(added) == 1 else "s"
    console.print(f"[green]✓[/green] Added {len(added)} question{plural}.")


@app.command("list")
def list_quizzes() -> None:
    """List the quizzes in the library."""
    session = open_session()
    current = session.current_quiz()

    if not session.vault.quizzes:
        console.print("No quizzes yet. Run [cyan]quizsmith generate[/cyan] first.")
        return

    table = Table(title="Quiz Library", border_style="cyan")
    table.add_column("", style="green")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="white")
    table.add_column("Questions", style="white")
    table.add_column("Difficulty", style="white")
    table.add_column("Status", style="white")

    for quiz in session.vault.quizzes:
        status = "submitted" if quiz.submitted else "in progress"
        table.add_row(
            "*" if current is not None and quiz.id == current.id else "",
            quiz.id,
            quiz.title,
            str(quiz.total_questions),
            quiz.difficulty.value,
            status,
        )

    console.print(table)


@app.command()
def use(quiz_id: str = typer.Argument(..., help="ID of the quiz to open")) -> None:
    """Make a quiz the current one."""
    session = open_session()
    try:
        quiz = session.set_current_quiz(quiz_id)
        asyncio.run(session.save())
    except QuizError as e:
        fail(str(e))
    console.print(f"Current quiz: [cyan]{quiz.title}[/cyan]")


@app.command()
def show() -> None:
    """Show the current question."""
    session = open_session()
    quiz = require_quiz_with_questions(session)
    display_question(quiz, session.settings.immediate_feedback)


@app.command()
def goto(number: int = typer.Argument(..., help="Question number (1-based)")) -> None:
    """Move to a question."""
    session = open_session()
    require_quiz_with_questions(session)
    try:
        asyncio.run(session.go_to(number - 1))
    except QuizError as e:
        fail(str(e))
    display_question(session.require_current_quiz(), session.settings.immediate_feedback)


@app.command()
def answer(
    choice: str = typer.Argument(..., help="Choice letter (A, B, ...) or number"),
    number: Optional[int] = typer.Option(
        None,
        "--question",
        "-n",
        help="Question number (defaults to the current question)",
        min=1,
    ),
) -> None:
    """Answer a question of the current quiz."""
    session = open_session()
    require_quiz_with_questions(session)
    try:
        asyncio.run(
            session.select_answer(
                parse_choice(choice),
                None if number is None else number - 1,
            )
        )
    except QuizError as e:
        fail(str(e))
    display_question(session.require_current_quiz(), session.settings.immediate_feedback)


@app.command()
def submit() -> None:
    """Submit and grade the current quiz."""
    session = open_session()
    try:
        grade = asyncio.run(session.submit())
    except QuizError as e:
        fail(str(e))
    display_grade(session.require_current_quiz(), grade)


@app.command()
def copy(
    quiz_id: Optional[str] = typer.Argument(None, help="Quiz to copy (defaults to current)"),
) -> None:
    """Copy a quiz with answers cleared and questions reshuffled."""
    session = open_session()
    try:
        source = session.vault.find_quiz(quiz_id) if quiz_id else session.require_current_quiz()
        if source is None:
            fail(f"Quiz not found: {quiz_id}")
        clone = asyncio.run(session.copy_quiz(source.id))
    except QuizError as e:
        fail(str(e))
    console.print(f"[green]✓[/green] Created [cyan]{clone.title}[/cyan] ({clone.id})")


@app.command()
def delete(
    quiz_id: str = typer.Argument(..., help="Quiz to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a quiz from the library."""
    session = open_session()
    quiz = session.vault.find_quiz(quiz_id)
    if quiz is None:
        fail(f"Quiz not found: {quiz_id}")
    if not yes and not typer.confirm(f"Delete '{quiz.title}'?"):
        raise typer.Exit()
    asyncio.run(session.delete_quiz(quiz_id))
    console.print(f"Deleted [cyan]{quiz.title}[/cyan].")


@app.command()
def info() -> None:
    """Display information about the quiz generator."""
    settings = get_settings()
    info_text = f"""
[bold cyan]quizsmith[/bold cyan]

[bold]Pipeline:[/bold]
  • Planner - Decides the question type mix
  • Generator - Requests questions from the model
  • Recovery - Repairs fenced, quoted or truncated JSON
  • Normalizer - Validates every question against its schema
  • Collector - Adds new questions without repeats

[bold]Provider:[/bold] {settings.model_provider.value}
[bold]Model:[/bold] {settings.model_name}
[bold]Vault:[/bold] {settings.vault_path}
    """
    console.print(Panel(info_text, title="Quiz Info", border_style="cyan"))


@config_app.command("show")
def config_show() -> None:
    """Show the current generation settings."""
    session = open_session()
    settings = session.settings

    table = Table(title="Settings", border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("provider", settings.provider.value)
    table.add_row("model", settings.model)
    table.add_row("temperature", str(settings.temperature))
    table.add_row("max_tokens", str(settings.max_tokens))
    table.add_row("default_difficulty", settings.default_difficulty.value)
    table.add_row("default_choices", str(settings.default_choices))
    table.add_row("immediate_feedback", str(settings.immediate_feedback).lower())
    table.add_row("custom_instructions", settings.custom_instructions or "-")
    table.add_row("api_key", "set" if session.vault.api_key else "not set")
    console.print(table)

    types = Table(title="Question Types", border_style="cyan")
    types.add_column("Type", style="cyan")
    types.add_column("Enabled", style="white")
    types.add_column("Quantity", style="white")
    for variant in QuestionVariant:
        setting = settings.question_types.for_variant(variant)
        types.add_row(variant.value, "yes" if setting.enabled else "no", str(setting.quantity))
    console.print(types)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name, e.g. temperature or default_difficulty"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """
    Change one generation setting.

    Example:
        quizsmith config set temperature 0.4
    """
    session = open_session()
    try:
        asyncio.run(session.update_settings(**{key.replace("-", "_"): value}))
    except QuizError as e:
        fail(str(e))
    console.print(f"[green]✓[/green] {key} = {value}")


@config_app.command("type")
def config_type(
    variant: QuestionVariant = typer.Argument(..., help="Question type", case_sensitive=False),
    enable: Optional[bool] = typer.Option(
        None,
        "--enable/--disable",
        help="Request this question type or stop requesting it",
    ),
    quantity: Optional[int] = typer.Option(
        None,
        "--quantity",
        "-n",
        help="Questions of this type when several types are enabled",
        min=0,
    ),
) -> None:
    """Enable, disable or resize a question type."""
    if enable is None and quantity is None:
        fail("Pass --enable, --disable or --quantity.")
    session = open_session()
    try:
        settings = asyncio.run(session.set_question_type(variant, enable, quantity))
    except QuizError as e:
        fail(str(e))
    setting = settings.question_types.for_variant(variant)
    state = "enabled" if setting.enabled else "disabled"
    console.print(f"[green]✓[/green] {variant.value}: {state}, quantity {setting.quantity}")


@config_app.command("api-key")
def config_api_key(
    api_key: str = typer.Option(
        ...,
        "--key",
        prompt="API key",
        hide_input=True,
        help="Key for the anthropic provider (empty to clear)",
    ),
) -> None:
    """Store the API key used by the anthropic provider."""
    session = open_session()
    asyncio.run(session.set_api_key(api_key))
    console.print("[green]✓[/green] API key " + ("saved." if session.vault.api_key else "cleared."))


def display_quiz_summary(quiz: Quiz) -> None:
    """Display a summary of a generated quiz."""
    table = Table(title="Quiz Summary", border_style="green")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Title", quiz.title)
    table.add_row("ID", quiz.id)
    table.add_row("Questions", str(quiz.total_questions))
    table.add_row("Choices", str(quiz.choices_count))
    table.add_row("Difficulty", quiz.difficulty.value)
    if quiz.source_path:
        table.add_row("Source", quiz.source_path)

    console.print()
    console.print(table)


def display_question(quiz: Quiz, immediate_feedback: bool) -> None:
    """Display the current question of a quiz."""
    index = quiz.current_index
    question = quiz.questions[index]
    answered = question.user_answer_index is not None
    reveal = quiz.submitted or (immediate_feedback and answered)

    console.print(f"[dim]{index + 1} / {quiz.total_questions}[/dim]")
    console.print(f"[bold]{question.text}[/bold]")

    for i, choice in enumerate(question.choices):
        line = f"  {choice_label(i)}. {choice}"
        if reveal and i == question.answer_index:
            line = f"[green]{line}[/green]"
        elif reveal and i == question.user_answer_index:
            line = f"[red]{line}[/red]"
        elif i == question.user_answer_index:
            line = f"[cyan]{line}[/cyan]"
        console.print(line)

    if reveal:
        ok = answered and question.user_answer_index == question.answer_index
        verdict = "[green]Correct.[/green]" if ok else "[red]Wrong.[/red]"
        console.print(f"{verdict} {question.explanation or '(No explanation)'}")


def display_grade(quiz: Quiz, grade: Grade) -> None:
    """Display a graded quiz."""
    console.print(f"\n[bold]Score: {grade.correct}/{grade.total}[/bold]")
    console.print(
        f"Accuracy (total): {grade.accuracy_total}% • "
        f"Accuracy (answered): {grade.accuracy_answered}%"
    )

    table = Table(border_style="cyan")
    table.add_column("#", style="cyan")
    table.add_column("", style="white")
    table.add_column("Yours", style="white")
    table.add_column("Correct", style="white")
    table.add_column("Question", style="white")

    for i, (question, result) in enumerate(zip(quiz.questions, grade.per_question)):
        if result.is_correct:
            tag = "[green]✓[/green]"
        elif result.is_answered:
            tag = "[red]✗[/red]"
        else:
            tag = "[dim]-[/dim]"
        yours = choice_label(result.user_choice) if result.user_choice is not None else "-"
        table.add_row(str(i + 1), tag, yours, choice_label(result.correct_choice), question.text)

    console.print(table)


@app.callback()
def callback() -> None:
    """
    quizsmith - Generate quizzes from your notes and grade your answers.
    """
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


if __name__ == "__main__":
    app()
