"""Prompt text sent to the generation model."""

from quizsmith.models.quiz import Difficulty, PlanEntry

AVOID_LIMIT = 120
AVOID_MAX_CHARS = 280

DIFFICULTY_SPECS = {
    Difficulty.EASY: [
        "EASY SPEC:",
        "- Direct recall; no inference.",
        "- For choice-based items, distractors are obviously wrong.",
        "- For non-choice items, answers are short and explicit.",
    ],
    Difficulty.MEDIUM: [
        "MEDIUM SPEC:",
        "- Understanding + paraphrase + cause/effect.",
        "- For choice-based items, distractors are plausible but not tricky.",
        "- For non-choice items, answers should be concise.",
    ],
    Difficulty.HARD: [
        "HARD SPEC:",
        "- Requires inference/connecting ideas.",
        "- For choice-based items, distractors are plausible but false per text.",
        "- For non-choice items, include a clear textual anchor in the answer.",
    ],
    Difficulty.VERY_HARD: [
        "VERY HARD SPEC:",
        "- Multi-step reasoning; connect distant parts.",
        "- For choice-based items, distractors are highly plausible.",
        "- Keep correct selections unambiguous and cite the textual clue in the explanation.",
    ],
}


def difficulty_spec(level: Difficulty) -> str:
    """Describe what a difficulty level means to the model."""
    return "\n".join(DIFFICULTY_SPECS.get(level, DIFFICULTY_SPECS[Difficulty.MEDIUM]))


def system_prompt(custom_instructions: str | None = None) -> str:
    """
    Build the fixed system rules.

    Args:
        custom_instructions: Optional user instructions appended after the rules

    Returns:
        System prompt text
    """
    base = " ".join(
        [
            "You generate quizzes using the requested question types.",
            "Output ONLY valid json.",
            "No markdown. No commentary.",
            "Use ONLY the provided source text.",
            "Follow the question schemas provided in the user prompt.",
        ]
    )
    extra = (custom_instructions or "").strip()
    if not extra:
        return base
    return f"{base} Additional instructions (must not override rules): {extra}"


def build_avoid_list(texts: list[str]) -> list[str]:
    """Cap prior question texts in count and length for a prompt."""
    return [str(t)[:AVOID_MAX_CHARS] for t in texts[:AVOID_LIMIT]]


def format_avoid_list(avoid_questions: list[str] | None) -> list[str]:
    """
    Format prior questions the model must not repeat.

    Args:
        avoid_questions: Existing question texts

    Returns:
        Bullet lines, capped in count and length
    """
    if not avoid_questions:
        return ["- (none)"]
    return [f"- {q}" for q in build_avoid_list(avoid_questions)]


def build_user_prompt(
    text: str,
    title: str | None,
    plan: list[PlanEntry],
    difficulty: Difficulty,
    choices_count: int,
    custom_instructions: str | None = None,
    avoid_questions: list[str] | None = None,
) -> str:
    """
    Build the user prompt for one generation request.

    Args:
        text: Source text, forwarded verbatim
        title: Preferred quiz title
        plan: Question type plan
        difficulty: Requested difficulty
        choices_count: Choices per question
        custom_instructions: Optional user instructions
        avoid_questions: Question texts the model must not repeat

    Returns:
        User prompt text
    """
    total_count = sum(item.quantity for item in plan)
    type_lines = [f"- {item.entry.description}: {item.quantity}" for item in plan]
    schema_lines = [f"- {item.entry.schema_shape}" for item in plan]
    custom = (custom_instructions or "").strip()

    lines = [
        "Output format: json",
        "Return a valid json object only.",
        "",
        difficulty_spec(difficulty),
        "",
        f"Number of questions: {total_count}",
        f"Choices per question: {choices_count}",
        f"Title preference: {title}" if title else "",
        "",
        "Question type mix (use this exact distribution):",
        *type_lines,
        "",
        "Question schemas (each question must match one schema):",
        *schema_lines,
        "",
        "Do not repeat or paraphrase any of these questions (write truly new ones):",
        *format_avoid_list(avoid_questions),
        "",
        "REQUIRED JSON SHAPE:",
        '{ "title": string, "questions": [ question ] }',
        "",
        "Rules:",
        "- If a schema uses choices, choices.length must match choices per question exactly.",
        "- Choices should be short phrases.",
        "- Explanation is 1-2 sentences.",
        "",
        "CUSTOM INSTRUCTIONS (rules win if conflict):" if custom else "",
        custom,
        "",
        "SOURCE TEXT (only allowed knowledge):",
        text.strip(),
    ]
    return "\n".join(line for line in lines if line)
