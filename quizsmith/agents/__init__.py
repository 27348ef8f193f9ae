"""Pipeline stages for quiz generation."""

# Note: the generator and collector nodes import graph state; import them
# directly from their modules to avoid circular imports.

from .dedup import DuplicateTracker
from .extractor import extract_output_text
from .grading import compute_grade
from .normalizer import normalize_question
from .planner import build_question_type_plan
from .randomizer import randomize_question_choices, randomize_questions
from .recovery import safe_parse_json

__all__ = [
    "build_question_type_plan",
    "extract_output_text",
    "safe_parse_json",
    "normalize_question",
    "DuplicateTracker",
    "randomize_question_choices",
    "randomize_questions",
    "compute_grade",
]
