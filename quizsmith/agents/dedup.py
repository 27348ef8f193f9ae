"""Deduplicator - Rejects exact and near-duplicate question texts."""

import re
from collections.abc import Iterable

SIMILARITY_THRESHOLD = 0.72
MIN_TOKEN_LENGTH = 3

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace."""
    lowered = str(text or "").lower()
    return _WHITESPACE_RE.sub(" ", _NON_ALNUM_RE.sub(" ", lowered)).strip()


def token_set(text: str) -> set[str]:
    """Get the set of words with at least three characters."""
    return {w for w in normalize_text(text).split(" ") if len(w) >= MIN_TOKEN_LENGTH}


def jaccard(a: set[str], b: set[str]) -> float:
    """
    Jaccard similarity of two token sets.

    Returns:
        Intersection over union, or 0.0 if either set is empty
    """
    if not a or not b:
        return 0.0
    inter = len(a & b)
    union = len(a) + len(b) - inter
    return inter / union if union else 0.0


class DuplicateTracker:
    """Remembers accepted question texts and flags repeats of them."""

    def __init__(self, texts: Iterable[str] = ()):
        self.seen: set[str] = set()
        self.token_sets: list[set[str]] = []
        for text in texts:
            self.add(text)

    def __len__(self) -> int:
        return len(self.token_sets)

    def add(self, text: str) -> None:
        """Remember a question text."""
        self.seen.add(normalize_text(text))
        self.token_sets.append(token_set(text))

    def is_duplicate(self, text: str) -> bool:
        """
        Check a question text against everything remembered so far.

        Args:
            text: Candidate question text

        Returns:
            True if the text is empty, already seen or too similar to a seen text
        """
        normalized = normalize_text(text)
        if not normalized:
            return True
        if normalized in self.seen:
            return True
        tokens = token_set(normalized)
        return any(jaccard(tokens, existing) >= SIMILARITY_THRESHOLD for existing in self.token_sets)

    def accept(self, text: str) -> bool:
        """
        Remember a text unless it is a duplicate.

        Returns:
            True if the text was new and is now remembered
        """
        if self.is_duplicate(text):
            return False
        self.add(text)
        return True
