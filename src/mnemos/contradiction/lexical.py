"""Rule-based contradiction detection on word overlap.

Two statements conflict when they are near-identical word-for-word but
disagree on a number ("timeout is 30 seconds" vs "timeout is 60 seconds")
or on a boolean setting ("cache is enabled" vs "cache is disabled").
No model is involved, so detection is deterministic and free.
"""

from __future__ import annotations

import logging
import re

from mnemos.models import Contradiction

from .base import FactMetadata, build_contradiction

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"\d+")
_WORD = re.compile(r"\w+")

# Each pair is checked in both directions
_POLARITY_PAIRS = (
    ("enabled", "disabled"),
    ("true", "false"),
)


def jaccard_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the whitespace-separated word sets of a and b."""
    words_a = set(a.split())
    words_b = set(b.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


class LexicalContradictionDetector:
    """Detects numeric and enabled/disabled conflicts between similar statements.

    Attributes:
        similarity_threshold: Word-set Jaccard similarity a pair must exceed
            before its numbers or polarity are compared.

    Example:
        ```python
        detector = LexicalContradictionDetector()
        conflict = detector.detect("The timeout is 30 seconds", "The timeout is 60 seconds")
        assert conflict is not None
        ```
    """

    def __init__(self, similarity_threshold: float = 0.6) -> None:
        self.similarity_threshold = similarity_threshold

    def detect(
        self,
        statement_a: str,
        statement_b: str,
        meta_a: FactMetadata | None = None,
        meta_b: FactMetadata | None = None,
    ) -> Contradiction | None:
        if not self.is_contradictory(statement_a, statement_b):
            return None

        logger.debug("Lexical conflict: %r vs %r", statement_a, statement_b)
        return build_contradiction(statement_a, statement_b, meta_a, meta_b)

    def is_contradictory(self, statement_a: str, statement_b: str) -> bool:
        a = statement_a.lower()
        b = statement_b.lower()
        return self._has_numeric_conflict(a, b) or self._has_polarity_conflict(a, b)

    def _has_numeric_conflict(self, a: str, b: str) -> bool:
        numbers_a = _NUMBER.findall(a)
        numbers_b = _NUMBER.findall(b)
        if not numbers_a or not numbers_b:
            return False
        return jaccard_similarity(a, b) > self.similarity_threshold and numbers_a != numbers_b

    def _has_polarity_conflict(self, a: str, b: str) -> bool:
        # Whole words only: "enabled" is a substring of "disabled"
        words_a = set(_WORD.findall(a))
        words_b = set(_WORD.findall(b))
        for positive, negative in _POLARITY_PAIRS:
            opposed = (positive in words_a and negative in words_b) or (
                negative in words_a and positive in words_b
            )
            if opposed and jaccard_similarity(a, b) > self.similarity_threshold:
                return True
        return False
