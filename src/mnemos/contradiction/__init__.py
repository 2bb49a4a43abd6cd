"""Contradiction detection for Mnemos.

- LexicalContradictionDetector: numeric and enabled/disabled conflicts on word overlap
- LLMContradictionDetector: model-judged conflicts via Pydantic AI
"""

from .base import ContradictionDetector, FactMetadata, build_contradiction
from .lexical import LexicalContradictionDetector, jaccard_similarity
from .llm import ConflictAnalysis, LLMContradictionDetector

__all__ = [
    "ConflictAnalysis",
    "ContradictionDetector",
    "FactMetadata",
    "LLMContradictionDetector",
    "LexicalContradictionDetector",
    "build_contradiction",
    "jaccard_similarity",
]
