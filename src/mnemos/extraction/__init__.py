"""Fact extraction for Mnemos.

Turns free text into facts classified into four networks:
world_fact, experience, entity_summary and belief.
"""

from .base import FactExtractor
from .llm import EXTRACTION_PROMPT, ExtractedFact, ExtractionOutput, LLMFactExtractor

__all__ = [
    "EXTRACTION_PROMPT",
    "ExtractedFact",
    "ExtractionOutput",
    "FactExtractor",
    "LLMFactExtractor",
]
