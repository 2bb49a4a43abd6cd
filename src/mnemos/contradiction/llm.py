"""LLM contradiction detection with Pydantic AI.

Catches conflicts a word-overlap rule cannot: paraphrases, implicit
inconsistencies ("vegetarian" vs "favourite steak restaurant") and
temporal supersession ("works at Acme" vs "left Acme last month").
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from mnemos.llm_utils import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_SECONDS, run_agent_with_retry
from mnemos.models import Contradiction

from .base import FactMetadata, build_contradiction

if TYPE_CHECKING:
    from pydantic_ai import Agent

logger = logging.getLogger(__name__)


CONFLICT_PROMPT = """You are a conflict detection assistant for an agent memory system.

Given a stored memory (A) and a new fact (B), determine if they contradict each other.

Types of conflicts:
- direct: explicit contradiction ("timeout is 30 seconds" vs "timeout is 60 seconds")
- implicit: logical inconsistency ("is vegetarian" vs "favourite dish is steak")
- temporal: one supersedes the other ("works at Acme" vs "left Acme last month")

Guidelines:
- Focus on factual contradictions, not differences in detail
- Same topic but different aspects is not a conflict
- High confidence (>0.8) only for clear, explicit contradictions
- Medium confidence (0.5-0.8) for implicit or uncertain conflicts
- Low confidence (<0.5) for potential but unclear conflicts"""


class ConflictAnalysis(BaseModel):
    """LLM output for conflict analysis between two statements."""

    model_config = ConfigDict(extra="forbid")

    is_conflict: bool = Field(description="Whether the statements conflict")
    conflict_type: str = Field(
        default="none",
        description="direct, implicit, temporal or none",
    )
    confidence: float = Field(
        ge=0.0, le=1.0, default=0.0, description="Confidence in the verdict"
    )
    explanation: str = Field(default="", description="Why they conflict or don't")


def build_conflict_prompt(statement_a: str, statement_b: str) -> str:
    return f"""Analyze these two statements for conflicts:

MEMORY A (stored):
{statement_a}

FACT B (new):
{statement_b}

Determine if they contradict each other and explain why."""


class LLMContradictionDetector:
    """Contradiction detector that asks a model for a ConflictAnalysis.

    ``detect`` is a coroutine; the engine awaits it. Model failures raise
    (LLMCallError), which the engine treats as "no contradiction".

    Attributes:
        model: Model name for Pydantic AI.
        min_confidence: Analyses below this confidence are not reported.
    """

    def __init__(
        self,
        model: str = "openai:gpt-4o-mini",
        *,
        min_confidence: float = 0.5,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        agent: Agent[None, ConflictAnalysis] | None = None,
    ) -> None:
        self.model = model
        self.min_confidence = min_confidence
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self._agent = agent

    def _get_agent(self) -> Agent[None, ConflictAnalysis]:
        if self._agent is None:
            from pydantic_ai import Agent

            self._agent = Agent(
                self.model,
                output_type=ConflictAnalysis,
                system_prompt=CONFLICT_PROMPT,
            )
        return self._agent

    async def analyze(self, statement_a: str, statement_b: str) -> ConflictAnalysis:
        """Run the conflict agent on a pair of statements."""
        return await run_agent_with_retry(
            self._get_agent(),
            build_conflict_prompt(statement_a, statement_b),
            timeout_seconds=self.timeout_seconds,
            max_retries=self.max_retries,
        )

    async def detect(
        self,
        statement_a: str,
        statement_b: str,
        meta_a: FactMetadata | None = None,
        meta_b: FactMetadata | None = None,
    ) -> Contradiction | None:
        analysis = await self.analyze(statement_a, statement_b)
        if not analysis.is_conflict or analysis.confidence < self.min_confidence:
            return None

        logger.debug(
            "LLM conflict (%s, confidence=%.2f): %s",
            analysis.conflict_type,
            analysis.confidence,
            analysis.explanation,
        )
        return build_contradiction(statement_a, statement_b, meta_a, meta_b)
