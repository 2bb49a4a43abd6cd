"""LLM fact extractor built on Pydantic AI.

The model classifies every atomic claim in the input into one of four
networks (world fact, experience, entity summary, belief) and lists the
entities and relationships each claim mentions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from mnemos.exceptions import ExtractionError
from mnemos.llm_utils import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_SECONDS, run_agent_with_retry
from mnemos.models import Entity, ExtractionResult, Fact, FactNetwork, Relationship

from .base import FactExtractor

if TYPE_CHECKING:
    from pydantic_ai import Agent

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """You are extracting facts for an agent's long-term memory.

Split the input into atomic facts. Classify each fact into exactly one network:

- world_fact: objective information about the world or a system
  ("The API rate limit is 100 requests per minute")
- experience: something the agent or user did, tried or observed
  ("Deployed the billing service to staging")
- entity_summary: descriptive knowledge about a specific named entity
  ("Alice is the tech lead of the payments team")
- belief: an opinion, preference or decision someone holds
  ("The team prefers PostgreSQL over MySQL")

For every fact also list:
- entities: named things the fact mentions, with a short type
  (Person, Organization, Project, Technology, Place, Concept)
- relationships: directed links between those entities, with an
  UPPER_SNAKE_CASE type (WORKS_ON, DEPENDS_ON, USES, PREFERS)

Guidelines:
- Write each statement as a standalone sentence that makes sense without the input
- Keep numbers, units and settings exactly as written
- Do not invent facts that are not stated or directly implied
- Set confidence below 1.0 for hedged or uncertain statements
- Return an empty list if the input contains no facts"""


class ExtractedRelationship(BaseModel):
    """A relationship as the model reports it."""

    model_config = ConfigDict(extra="forbid")

    source: str = Field(description="Source entity name")
    target: str = Field(description="Target entity name")
    type: str = Field(description="Relationship type in UPPER_SNAKE_CASE")


class ExtractedFact(BaseModel):
    """One fact as the model reports it."""

    model_config = ConfigDict(extra="forbid")

    network: FactNetwork = Field(description="world_fact, experience, entity_summary or belief")
    statement: str = Field(description="Standalone sentence stating the fact")
    entities: list[Entity] = Field(default_factory=list)
    relationships: list[ExtractedRelationship] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class ExtractionOutput(BaseModel):
    """Structured output from the extraction agent."""

    model_config = ConfigDict(extra="forbid")

    facts: list[ExtractedFact] = Field(
        default_factory=list,
        description="Atomic facts in order of appearance",
    )


def _to_fact(extracted: ExtractedFact) -> Fact:
    return Fact(
        network=extracted.network,
        statement=extracted.statement.strip(),
        entities=[e for e in extracted.entities if e.name.strip()],
        relationships=[
            Relationship(from_=r.source, to=r.target, type=r.type) for r in extracted.relationships
        ],
        confidence=extracted.confidence,
    )


class LLMFactExtractor(FactExtractor):
    """Fact extractor backed by a Pydantic AI agent.

    The agent is created on first use so constructing the extractor never
    needs credentials. Pass ``agent`` to supply a preconfigured one.

    Attributes:
        model: Model name for Pydantic AI (e.g. "openai:gpt-4o-mini").
        timeout_seconds: Per-attempt timeout.
        max_retries: Retries for transient model failures.
    """

    def __init__(
        self,
        model: str | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        agent: Agent[None, ExtractionOutput] | None = None,
    ) -> None:
        if model is None:
            from mnemos.config import settings

            model = settings.extraction_model
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self._agent = agent

    def _get_agent(self) -> Agent[None, ExtractionOutput]:
        if self._agent is None:
            from pydantic_ai import Agent

            self._agent = Agent(
                self.model,
                output_type=ExtractionOutput,
                instructions=EXTRACTION_PROMPT,
            )
        return self._agent

    async def extract(self, text: str) -> ExtractionResult:
        """Extract facts from text with the LLM.

        Empty or whitespace-only text yields no facts without a model call.
        Facts whose statement is blank are dropped.

        Raises:
            ExtractionError: If the model call fails or times out on every attempt.
        """
        if not text.strip():
            return ExtractionResult(facts=[], raw_text=text)

        try:
            output: Any = await run_agent_with_retry(
                self._get_agent(),
                text,
                timeout_seconds=self.timeout_seconds,
                max_retries=self.max_retries,
            )
            facts = [_to_fact(f) for f in output.facts if f.statement.strip()]
        except Exception as e:
            raise ExtractionError(f"Fact extraction failed: {e}") from e

        logger.debug("Extracted %d facts from %d chars", len(facts), len(text))
        return ExtractionResult(facts=facts, raw_text=text)
