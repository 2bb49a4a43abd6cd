"""Fact model - one atomic claim extracted from input text."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FactNetwork(str, Enum):
    """Taxonomy bucket a fact belongs to.

    Only WORLD_FACT and BELIEF are ever checked for contradictions;
    experiences and entity summaries are append-only.
    """

    WORLD_FACT = "world_fact"  # General truths
    EXPERIENCE = "experience"  # Things the agent did or observed
    ENTITY_SUMMARY = "entity_summary"  # Knowledge about a named entity
    BELIEF = "belief"  # A held opinion or preference

    @property
    def is_checkable(self) -> bool:
        """Whether facts in this network can contradict stored memories."""
        return self in (FactNetwork.WORLD_FACT, FactNetwork.BELIEF)


class Entity(BaseModel):
    """A named entity referenced by a fact."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(description="Entity name as it appears in the text")
    type: str = Field(description="Entity type, e.g. Person, Project, Technology")


class Relationship(BaseModel):
    """A directed, typed relationship between two entities."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    from_: str = Field(alias="from", description="Source entity name")
    to: str = Field(description="Target entity name")
    type: str = Field(description="Relationship type, e.g. WORKS_ON, DEPENDS_ON")

    def __str__(self) -> str:
        """Flattened form used on graph episodes: ``from-[TYPE]->to``."""
        return f"{self.from_}-[{self.type}]->{self.to}"


class Fact(BaseModel):
    """One atomic claim extracted from input text.

    Facts are created fresh on every remember() call and never mutated.
    They are not persisted themselves; only their effects are written
    into the vector and graph stores.

    Attributes:
        network: Which of the four networks this fact belongs to.
        statement: The fact as a natural-language sentence.
        entities: Entities referenced, in order of mention.
        relationships: Relationships between entities, in order of mention.
        confidence: Extractor's confidence (carried through, never gated on).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    network: FactNetwork = Field(description="Fact network classification")
    statement: str = Field(description="The fact as a natural-language sentence")
    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    def __str__(self) -> str:
        return f"Fact({self.network.value}: {self.statement})"


class ExtractionResult(BaseModel):
    """Output of a fact extractor for one piece of text."""

    model_config = ConfigDict(extra="forbid")

    facts: list[Fact] = Field(default_factory=list)
    raw_text: str = Field(default="", description="The text that was extracted from")
