"""Contradiction model - a conflict between a new fact and a stored memory."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import generate_id, utcnow


class FactRef(BaseModel):
    """One side of a contradiction: a statement and where it came from."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default="unknown")
    statement: str
    source: str = Field(default="unknown")
    timestamp: str = Field(default_factory=lambda: utcnow().isoformat())


class Contradiction(BaseModel):
    """A detected conflict between two statements.

    Detectors fill in the two facts; the resolution fields stay empty
    until an external resolver picks a winner.

    Attributes:
        id: Unique identifier for this contradiction.
        detected_at: When the conflict was detected.
        fact_a: The previously stored statement.
        fact_b: The newly extracted statement.
        resolution_winner: Id of the winning fact, once resolved.
        resolution_reasoning: Why the winner was chosen, once resolved.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: generate_id("conflict", "-"))
    detected_at: datetime = Field(default_factory=utcnow)
    fact_a: FactRef
    fact_b: FactRef
    resolution_winner: str | None = None
    resolution_reasoning: str | None = None

    @property
    def resolved(self) -> bool:
        return self.resolution_winner is not None

    def to_record(self) -> dict[str, Any]:
        """Flatten into the property map a graph node stores."""
        return {
            "id": self.id,
            "detected_at": self.detected_at.isoformat(),
            "resolution_winner": self.resolution_winner,
            "resolution_reasoning": self.resolution_reasoning,
            "fact_a_id": self.fact_a.id,
            "fact_a_statement": self.fact_a.statement,
            "fact_a_source": self.fact_a.source,
            "fact_a_timestamp": self.fact_a.timestamp,
            "fact_b_id": self.fact_b.id,
            "fact_b_statement": self.fact_b.statement,
            "fact_b_source": self.fact_b.source,
            "fact_b_timestamp": self.fact_b.timestamp,
        }
