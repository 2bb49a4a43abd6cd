"""Episode model - graph-store record of one write event."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .base import utcnow


class EpisodeType(str, Enum):
    """Kind of write event, derived from the dominant fact network."""

    CONVERSATION = "conversation"
    OBSERVATION = "observation"
    ACTION = "action"
    DECISION = "decision"
    LEARNING = "learning"


class Episode(BaseModel):
    """One unit of graph-store storage.

    Created once per remember() call that extracted at least one fact,
    and only when a graph store is configured. Its id is the write id, so
    an operator can correlate it with the vector item without a join table.
    Episodes are never deleted by the engine.

    Attributes:
        id: Write id of the remember() call.
        timestamp: When the write happened.
        type: Episode type (see classify_episode_type).
        summary: Fact statements joined with "; ".
        content: The raw input text.
        entities: Distinct entity names in first-appearance order.
        relationships: Flattened relationship strings.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    timestamp: datetime = Field(default_factory=utcnow)
    type: EpisodeType
    summary: str
    content: str
    entities: list[str] = Field(default_factory=list)
    relationships: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        preview = self.summary[:50] + "..." if len(self.summary) > 50 else self.summary
        return f"Episode({self.type.value}: {preview!r})"
