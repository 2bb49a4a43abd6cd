"""Vector store item models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import utcnow


class MemoryItem(BaseModel):
    """One unit of vector-store storage.

    Items are immutable once written. An "update" is a new item plus a
    recorded contradiction, never an in-place change.

    Attributes:
        id: Store-assigned unique identifier.
        text: The original input text (not an extracted fact statement).
        metadata: Free-form metadata, including write id, operation and
            fact network labels when written by the engine.
        timestamp: Creation time.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)

    def __str__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"MemoryItem({self.id}: {preview!r})"


class SearchResult(BaseModel):
    """A recalled item with its similarity score."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    item: MemoryItem
    score: float
