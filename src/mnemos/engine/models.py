"""Result models for MemoryEngine operations.

- WriteResult: outcome of one remember() call
- ContradictionSummary: the two statements behind an UPDATE
- KnowledgeRecord: one episode returned by query_knowledge()
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mnemos.models import Fact


class MemoryOperation(str, Enum):
    """What a write did relative to existing memory.

    UPDATE means the new facts contradict a stored item. The old item is
    kept; the contradiction is advisory.
    """

    ADD = "ADD"
    UPDATE = "UPDATE"


class ContradictionSummary(BaseModel):
    """The contradiction reported on a WriteResult.

    Attributes:
        id: Contradiction id (also the graph node id when persisted).
        existing_fact: Text of the stored memory item.
        new_fact: Statement of the newly extracted fact.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    existing_fact: str
    new_fact: str


class WriteResult(BaseModel):
    """Outcome of a remember() call.

    Attributes:
        id: Write id shared by the vector item metadata and the graph episode.
        operation: ADD, or UPDATE if a contradiction was detected.
        facts: Facts extracted from the input (empty without an extractor
            or when extraction failed).
        vector_store_id: Id of the new vector store item.
        graph_store_id: Episode id, when an episode was written.
        contradiction: The first contradiction found, if any.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    operation: MemoryOperation
    facts: list[Fact] = Field(default_factory=list)
    vector_store_id: str
    graph_store_id: str | None = None
    contradiction: ContradictionSummary | None = None

    @property
    def is_update(self) -> bool:
        return self.operation is MemoryOperation.UPDATE


class KnowledgeRecord(BaseModel):
    """One episode returned by query_knowledge()."""

    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    summary: str | None = None
    content: str | None = None
    timestamp: str | None = None
    type: str | None = None
