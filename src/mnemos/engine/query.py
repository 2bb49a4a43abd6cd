"""Query mixin for MemoryEngine.

Provides recall(), query_knowledge(), forget() and count().
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from mnemos.models import SearchResult

from .models import KnowledgeRecord

if TYPE_CHECKING:
    from mnemos.storage import GraphStore, VectorStore

_RECORD_FIELDS = ("id", "summary", "content", "timestamp", "type")


def _read_field(row: Any, name: str) -> str | None:
    """Read a field from an Episode, a flat row, or a row's properties map as text."""
    if isinstance(row, Mapping):
        value = row.get(name)
        if value is None and isinstance(row.get("properties"), Mapping):
            value = row["properties"].get(name)
    else:
        value = getattr(row, name, None)

    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def to_knowledge_record(row: Any) -> KnowledgeRecord:
    return KnowledgeRecord(**{name: _read_field(row, name) for name in _RECORD_FIELDS})


class QueryMixin:
    """Mixin providing read and delete operations.

    Expects these attributes from the base class:
    - vector_store: VectorStore
    - graph_store: GraphStore | None
    - default_top_k: int
    - default_threshold: float
    """

    vector_store: VectorStore
    graph_store: GraphStore | None
    default_top_k: int
    default_threshold: float

    async def recall(
        self,
        query: str,
        top_k: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """Find stored memories similar to the query, best first.

        Args:
            query: Natural-language query.
            top_k: Maximum results. Defaults to the engine's default_top_k.
            threshold: Minimum score. Defaults to the engine's default_threshold.
        """
        return await self.vector_store.recall(
            query,
            top_k=self.default_top_k if top_k is None else top_k,
            threshold=self.default_threshold if threshold is None else threshold,
        )

    async def query_knowledge(self, query: str, limit: int = 10) -> list[KnowledgeRecord]:
        """Search graph episodes by text.

        Returns an empty list when no graph store is configured.
        """
        if self.graph_store is None:
            return []
        rows = await self.graph_store.get_episodes_by_query(query, limit)
        return [to_knowledge_record(row) for row in rows]

    async def forget(self, memory_id: str) -> bool:
        """Delete a vector store item. Graph episodes are left in place."""
        return await self.vector_store.forget(memory_id)

    async def count(self) -> int:
        """Number of items in the vector store."""
        return await self.vector_store.count()
