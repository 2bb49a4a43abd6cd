"""Storage backends for Mnemos.

- VectorStore / QdrantVectorStore: similarity search, the source of truth
- GraphStore / InMemoryGraphStore: episodes, entities and contradictions
"""

from .graph import GraphStore, InMemoryGraphStore
from .retry import qdrant_retry
from .vector import QdrantVectorStore, VectorStore, item_id_to_point_id

__all__ = [
    "GraphStore",
    "InMemoryGraphStore",
    "QdrantVectorStore",
    "VectorStore",
    "item_id_to_point_id",
    "qdrant_retry",
]
