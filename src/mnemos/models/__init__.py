"""Data models for Mnemos.

Memory records:
    - MemoryItem / SearchResult: vector-store storage and recall results
    - Episode / EpisodeType: graph-store record of one write event

Extraction:
    - Fact, FactNetwork, Entity, Relationship, ExtractionResult

Conflicts:
    - Contradiction, FactRef
"""

from .base import generate_id, generate_write_id, utcnow
from .contradiction import Contradiction, FactRef
from .episode import Episode, EpisodeType
from .fact import Entity, ExtractionResult, Fact, FactNetwork, Relationship
from .memory import MemoryItem, SearchResult

__all__ = [
    # Helpers
    "generate_id",
    "generate_write_id",
    "utcnow",
    # Extraction
    "Entity",
    "ExtractionResult",
    "Fact",
    "FactNetwork",
    "Relationship",
    # Storage
    "Episode",
    "EpisodeType",
    "MemoryItem",
    "SearchResult",
    # Conflicts
    "Contradiction",
    "FactRef",
]
