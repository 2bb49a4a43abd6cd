"""Core Mnemos memory engine.

Wires a vector store with optional graph store, fact extractor and
contradiction detector. Each optional collaborator is a plain reference
that may be None; every operation checks for it before use.

Example:
    ```python
    from mnemos import MemoryEngine

    async with MemoryEngine.create() as engine:
        result = await engine.remember("The deploy window is Tuesday 14:00 UTC")
        print(result.operation, [f.statement for f in result.facts])

        for hit in await engine.recall("when can we deploy?"):
            print(f"{hit.item.text} (score: {hit.score:.2f})")
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mnemos.logging import get_logger

from .query import QueryMixin
from .remember import RememberMixin

if TYPE_CHECKING:
    from mnemos.config import Settings
    from mnemos.contradiction import ContradictionDetector
    from mnemos.extraction import FactExtractor
    from mnemos.storage import GraphStore, VectorStore

logger = get_logger(__name__)


@dataclass
class MemoryEngine(RememberMixin, QueryMixin):
    """Unified memory engine for agents.

    Provides:
    - remember(): extract, check for contradictions, dual-write
    - recall(): semantic search over stored items
    - query_knowledge(): text search over graph episodes
    - forget() / count(): vector store maintenance

    Attributes:
        vector_store: Source of truth for memory contents.
        graph_store: Optional episode/entity graph.
        extractor: Optional fact extractor.
        contradiction_detector: Optional contradiction detector.
        default_top_k: Default recall size, also used for contradiction scans.
        default_threshold: Default minimum similarity score.
    """

    vector_store: VectorStore
    graph_store: GraphStore | None = None
    extractor: FactExtractor | None = None
    contradiction_detector: ContradictionDetector | None = None
    default_top_k: int = 5
    default_threshold: float = 0.7

    @classmethod
    def create(cls, settings: Settings | None = None) -> MemoryEngine:
        """Create a MemoryEngine with default collaborators.

        Uses Qdrant with the configured embedder, plus the LLM fact
        extractor, lexical contradiction detector and in-memory graph
        store unless disabled in settings.

        Args:
            settings: Optional settings. Uses defaults if None.

        Returns:
            Configured MemoryEngine instance (not yet initialized).

        Example:
            ```python
            settings = Settings(qdrant_url=":memory:", graph_enabled=False)
            async with MemoryEngine.create(settings) as engine:
                ...
            ```
        """
        from mnemos.config import Settings
        from mnemos.contradiction import LexicalContradictionDetector
        from mnemos.embeddings import get_embedder
        from mnemos.extraction import LLMFactExtractor
        from mnemos.storage import InMemoryGraphStore, QdrantVectorStore

        if settings is None:
            settings = Settings()

        vector_store = QdrantVectorStore(
            embedder=get_embedder(settings),
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key,
            collection_name=settings.collection_name,
            top_k=settings.recall_top_k,
            threshold=settings.recall_threshold,
        )

        extractor = None
        if settings.extraction_enabled:
            extractor = LLMFactExtractor(
                settings.extraction_model,
                timeout_seconds=settings.extraction_timeout_seconds,
                max_retries=settings.extraction_max_retries,
            )

        detector = None
        if settings.contradiction_enabled:
            detector = LexicalContradictionDetector(
                similarity_threshold=settings.contradiction_similarity_threshold,
            )

        return cls(
            vector_store=vector_store,
            graph_store=InMemoryGraphStore() if settings.graph_enabled else None,
            extractor=extractor,
            contradiction_detector=detector,
            default_top_k=settings.recall_top_k,
            default_threshold=settings.recall_threshold,
        )

    async def initialize(self) -> None:
        """Connect the vector store."""
        await self.vector_store.initialize()
        logger.info(
            "Memory engine ready",
            graph=self.graph_store is not None,
            extractor=self.extractor is not None,
            detector=self.contradiction_detector is not None,
        )

    async def close(self) -> None:
        """Close the vector store. The graph store is left to its owner."""
        await self.vector_store.close()

    async def __aenter__(self) -> MemoryEngine:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
