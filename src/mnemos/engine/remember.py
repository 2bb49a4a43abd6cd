"""Remember mixin for MemoryEngine.

Provides remember(): extract facts, check them against similar stored
memories, then write the vector item and graph episode concurrently.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any

from mnemos.logging import get_logger
from mnemos.models import Episode, Fact, SearchResult, generate_write_id, utcnow

from .classification import classify_episode_type
from .models import ContradictionSummary, MemoryOperation, WriteResult

if TYPE_CHECKING:
    from datetime import datetime

    from mnemos.contradiction import ContradictionDetector
    from mnemos.extraction import FactExtractor
    from mnemos.models import Contradiction
    from mnemos.storage import GraphStore, VectorStore

logger = get_logger(__name__)


def build_episode(write_id: str, timestamp: datetime, text: str, facts: list[Fact]) -> Episode:
    """Build the graph episode for one write.

    Entity names are deduplicated keeping first-appearance order.
    """
    entity_names = list(dict.fromkeys(e.name for fact in facts for e in fact.entities))
    relationships = [str(r) for fact in facts for r in fact.relationships]
    return Episode(
        id=write_id,
        timestamp=timestamp,
        type=classify_episode_type(facts),
        summary="; ".join(fact.statement for fact in facts),
        content=text,
        entities=entity_names,
        relationships=relationships,
    )


class RememberMixin:
    """Mixin providing remember().

    Expects these attributes from the base class:
    - vector_store: VectorStore
    - graph_store: GraphStore | None
    - extractor: FactExtractor | None
    - contradiction_detector: ContradictionDetector | None
    - default_top_k: int
    - default_threshold: float
    """

    vector_store: VectorStore
    graph_store: GraphStore | None
    extractor: FactExtractor | None
    contradiction_detector: ContradictionDetector | None
    default_top_k: int
    default_threshold: float

    async def remember(
        self,
        text: str,
        metadata: dict[str, Any] | None = None,
        *,
        top_k: int | None = None,
        threshold: float | None = None,
    ) -> WriteResult:
        """Store text as a memory.

        Steps:
            1. Extract facts (failures are logged; the write continues with none).
            2. Compare world facts and beliefs with the most similar stored
               items. The first contradiction found ends the scan.
            3. Write the vector item and, when facts exist and a graph store
               is configured, the graph episode. Both writes run concurrently.

        Args:
            text: Text to remember. Stored verbatim in the vector store.
            metadata: Extra metadata for the vector item.
            top_k: Candidates recalled per fact for the contradiction scan.
            threshold: Minimum similarity for a candidate.

        Returns:
            WriteResult describing the write.

        Raises:
            StorageError: If the vector write fails.
            EmbeddingError: If the text cannot be embedded.

        Example:
            ```python
            first = await engine.remember("The timeout is 30 seconds")
            second = await engine.remember("The timeout is 60 seconds")
            assert second.operation == MemoryOperation.UPDATE
            ```
        """
        write_id = generate_write_id()
        timestamp = utcnow()
        log = logger.bind(write_id=write_id)

        facts = await self._extract_facts(text, log)

        contradiction: ContradictionSummary | None = None
        if self.contradiction_detector is not None and facts:
            try:
                contradiction = await self._find_contradiction(
                    self.contradiction_detector,
                    facts,
                    self.default_top_k if top_k is None else top_k,
                    self.default_threshold if threshold is None else threshold,
                    log,
                )
            except Exception as e:
                log.warning("Contradiction detection failed, continuing", error=str(e))

        operation = MemoryOperation.UPDATE if contradiction else MemoryOperation.ADD

        vector_metadata = {
            **(metadata or {}),
            "write_id": write_id,
            "timestamp": timestamp.isoformat(),
            "operation": operation.value,
            "fact_networks": [fact.network.value for fact in facts],
            "fact_count": len(facts),
            "fact_statements": [fact.statement for fact in facts],
        }

        graph_write = None
        if self.graph_store is not None and facts:
            episode = build_episode(write_id, timestamp, text, facts)
            graph_write = self._write_episode(self.graph_store, episode, log)

        if graph_write is not None:
            # Both writes settle before a vector failure is raised
            vector_outcome, graph_outcome = await asyncio.gather(
                self.vector_store.remember(text, vector_metadata),
                graph_write,
                return_exceptions=True,
            )
            if isinstance(vector_outcome, BaseException):
                raise vector_outcome
            if isinstance(graph_outcome, BaseException):
                raise graph_outcome
            vector_store_id, graph_store_id = vector_outcome, graph_outcome
        else:
            vector_store_id = await self.vector_store.remember(text, vector_metadata)
            graph_store_id = None

        log.info(
            "Memory written",
            operation=operation.value,
            fact_count=len(facts),
            vector_store_id=vector_store_id,
            graph_store_id=graph_store_id,
            contradiction=contradiction is not None,
        )

        return WriteResult(
            id=write_id,
            operation=operation,
            facts=facts,
            vector_store_id=vector_store_id,
            graph_store_id=graph_store_id,
            contradiction=contradiction,
        )

    async def _extract_facts(self, text: str, log: Any) -> list[Fact]:
        if self.extractor is None:
            return []
        try:
            result = await self.extractor.extract(text)
        except Exception as e:
            log.warning("Fact extraction failed, storing raw text only", error=str(e))
            return []
        log.debug("Extraction complete", fact_count=len(result.facts))
        return list(result.facts)

    async def _find_contradiction(
        self,
        detector: ContradictionDetector,
        facts: list[Fact],
        top_k: int,
        threshold: float,
        log: Any,
    ) -> ContradictionSummary | None:
        """Scan checkable facts against similar memories; stop at the first hit."""
        for fact in facts:
            if not fact.network.is_checkable:
                continue

            matches = await self.vector_store.recall(fact.statement, top_k=top_k, threshold=threshold)
            for match in matches:
                found = await self._detect(detector, match, fact, log)
                if found is None:
                    continue

                log.info(
                    "Contradiction detected",
                    contradiction_id=found.id,
                    existing=match.item.text[:80],
                    new=fact.statement[:80],
                )
                await self._persist_contradiction(found, log)
                return ContradictionSummary(
                    id=found.id,
                    existing_fact=match.item.text,
                    new_fact=fact.statement,
                )
        return None

    async def _detect(
        self,
        detector: ContradictionDetector,
        match: SearchResult,
        fact: Fact,
        log: Any,
    ) -> Contradiction | None:
        try:
            verdict = detector.detect(
                match.item.text,
                fact.statement,
                {"id": match.item.id, "source": "memory", "timestamp": match.item.timestamp.isoformat()},
                {"id": "new", "source": "input", "timestamp": utcnow().isoformat()},
            )
            if inspect.isawaitable(verdict):
                verdict = await verdict
        except Exception as e:
            log.warning("Contradiction detector failed on a comparison", item_id=match.item.id, error=str(e))
            return None
        return verdict

    async def _persist_contradiction(self, contradiction: Contradiction, log: Any) -> None:
        if self.graph_store is None:
            return
        try:
            await self.graph_store.upsert_contradiction(contradiction)
        except Exception as e:
            log.warning("Failed to persist contradiction", contradiction_id=contradiction.id, error=str(e))

    async def _write_episode(self, graph_store: GraphStore, episode: Episode, log: Any) -> str | None:
        """Upsert the episode, then link its entities one at a time.

        Returns the episode id once the episode itself is stored; entity link
        failures are logged without clearing it.
        """
        try:
            await graph_store.upsert_episode(episode)
        except Exception as e:
            log.warning("Graph episode write failed", error=str(e))
            return None

        for entity_name in episode.entities:
            try:
                await graph_store.link_episode_entity(episode.id, entity_name)
            except Exception as e:
                log.warning("Failed to link entity", entity=entity_name, error=str(e))
        return episode.id
