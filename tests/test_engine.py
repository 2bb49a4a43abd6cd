"""Tests for MemoryEngine orchestration."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import EchoExtractor, FailingExtractor, StaticExtractor

from mnemos.contradiction import LexicalContradictionDetector
from mnemos.engine import MemoryEngine, MemoryOperation
from mnemos.exceptions import StorageError
from mnemos.models import Contradiction, Entity, EpisodeType, Fact, FactNetwork, FactRef, Relationship
from mnemos.storage import GraphStore, InMemoryGraphStore, VectorStore


def world_fact(statement: str, *entities: str) -> Fact:
    return Fact(
        network=FactNetwork.WORLD_FACT,
        statement=statement,
        entities=[Entity(name=e, type="Thing") for e in entities],
    )


def always_conflicts() -> MagicMock:
    """Detector that flags every comparison."""
    detector = MagicMock()
    detector.detect.side_effect = lambda a, b, meta_a=None, meta_b=None: Contradiction(
        fact_a=FactRef(statement=a, **(meta_a or {})),
        fact_b=FactRef(statement=b, **(meta_b or {})),
    )
    return detector


class TestRememberWithoutExtractor:
    """remember() with only a vector store."""

    async def test_stores_raw_text_as_add(self, vector_store):
        """Should store the raw text and report ADD with no facts."""
        engine = MemoryEngine(vector_store=vector_store)

        result = await engine.remember("Staging runs on Postgres 16")

        assert result.operation == MemoryOperation.ADD
        assert result.facts == []
        assert result.graph_store_id is None
        assert result.contradiction is None
        assert await engine.count() == 1

        hits = await engine.recall("Staging runs on Postgres 16")
        assert hits[0].item.id == result.vector_store_id
        assert hits[0].item.text == "Staging runs on Postgres 16"

    async def test_many_texts_all_add(self, vector_store):
        """Every write without an extractor is a plain ADD."""
        engine = MemoryEngine(vector_store=vector_store)

        texts = ["alpha beta", "gamma delta", "The timeout is 30 seconds", "The timeout is 60 seconds"]
        for text in texts:
            result = await engine.remember(text)
            assert result.operation == MemoryOperation.ADD
            assert result.facts == []

        assert await engine.count() == len(texts)

    async def test_detector_without_facts_is_not_used(self, vector_store):
        """A detector has nothing to check when no facts were extracted."""
        detector = always_conflicts()
        engine = MemoryEngine(vector_store=vector_store, contradiction_detector=detector)

        await engine.remember("The timeout is 30 seconds")
        result = await engine.remember("The timeout is 60 seconds")

        assert result.operation == MemoryOperation.ADD
        detector.detect.assert_not_called()


class TestRememberMetadata:
    """Metadata written alongside the vector item."""

    async def test_vector_metadata(self, vector_store):
        """Should merge caller metadata with write metadata."""
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=StaticExtractor([world_fact("Redis is the cache", "Redis")]),
        )

        result = await engine.remember("We cache with Redis", {"source": "chat", "tags": ["infra"]})

        hits = await engine.recall("We cache with Redis")
        metadata = hits[0].item.metadata
        assert metadata["source"] == "chat"
        assert metadata["tags"] == ["infra"]
        assert metadata["write_id"] == result.id
        assert metadata["operation"] == "ADD"
        assert metadata["fact_count"] == 1
        assert metadata["fact_networks"] == ["world_fact"]
        assert metadata["fact_statements"] == ["Redis is the cache"]
        assert "timestamp" in metadata

    async def test_write_ids_are_unique(self, vector_store):
        engine = MemoryEngine(vector_store=vector_store)

        ids = {(await engine.remember(f"note number {i}")).id for i in range(5)}

        assert len(ids) == 5
        assert all(i.startswith("mem_") for i in ids)


class TestExtractionFailure:
    """Extraction errors never fail a write."""

    async def test_failing_extractor_still_stores(self, vector_store):
        """Should store the text with no facts when extraction raises."""
        engine = MemoryEngine(vector_store=vector_store, extractor=FailingExtractor())

        before = await engine.count()
        result = await engine.remember("The deploy window is Tuesday")

        assert result.facts == []
        assert result.operation == MemoryOperation.ADD
        assert await engine.count() == before + 1

    async def test_every_degradable_failure_at_once(self, vector_store):
        """Failing extractor, detector and graph still leave a plain ADD."""
        graph = AsyncMock(spec=GraphStore)
        graph.upsert_episode.side_effect = RuntimeError("graph down")
        detector = MagicMock()
        detector.detect.side_effect = RuntimeError("detector down")
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph,
            extractor=FailingExtractor(),
            contradiction_detector=detector,
        )

        result = await engine.remember("Anything at all")

        assert result.facts == []
        assert result.operation == MemoryOperation.ADD
        assert result.vector_store_id
        assert result.graph_store_id is None
        assert result.contradiction is None


class TestDualWrite:
    """Vector item plus graph episode."""

    async def test_episode_and_entity_links(self, vector_store, graph_store):
        """Should write one episode linked to every referenced entity."""
        facts = [
            world_fact("Alice maintains the billing service", "Alice", "billing service"),
            Fact(
                network=FactNetwork.ENTITY_SUMMARY,
                statement="The billing service depends on Stripe",
                entities=[Entity(name="billing service", type="Project"), Entity(name="Stripe", type="Organization")],
                relationships=[Relationship(from_="billing service", to="Stripe", type="DEPENDS_ON")],
            ),
        ]
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph_store,
            extractor=StaticExtractor(facts),
        )

        before = await engine.count()
        result = await engine.remember("Alice maintains billing, which depends on Stripe")

        assert await engine.count() == before + 1
        assert graph_store.episode_count == 1
        assert result.graph_store_id == result.id

        linked = await graph_store.get_episode_entities(result.id)
        assert set(linked) == {"Alice", "billing service", "Stripe"}

        episode = await graph_store.get_episode(result.id)
        assert episode is not None
        assert episode.summary == "Alice maintains the billing service; The billing service depends on Stripe"
        assert episode.content == "Alice maintains billing, which depends on Stripe"
        assert episode.entities == ["Alice", "billing service", "Stripe"]
        assert episode.relationships == ["billing service-[DEPENDS_ON]->Stripe"]

    async def test_no_episode_without_facts(self, vector_store, graph_store):
        """A graph store alone does not produce episodes."""
        engine = MemoryEngine(vector_store=vector_store, graph_store=graph_store)

        result = await engine.remember("Just some text")

        assert graph_store.episode_count == 0
        assert result.graph_store_id is None

    async def test_writes_run_concurrently(self, vector_store):
        """Both writes must be in flight at the same time."""
        vector_started = asyncio.Event()
        graph_started = asyncio.Event()

        original_remember = vector_store.remember

        async def vector_remember(text, metadata=None):
            vector_started.set()
            await asyncio.wait_for(graph_started.wait(), timeout=2)
            return await original_remember(text, metadata)

        vector_store.remember = vector_remember

        class RendezvousGraph(InMemoryGraphStore):
            async def upsert_episode(self, episode):
                graph_started.set()
                await asyncio.wait_for(vector_started.wait(), timeout=2)
                await super().upsert_episode(episode)

        graph = RendezvousGraph()
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph,
            extractor=EchoExtractor(FactNetwork.EXPERIENCE),
        )

        result = await engine.remember("Rotated the API keys")

        assert result.graph_store_id == result.id
        assert graph.episode_count == 1

    async def test_graph_failure_degrades(self, vector_store):
        """A failing graph write leaves graph_store_id unset but the write succeeds."""
        graph = AsyncMock(spec=GraphStore)
        graph.upsert_episode.side_effect = RuntimeError("graph down")
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph,
            extractor=EchoExtractor(),
        )

        result = await engine.remember("Postgres listens on 5432")

        assert result.vector_store_id
        assert result.graph_store_id is None
        assert await engine.count() == 1
        graph.link_episode_entity.assert_not_called()

    async def test_link_failure_keeps_episode_id(self, vector_store):
        """Entity link errors are logged; the episode id is still reported."""
        graph = AsyncMock(spec=GraphStore)
        graph.link_episode_entity.side_effect = RuntimeError("edge write failed")
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph,
            extractor=EchoExtractor(entities=[Entity(name="Postgres", type="Technology")]),
        )

        result = await engine.remember("Postgres listens on 5432")

        assert result.graph_store_id == result.id
        graph.link_episode_entity.assert_awaited_once_with(result.id, "Postgres")

    async def test_vector_failure_propagates(self):
        """The vector store is the source of truth, so its errors fail the call."""
        store = AsyncMock(spec=VectorStore)
        store.remember.side_effect = StorageError("qdrant unreachable")
        engine = MemoryEngine(vector_store=store)

        with pytest.raises(StorageError, match="qdrant unreachable"):
            await engine.remember("Anything")

    async def test_vector_failure_waits_for_graph_write(self, graph_store):
        """A slow graph write has finished by the time the vector error surfaces."""
        store = AsyncMock(spec=VectorStore)
        store.remember.side_effect = StorageError("qdrant unreachable")
        upsert = graph_store.upsert_episode

        async def slow_upsert(episode):
            await asyncio.sleep(0.05)
            await upsert(episode)

        graph_store.upsert_episode = slow_upsert
        engine = MemoryEngine(vector_store=store, graph_store=graph_store, extractor=EchoExtractor())

        with pytest.raises(StorageError, match="qdrant unreachable"):
            await engine.remember("Postgres listens on 5432")

        assert graph_store.episode_count == 1


class TestContradictions:
    """Contradiction detection during remember()."""

    async def test_numeric_conflict_scenario(self, vector_store):
        """30 seconds then 60 seconds should be an UPDATE that keeps both items."""
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(FactNetwork.WORLD_FACT),
            contradiction_detector=LexicalContradictionDetector(),
        )

        first = await engine.remember("The timeout is 30 seconds")
        second = await engine.remember("The timeout is 60 seconds")

        assert first.operation == MemoryOperation.ADD
        assert second.operation == MemoryOperation.UPDATE
        assert second.contradiction is not None
        assert "30 seconds" in second.contradiction.existing_fact
        assert "60 seconds" in second.contradiction.new_fact
        assert await engine.count() == 2

    async def test_statements_reported_verbatim(self, vector_store):
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(FactNetwork.BELIEF),
            contradiction_detector=always_conflicts(),
        )

        await engine.remember("The team prefers tabs")
        result = await engine.remember("The team prefers spaces")

        assert result.operation == MemoryOperation.UPDATE
        assert result.contradiction.existing_fact == "The team prefers tabs"
        assert result.contradiction.new_fact == "The team prefers spaces"

    async def test_unrelated_facts_are_add(self, vector_store):
        """A detector that finds nothing never produces an UPDATE."""
        detector = MagicMock()
        detector.detect.return_value = None
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(),
            contradiction_detector=detector,
        )

        for text in ["The cache is Redis", "The cache is warm", "The cache is shared"]:
            result = await engine.remember(text)
            assert result.operation == MemoryOperation.ADD
            assert result.contradiction is None

    async def test_detector_metadata(self, vector_store):
        """The stored item is side A and the new fact side B."""
        detector = MagicMock()
        detector.detect.return_value = None
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(),
            contradiction_detector=detector,
        )

        first = await engine.remember("The timeout is 30 seconds")
        await engine.remember("The timeout is 60 seconds")

        args = detector.detect.call_args.args
        assert args[0] == "The timeout is 30 seconds"
        assert args[1] == "The timeout is 60 seconds"
        assert args[2]["id"] == first.vector_store_id
        assert args[2]["source"] == "memory"
        assert args[3]["id"] == "new"
        assert args[3]["source"] == "input"

    async def test_only_world_facts_and_beliefs_are_checked(self, vector_store):
        detector = always_conflicts()
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(FactNetwork.EXPERIENCE),
            contradiction_detector=detector,
        )

        await engine.remember("Deployed v2.0 to production")
        result = await engine.remember("Deployed v2.0 to production")

        assert result.operation == MemoryOperation.ADD
        detector.detect.assert_not_called()

    async def test_first_hit_stops_scan(self, vector_store):
        """At most one contradiction per call, even when several would match."""
        detector = always_conflicts()
        await vector_store.remember("The timeout is 30 seconds")
        await vector_store.remember("The retry limit is 3")
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=StaticExtractor(
                [world_fact("The timeout is 60 seconds"), world_fact("The retry limit is 5")]
            ),
            contradiction_detector=detector,
        )

        result = await engine.remember("Timeout 60 seconds, retry limit 5")

        assert result.operation == MemoryOperation.UPDATE
        assert result.contradiction.new_fact == "The timeout is 60 seconds"
        assert detector.detect.call_count == 1

    async def test_detector_error_counts_as_no_contradiction(self, vector_store):
        detector = MagicMock()
        detector.detect.side_effect = ValueError("bad comparison")
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(),
            contradiction_detector=detector,
        )

        await engine.remember("The timeout is 30 seconds")
        result = await engine.remember("The timeout is 60 seconds")

        assert result.operation == MemoryOperation.ADD
        assert await engine.count() == 2

    async def test_detector_error_moves_on_to_next_candidate(self, vector_store):
        """A failure on one comparison does not end the scan."""
        await vector_store.remember("The timeout is 30 seconds")
        await vector_store.remember("The timeout is 45 seconds")

        calls = []

        def detect(a, b, meta_a=None, meta_b=None):
            calls.append(a)
            if len(calls) == 1:
                raise ValueError("flaky")
            return Contradiction(fact_a=FactRef(statement=a), fact_b=FactRef(statement=b))

        detector = MagicMock()
        detector.detect.side_effect = detect
        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(),
            contradiction_detector=detector,
        )

        result = await engine.remember("The timeout is 60 seconds")

        assert result.operation == MemoryOperation.UPDATE
        assert len(calls) == 2
        assert result.contradiction.existing_fact == calls[1]

    async def test_async_detector(self, vector_store):
        """Detectors may return an awaitable verdict."""

        class AsyncDetector:
            async def detect(self, a, b, meta_a=None, meta_b=None):
                await asyncio.sleep(0)
                return Contradiction(fact_a=FactRef(statement=a), fact_b=FactRef(statement=b))

        engine = MemoryEngine(
            vector_store=vector_store,
            extractor=EchoExtractor(),
            contradiction_detector=AsyncDetector(),
        )

        await engine.remember("The timeout is 30 seconds")
        result = await engine.remember("The timeout is 60 seconds")

        assert result.operation == MemoryOperation.UPDATE

    async def test_recall_failure_during_scan_degrades(self):
        """A vector read failing mid-scan is logged, and the write still happens."""
        store = AsyncMock(spec=VectorStore)
        store.recall.side_effect = StorageError("search failed")
        store.remember.return_value = "mem_1"
        engine = MemoryEngine(
            vector_store=store,
            extractor=EchoExtractor(),
            contradiction_detector=always_conflicts(),
        )

        result = await engine.remember("The timeout is 60 seconds")

        assert result.operation == MemoryOperation.ADD
        assert result.vector_store_id == "mem_1"

    async def test_scan_uses_call_overrides(self):
        store = AsyncMock(spec=VectorStore)
        store.recall.return_value = []
        store.remember.return_value = "mem_1"
        engine = MemoryEngine(
            vector_store=store,
            extractor=EchoExtractor(),
            contradiction_detector=always_conflicts(),
            default_top_k=5,
            default_threshold=0.7,
        )

        await engine.remember("The timeout is 60 seconds")
        store.recall.assert_awaited_with("The timeout is 60 seconds", top_k=5, threshold=0.7)

        await engine.remember("The timeout is 60 seconds", top_k=2, threshold=0.9)
        store.recall.assert_awaited_with("The timeout is 60 seconds", top_k=2, threshold=0.9)

    async def test_contradiction_persisted_to_graph(self, vector_store, graph_store):
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph_store,
            extractor=EchoExtractor(),
            contradiction_detector=LexicalContradictionDetector(),
        )

        await engine.remember("The timeout is 30 seconds")
        result = await engine.remember("The timeout is 60 seconds")

        pending = await graph_store.get_unresolved_contradictions()
        assert len(pending) == 1
        assert pending[0].id == result.contradiction.id
        assert pending[0].fact_a.statement == "The timeout is 30 seconds"
        assert pending[0].fact_b.statement == "The timeout is 60 seconds"

    async def test_contradiction_persist_failure_is_ignored(self, vector_store):
        graph = AsyncMock(spec=GraphStore)
        graph.upsert_contradiction.side_effect = RuntimeError("graph down")
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph,
            extractor=EchoExtractor(),
            contradiction_detector=LexicalContradictionDetector(),
        )

        await engine.remember("The timeout is 30 seconds")
        result = await engine.remember("The timeout is 60 seconds")

        assert result.operation == MemoryOperation.UPDATE
        graph.upsert_contradiction.assert_awaited_once()


class TestCancellation:
    """Cancelling remember() aborts in-flight work."""

    async def test_cancel_during_dual_write(self, vector_store):
        """Cancelling the caller cancels both child writes."""
        vector_started = asyncio.Event()
        graph_started = asyncio.Event()
        graph_cancelled = asyncio.Event()

        async def hanging_remember(text, metadata=None):
            vector_started.set()
            await asyncio.Event().wait()

        vector_store.remember = hanging_remember

        class HangingGraph(InMemoryGraphStore):
            async def upsert_episode(self, episode):
                graph_started.set()
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    graph_cancelled.set()
                    raise

        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=HangingGraph(),
            extractor=EchoExtractor(),
        )

        task = asyncio.create_task(engine.remember("Never finishes"))
        await asyncio.wait_for(vector_started.wait(), timeout=2)
        await asyncio.wait_for(graph_started.wait(), timeout=2)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.wait_for(graph_cancelled.wait(), timeout=2)

    async def test_cancel_during_extraction_is_not_swallowed(self, vector_store):
        """Cancellation is not treated as an extraction failure."""
        started = asyncio.Event()

        class SlowExtractor(EchoExtractor):
            async def extract(self, text):
                started.set()
                await asyncio.Event().wait()

        engine = MemoryEngine(vector_store=vector_store, extractor=SlowExtractor())

        task = asyncio.create_task(engine.remember("Never extracted"))
        await asyncio.wait_for(started.wait(), timeout=2)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert await engine.count() == 0

    async def test_timeout_aborts_write(self, vector_store):
        async def slow_remember(text, metadata=None):
            await asyncio.sleep(10)

        vector_store.remember = slow_remember
        engine = MemoryEngine(vector_store=vector_store)

        with pytest.raises(TimeoutError):
            async with asyncio.timeout(0.05):
                await engine.remember("Too slow")


class TestRecall:
    """recall() ordering and limits."""

    async def test_ordering_and_limits(self, vector_store):
        engine = MemoryEngine(vector_store=vector_store)
        for text in [
            "redis cache timeout",
            "redis cache timeout seconds",
            "redis cache",
            "postgres primary replica",
            "redis cache timeout seconds config",
        ]:
            await engine.remember(text)

        results = await engine.recall("redis cache timeout", top_k=2, threshold=0.5)

        assert len(results) <= 2
        assert all(r.score >= 0.5 for r in results)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert results[0].item.text == "redis cache timeout"

    async def test_uses_engine_defaults(self):
        store = AsyncMock(spec=VectorStore)
        store.recall.return_value = []
        engine = MemoryEngine(vector_store=store, default_top_k=3, default_threshold=0.4)

        await engine.recall("anything")

        store.recall.assert_awaited_once_with("anything", top_k=3, threshold=0.4)

    async def test_threshold_filters_everything(self, vector_store):
        engine = MemoryEngine(vector_store=vector_store)
        await engine.remember("completely unrelated words")

        assert await engine.recall("postgres replica lag", threshold=0.7) == []


class TestForgetAndCount:
    async def test_forget_known_id(self, vector_store):
        engine = MemoryEngine(vector_store=vector_store)
        result = await engine.remember("Temporary note")
        before = await engine.count()

        assert await engine.forget(result.vector_store_id) is True
        assert await engine.count() == before - 1

    async def test_forget_unknown_id(self, vector_store):
        engine = MemoryEngine(vector_store=vector_store)
        await engine.remember("Keep me")
        before = await engine.count()

        assert await engine.forget("mem_does_not_exist") is False
        assert await engine.count() == before

    async def test_forget_leaves_graph_episode(self, vector_store, graph_store):
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph_store,
            extractor=EchoExtractor(),
        )
        result = await engine.remember("Queue depth alarm is 500")

        await engine.forget(result.vector_store_id)

        assert graph_store.episode_count == 1


class TestQueryKnowledge:
    async def test_deployment_scenario(self, vector_store, graph_store):
        """An experience fact is recorded as an episode findable by text."""
        engine = MemoryEngine(
            vector_store=vector_store,
            graph_store=graph_store,
            extractor=EchoExtractor(FactNetwork.EXPERIENCE),
        )

        await engine.remember("Deployed v2.0 to production")
        records = await engine.query_knowledge("deployed")

        assert len(records) == 1
        assert "Deployed v2.0 to production" in records[0].summary
        assert records[0].type == "action"

    async def test_without_graph_store(self, vector_store):
        engine = MemoryEngine(vector_store=vector_store, extractor=EchoExtractor())
        await engine.remember("Deployed v2.0 to production")

        assert await engine.query_knowledge("deployed") == []

    async def test_reads_row_properties(self, vector_store):
        """Rows may carry fields directly or under a properties map."""
        graph = AsyncMock(spec=GraphStore)
        graph.get_episodes_by_query.return_value = [
            {"id": "mem_1", "summary": "flat row", "content": "a", "timestamp": "t1", "type": "learning"},
            {"properties": {"id": "mem_2", "summary": "nested row", "content": "b", "type": "action"}},
        ]
        engine = MemoryEngine(vector_store=vector_store, graph_store=graph)

        records = await engine.query_knowledge("row", limit=5)

        graph.get_episodes_by_query.assert_awaited_once_with("row", 5)
        assert [r.id for r in records] == ["mem_1", "mem_2"]
        assert records[1].summary == "nested row"
        assert records[1].timestamp is None

    async def test_non_string_fields_become_text(self, vector_store):
        when = datetime(2026, 1, 5, 9, 30, tzinfo=UTC)
        graph = AsyncMock(spec=GraphStore)
        graph.get_episodes_by_query.return_value = [
            {"properties": {"id": 42, "summary": "numeric id", "timestamp": when, "type": EpisodeType.ACTION}},
        ]
        engine = MemoryEngine(vector_store=vector_store, graph_store=graph)

        (record,) = await engine.query_knowledge("numeric")

        assert record.id == "42"
        assert record.timestamp == "2026-01-05T09:30:00+00:00"
        assert record.type == "action"
        assert record.content is None


class TestLifecycle:
    async def test_context_manager_closes_vector_store(self):
        store = AsyncMock(spec=VectorStore)

        async with MemoryEngine(vector_store=store) as engine:
            assert engine.vector_store is store

        store.initialize.assert_awaited_once()
        store.close.assert_awaited_once()

    def test_create_from_settings(self):
        from mnemos.config import Settings
        from mnemos.extraction import LLMFactExtractor
        from mnemos.storage import QdrantVectorStore

        settings = Settings(
            qdrant_url=":memory:",
            embedding_provider="fastembed",
            embedding_model="BAAI/bge-small-en-v1.5",
            recall_top_k=7,
            recall_threshold=0.5,
        )

        engine = MemoryEngine.create(settings)

        assert isinstance(engine.vector_store, QdrantVectorStore)
        assert isinstance(engine.graph_store, InMemoryGraphStore)
        assert isinstance(engine.extractor, LLMFactExtractor)
        assert isinstance(engine.contradiction_detector, LexicalContradictionDetector)
        assert engine.default_top_k == 7
        assert engine.default_threshold == 0.5

    def test_create_with_features_disabled(self):
        from mnemos.config import Settings

        settings = Settings(
            qdrant_url=":memory:",
            embedding_provider="fastembed",
            embedding_model="BAAI/bge-small-en-v1.5",
            extraction_enabled=False,
            contradiction_enabled=False,
            graph_enabled=False,
        )

        engine = MemoryEngine.create(settings)

        assert engine.graph_store is None
        assert engine.extractor is None
        assert engine.contradiction_detector is None
