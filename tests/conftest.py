"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add tests directory to path so fakes can be imported
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from fakes import FakeEmbedder  # noqa: E402

from mnemos.storage import InMemoryGraphStore, QdrantVectorStore  # noqa: E402


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
async def vector_store(embedder: FakeEmbedder):
    """Qdrant in local in-memory mode with the fake embedder."""
    store = QdrantVectorStore(
        embedder,
        url=":memory:",
        collection_name="test_memories",
        top_k=5,
        threshold=0.7,
    )
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def graph_store() -> InMemoryGraphStore:
    return InMemoryGraphStore()
