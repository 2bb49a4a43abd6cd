"""Vector store: similarity search over stored memory items.

The vector store is the source of truth for memory contents. Every
remember() call writes exactly one item here, and recall() reads from
here only.

Example:
    ```python
    from mnemos.embeddings import get_embedder
    from mnemos.storage import QdrantVectorStore

    async with QdrantVectorStore(get_embedder()) as store:
        item_id = await store.remember("The timeout is 30 seconds", {"source": "docs"})
        results = await store.recall("what is the timeout?", top_k=3)
    ```
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from typing import Any

from qdrant_client import AsyncQdrantClient, models

from mnemos.embeddings import Embedder
from mnemos.exceptions import StorageError
from mnemos.models import MemoryItem, SearchResult, generate_id, utcnow

from .retry import qdrant_retry

logger = logging.getLogger(__name__)

MEMORY_LOCATION = ":memory:"
SCROLL_PAGE_SIZE = 256

ItemPredicate = Callable[[MemoryItem], bool]


class VectorStore(ABC):
    """Abstract similarity store for memory items.

    Implementations must return recall results in descending score order
    and never return items scoring below the requested threshold.
    """

    @abstractmethod
    async def remember(self, text: str, metadata: dict[str, Any] | None = None) -> str:
        """Store text with metadata and return the new item's id."""
        ...

    @abstractmethod
    async def recall(
        self,
        query: str,
        top_k: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """Return up to top_k items scoring at least threshold, best first."""
        ...

    @abstractmethod
    async def forget(self, item_id: str) -> bool:
        """Delete one item. Returns False if the id is unknown."""
        ...

    @abstractmethod
    async def forget_all(self, predicate: ItemPredicate | None = None) -> int:
        """Delete every item the predicate accepts (all items if None)."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Number of stored items."""
        ...

    async def initialize(self) -> None:
        """Prepare the store for use. Stores without setup need not override."""
        return None

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        ...


def item_id_to_point_id(item_id: str) -> str:
    """Convert an item id to a valid Qdrant point id.

    Qdrant requires point ids to be UUIDs or unsigned integers, so the
    item id is hashed into a deterministic UUID-format string.
    """
    h = hashlib.sha256(item_id.encode()).hexdigest()[:32]
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"


def _payload_to_item(payload: dict[str, Any]) -> MemoryItem:
    return MemoryItem(
        id=payload["id"],
        text=payload["text"],
        metadata=dict(payload.get("metadata") or {}),
        timestamp=datetime.fromisoformat(payload["timestamp"]),
    )


class QdrantVectorStore(VectorStore):
    """Qdrant-backed vector store.

    Holds a single collection with cosine distance sized to the embedder.
    Pass ``url=":memory:"`` to run Qdrant's in-process local mode.

    Attributes:
        embedder: Embedder used for both stored text and queries.
        collection_name: Qdrant collection holding the items.
        top_k: Default number of recall results.
        threshold: Default minimum recall score.
    """

    def __init__(
        self,
        embedder: Embedder,
        url: str | None = None,
        api_key: str | None = None,
        collection_name: str | None = None,
        top_k: int = 5,
        threshold: float = 0.7,
    ) -> None:
        """Initialize the store. No connection is made until initialize().

        Args:
            embedder: Embedder for text and queries.
            url: Qdrant server URL or ":memory:". Defaults to settings.qdrant_url.
            api_key: Qdrant API key. Defaults to settings.qdrant_api_key.
            collection_name: Collection name. Defaults to settings.collection_name.
            top_k: Default recall result count.
            threshold: Default recall score threshold.
        """
        from mnemos.config import settings

        self.embedder = embedder
        self._url = url or settings.qdrant_url
        self._api_key = api_key if api_key is not None else settings.qdrant_api_key
        self.collection_name = collection_name or settings.collection_name
        self.top_k = top_k
        self.threshold = threshold
        self._client: AsyncQdrantClient | None = None

    @property
    def client(self) -> AsyncQdrantClient:
        """Get the Qdrant client, raising if not initialized."""
        if self._client is None:
            raise StorageError("Vector store not initialized. Call initialize() first.")
        return self._client

    @property
    def initialized(self) -> bool:
        return self._client is not None

    async def initialize(self) -> None:
        """Connect and create the collection if it does not exist."""
        if self._client is not None:
            return

        if self._url == MEMORY_LOCATION:
            client = AsyncQdrantClient(location=MEMORY_LOCATION)
        else:
            client = AsyncQdrantClient(url=self._url, api_key=self._api_key)

        try:
            await self._ensure_collection(client)
        except Exception as e:
            await client.close()
            raise StorageError(f"Failed to initialize collection {self.collection_name}: {e}") from e

        self._client = client
        logger.info(
            "Vector store ready (collection=%s, dimensions=%d)",
            self.collection_name,
            self.embedder.dimensions,
        )

    @qdrant_retry
    async def _ensure_collection(self, client: AsyncQdrantClient) -> None:
        if await client.collection_exists(self.collection_name):
            return
        await client.create_collection(
            collection_name=self.collection_name,
            vectors_config=models.VectorParams(
                size=self.embedder.dimensions,
                distance=models.Distance.COSINE,
            ),
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def __aenter__(self) -> QdrantVectorStore:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def remember(self, text: str, metadata: dict[str, Any] | None = None) -> str:
        """Embed and store text as a new item.

        Args:
            text: Text to store verbatim.
            metadata: JSON-serializable metadata stored alongside the text.

        Returns:
            The new item's id.

        Raises:
            EmbeddingError: If the text cannot be embedded.
            StorageError: If the upsert fails after retries.
        """
        await self.initialize()
        vector = await self.embedder.embed(text)

        item_id = generate_id("mem")
        payload = {
            "id": item_id,
            "text": text,
            "timestamp": utcnow().isoformat(),
            "metadata": dict(metadata or {}),
        }
        point = models.PointStruct(
            id=item_id_to_point_id(item_id),
            vector=vector,
            payload=payload,
        )

        try:
            await self._upsert(point)
        except Exception as e:
            raise StorageError(f"Failed to store memory item: {e}") from e

        logger.debug("Stored memory item %s", item_id)
        return item_id

    @qdrant_retry
    async def _upsert(self, point: models.PointStruct) -> None:
        await self.client.upsert(collection_name=self.collection_name, points=[point])

    async def recall(
        self,
        query: str,
        top_k: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """Find items similar to the query.

        Raises:
            EmbeddingError: If the query cannot be embedded.
            StorageError: If the search fails after retries.
        """
        limit = self.top_k if top_k is None else top_k
        min_score = self.threshold if threshold is None else threshold
        if limit < 1:
            return []

        await self.initialize()
        vector = await self.embedder.embed(query)

        try:
            points = await self._query(vector, limit, min_score)
        except Exception as e:
            raise StorageError(f"Failed to search memory items: {e}") from e

        results = [
            SearchResult(item=_payload_to_item(point.payload or {}), score=point.score)
            for point in points
            if point.score >= min_score
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        return results[:limit]

    @qdrant_retry
    async def _query(
        self, vector: list[float], limit: int, min_score: float
    ) -> list[models.ScoredPoint]:
        response = await self.client.query_points(
            collection_name=self.collection_name,
            query=vector,
            limit=limit,
            score_threshold=min_score,
            with_payload=True,
        )
        return list(response.points)

    async def forget(self, item_id: str) -> bool:
        await self.initialize()
        point_id = item_id_to_point_id(item_id)
        try:
            found = await self.client.retrieve(
                collection_name=self.collection_name,
                ids=[point_id],
                with_payload=False,
            )
            if not found:
                return False
            await self._delete([point_id])
        except Exception as e:
            raise StorageError(f"Failed to delete memory item {item_id}: {e}") from e

        logger.debug("Deleted memory item %s", item_id)
        return True

    async def forget_all(self, predicate: ItemPredicate | None = None) -> int:
        """Delete matching items by scanning the whole collection.

        Args:
            predicate: Called with each stored MemoryItem. None deletes all.

        Returns:
            Number of items deleted.
        """
        await self.initialize()
        to_delete: list[str] = []
        offset: Any = None

        try:
            while True:
                points, offset = await self.client.scroll(
                    collection_name=self.collection_name,
                    limit=SCROLL_PAGE_SIZE,
                    offset=offset,
                    with_payload=True,
                    with_vectors=False,
                )
                for point in points:
                    if predicate is None or predicate(_payload_to_item(point.payload or {})):
                        to_delete.append(str(point.id))
                if offset is None:
                    break

            if to_delete:
                await self._delete(to_delete)
        except Exception as e:
            raise StorageError(f"Failed to delete memory items: {e}") from e

        logger.info("Deleted %d memory items", len(to_delete))
        return len(to_delete)

    @qdrant_retry
    async def _delete(self, point_ids: list[str]) -> None:
        await self.client.delete(
            collection_name=self.collection_name,
            points_selector=models.PointIdsList(points=list(point_ids)),
        )

    async def count(self) -> int:
        await self.initialize()
        try:
            result = await self.client.count(collection_name=self.collection_name, exact=True)
        except Exception as e:
            raise StorageError(f"Failed to count memory items: {e}") from e
        return int(result.count)
