"""Cached embedder wrapper with LRU eviction.

The engine embeds the same strings repeatedly: a fact statement is embedded
for the contradiction scan and often matches the stored text verbatim. This
wrapper keys vectors by content hash so repeats skip the provider.
"""

from __future__ import annotations

import hashlib
import logging
from collections import OrderedDict

from .base import Embedder

logger = logging.getLogger(__name__)


def _content_hash(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()


class CachedEmbedder(Embedder):
    """LRU-cached wrapper for any Embedder implementation.

    Example:
        ```python
        cached = CachedEmbedder(OpenAIEmbedder(), cache_size=1000)
        v1 = await cached.embed("The timeout is 30 seconds")
        v2 = await cached.embed("The timeout is 30 seconds")  # no API call
        ```
    """

    def __init__(
        self,
        embedder: Embedder,
        cache_size: int = 1000,
    ) -> None:
        """Initialize cached embedder wrapper.

        Args:
            embedder: Base embedder to wrap.
            cache_size: Maximum number of embeddings to cache.
                Set to 0 to disable caching.
        """
        self._embedder = embedder
        self._cache_size = cache_size
        self._cache: OrderedDict[str, list[float]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def _store(self, key: str, embedding: list[float]) -> None:
        if len(self._cache) >= self._cache_size:
            # Remove oldest (first) entry
            self._cache.popitem(last=False)
        self._cache[key] = embedding

    async def embed(self, text: str) -> list[float]:
        if self._cache_size == 0:
            return await self._embedder.embed(text)

        key = _content_hash(text)
        if key in self._cache:
            self._hits += 1
            self._cache.move_to_end(key)
            return self._cache[key]

        self._misses += 1
        embedding = await self._embedder.embed(text)
        self._store(key, embedding)
        logger.debug(
            "Embedding cache miss (hit_rate=%.2f, size=%d/%d)",
            self.hit_rate,
            len(self._cache),
            self._cache_size,
        )
        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts, sending only uncached ones to the wrapped embedder."""
        if not texts:
            return []

        if self._cache_size == 0:
            return await self._embedder.embed_batch(texts)

        results: list[list[float] | None] = [None] * len(texts)
        uncached_indices: list[int] = []
        uncached_texts: list[str] = []

        for i, text in enumerate(texts):
            key = _content_hash(text)
            if key in self._cache:
                self._hits += 1
                self._cache.move_to_end(key)
                results[i] = self._cache[key]
            else:
                uncached_indices.append(i)
                uncached_texts.append(text)

        if uncached_texts:
            self._misses += len(uncached_texts)
            fetched = await self._embedder.embed_batch(uncached_texts)
            for idx, text, embedding in zip(uncached_indices, uncached_texts, fetched, strict=True):
                self._store(_content_hash(text), embedding)
                results[idx] = embedding

        return [r for r in results if r is not None]

    @property
    def dimensions(self) -> int:
        return self._embedder.dimensions

    @property
    def wrapped_embedder(self) -> Embedder:
        return self._embedder

    @property
    def hit_rate(self) -> float:
        """Fraction of requests served from cache (0.0 when unused)."""
        total = self._hits + self._misses
        if total == 0:
            return 0.0
        return self._hits / total

    @property
    def cache_stats(self) -> dict[str, int | float]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._cache),
            "max_size": self._cache_size,
            "hit_rate": self.hit_rate,
        }

    def clear_cache(self) -> None:
        """Clear all cached embeddings, keeping hit/miss statistics."""
        self._cache.clear()
