"""FastEmbed local embedding provider.

Uses FastEmbed for local, free embeddings without API keys.
Useful for development and offline agents.
"""

from __future__ import annotations

import asyncio

from fastembed import TextEmbedding

from mnemos.exceptions import EmbeddingError

from .base import Embedder

# Model dimensions for known models
MODEL_DIMENSIONS = {
    "BAAI/bge-small-en-v1.5": 384,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
    "sentence-transformers/all-MiniLM-L6-v2": 384,
}


class FastEmbedEmbedder(Embedder):
    """FastEmbed local embedding provider.

    Models are downloaded on first use and cached locally.
    """

    def __init__(
        self,
        model: str = "BAAI/bge-small-en-v1.5",
    ) -> None:
        self._model_name = model
        self._model: TextEmbedding | None = None
        self._dimensions = MODEL_DIMENSIONS.get(model, 384)

    def _get_model(self) -> TextEmbedding:
        """Lazy load the model on first use."""
        if self._model is None:
            self._model = TextEmbedding(self._model_name)
        return self._model

    async def embed(self, text: str) -> list[float]:
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        loop = asyncio.get_running_loop()

        def _embed_batch() -> list[list[float]]:
            model = self._get_model()
            return [e.tolist() for e in model.embed(texts)]

        # FastEmbed is sync, run in executor for async compatibility
        try:
            return await loop.run_in_executor(None, _embed_batch)
        except Exception as e:
            raise EmbeddingError(f"FastEmbed embedding failed: {e}") from e

    @property
    def dimensions(self) -> int:
        return self._dimensions
