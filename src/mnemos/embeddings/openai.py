"""OpenAI embedding provider.

Uses OpenAI's text-embedding models via the official SDK.
"""

from __future__ import annotations

import logging
import os

from openai import AsyncOpenAI

from mnemos.exceptions import EmbeddingError

from .base import Embedder

logger = logging.getLogger(__name__)

# Model dimensions for known models
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbedder(Embedder):
    """OpenAI embedding provider.

    The SDK client is created on first use, so a missing API key surfaces
    as an EmbeddingError from embed() rather than at construction time.

    Example:
        ```python
        embedder = OpenAIEmbedder()
        vector = await embedder.embed("Hello world")
        # vector has 1536 dimensions
        ```
    """

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        api_key: str | None = None,
    ) -> None:
        """Initialize OpenAI embedder.

        Args:
            model: OpenAI embedding model name.
            api_key: OpenAI API key. If None, uses OPENAI_API_KEY env var.
        """
        self.model = model
        self._api_key = api_key
        self._client: AsyncOpenAI | None = None
        self._dimensions = MODEL_DIMENSIONS.get(model, 1536)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self._api_key or os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise EmbeddingError("OPENAI_API_KEY required for memory embeddings")
            self._client = AsyncOpenAI(api_key=api_key)
        return self._client

    async def embed(self, text: str) -> list[float]:
        """Generate embedding for a single text.

        Raises:
            EmbeddingError: If credentials are missing, the API call fails,
                or the response carries no data.
        """
        client = self._get_client()
        try:
            response = await client.embeddings.create(
                model=self.model,
                input=text,
            )
        except Exception as e:
            raise EmbeddingError(f"OpenAI embedding API failed: {e}") from e

        if not response.data:
            raise EmbeddingError("OpenAI returned empty embedding data")

        embedding = list(response.data[0].embedding)
        if len(embedding) != self._dimensions:
            logger.warning(
                "Embedding dimension mismatch: expected %d, got %d (model=%s)",
                self._dimensions,
                len(embedding),
                self.model,
            )
            self._dimensions = len(embedding)

        return embedding

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts in one request."""
        if not texts:
            return []

        client = self._get_client()
        try:
            response = await client.embeddings.create(
                model=self.model,
                input=texts,
            )
        except Exception as e:
            raise EmbeddingError(f"OpenAI batch embedding API failed: {e}") from e

        if not response.data:
            raise EmbeddingError("OpenAI returned empty batch embedding data")

        return [list(d.embedding) for d in response.data]

    @property
    def dimensions(self) -> int:
        return self._dimensions
