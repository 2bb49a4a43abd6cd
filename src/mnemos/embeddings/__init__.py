"""Embedding providers for Mnemos.

The vector store embeds text on every write and query. Supports OpenAI
(cloud) and FastEmbed (local) providers, optionally behind an LRU cache.

Example:
    ```python
    from mnemos.config import Settings
    from mnemos.embeddings import get_embedder

    embedder = get_embedder(Settings(embedding_provider="fastembed",
                                     embedding_model="BAAI/bge-small-en-v1.5"))
    vector = await embedder.embed("Hello world")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import Embedder
from .cached import CachedEmbedder
from .fastembed import FastEmbedEmbedder
from .openai import OpenAIEmbedder

if TYPE_CHECKING:
    from mnemos.config import Settings


def get_embedder(settings: Settings | None = None) -> Embedder:
    """Create an embedder based on settings.

    Wraps the provider in a CachedEmbedder when caching is enabled.

    Args:
        settings: Optional settings. Uses default Settings() if None.

    Returns:
        Configured Embedder instance.

    Raises:
        ConfigurationError: If the embedding provider is unknown.
    """
    from mnemos.exceptions import ConfigurationError

    if settings is None:
        from mnemos.config import Settings

        settings = Settings()

    provider = settings.embedding_provider

    base_embedder: Embedder
    if provider == "openai":
        base_embedder = OpenAIEmbedder(
            model=settings.embedding_model,
            api_key=settings.openai_api_key,
        )
    elif provider == "fastembed":
        base_embedder = FastEmbedEmbedder(
            model=settings.embedding_model,
        )
    else:
        raise ConfigurationError(f"Unknown embedding provider: {provider}")

    if settings.embedding_cache_enabled and settings.embedding_cache_size > 0:
        return CachedEmbedder(
            embedder=base_embedder,
            cache_size=settings.embedding_cache_size,
        )

    return base_embedder


__all__ = [
    "Embedder",
    "OpenAIEmbedder",
    "FastEmbedEmbedder",
    "CachedEmbedder",
    "get_embedder",
]
