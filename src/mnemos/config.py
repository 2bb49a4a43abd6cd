"""Configuration management for Mnemos."""

import logging
import os
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Mnemos configuration loaded from environment variables.

    All settings can be overridden via environment variables with
    the MNEMOS_ prefix. For example:
        MNEMOS_QDRANT_URL=http://localhost:6333
        MNEMOS_EMBEDDING_PROVIDER=fastembed
        MNEMOS_GRAPH_ENABLED=false
    """

    # Vector storage
    qdrant_url: str = Field(
        default="http://localhost:6333",
        description="Qdrant connection URL (':memory:' for a local in-process index)",
    )
    qdrant_api_key: str | None = Field(
        default=None,
        description="Qdrant API key (for cloud)",
    )
    collection_name: str = Field(
        default="mnemos_memories",
        description="Qdrant collection holding memory items",
    )

    # Embeddings
    embedding_provider: Literal["openai", "fastembed"] = Field(
        default="openai",
        description="Embedding provider to use",
    )
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    embedding_cache_enabled: bool = Field(
        default=True,
        description="Enable LRU cache for embeddings to prevent redundant computation",
    )
    embedding_cache_size: int = Field(
        default=1000,
        ge=0,
        le=100000,
        description="Maximum number of embeddings to cache (0 to disable cache)",
    )

    # Fact extraction
    extraction_enabled: bool = Field(
        default=True,
        description="Run LLM fact extraction on every remember() call",
    )
    extraction_model: str = Field(
        default="openai:gpt-4o-mini",
        description="Full model name for Pydantic AI",
    )
    extraction_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-attempt timeout for the extraction model",
    )
    extraction_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries for retriable extraction failures (0 = single attempt)",
    )

    # Contradiction detection
    contradiction_enabled: bool = Field(
        default=True,
        description="Check new world facts and beliefs against similar memories",
    )
    contradiction_similarity_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Word-overlap (Jaccard) above which two statements are compared",
    )

    # Graph storage
    graph_enabled: bool = Field(
        default=True,
        description="Record episodes and entities in the in-memory graph store",
    )

    # Retrieval defaults
    recall_top_k: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Default number of results for recall and contradiction scans",
    )
    recall_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Default minimum similarity score",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    model_config = {
        "env_prefix": "MNEMOS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }

    @model_validator(mode="after")
    def sync_openai_api_key(self) -> "Settings":
        """Accept either MNEMOS_OPENAI_API_KEY or OPENAI_API_KEY.

        If only one is set, the other is populated so both the mnemos config
        and downstream libraries (Pydantic AI, OpenAI SDK) can find the key.
        """
        if not self.openai_api_key:
            fallback_key = os.environ.get("OPENAI_API_KEY")
            if fallback_key:
                object.__setattr__(self, "openai_api_key", fallback_key)
                logger.debug("Using OPENAI_API_KEY as fallback for MNEMOS_OPENAI_API_KEY")

        if self.openai_api_key and not os.environ.get("OPENAI_API_KEY"):
            os.environ["OPENAI_API_KEY"] = self.openai_api_key
            logger.debug("Synced MNEMOS_OPENAI_API_KEY to OPENAI_API_KEY")

        return self


# Global settings instance
settings = Settings()
