"""Mnemos: unified memory for agents.

Durably records what an agent learns, retrieves it by meaning, and notices
when something new contradicts something already known.

Quick Start:
    from mnemos import MemoryEngine

    async with MemoryEngine.create() as engine:
        # Store a fact
        result = await engine.remember("The request timeout is 30 seconds")

        # Later, a conflicting one
        result = await engine.remember("The request timeout is 60 seconds")
        if result.contradiction:
            print(result.contradiction.existing_fact, "->", result.contradiction.new_fact)

        # Retrieve relevant memories
        hits = await engine.recall("what is the timeout?", top_k=3)

Storage:
    - Vector store (Qdrant): every remembered text, searched by similarity
    - Graph store (optional): one episode per write, linked to its entities,
      plus detected contradictions

Fact networks:
    - world_fact: objective information
    - experience: things done or observed
    - entity_summary: knowledge about a named entity
    - belief: opinions, preferences and decisions
"""

__version__ = "0.1.0"

# Configuration
from .config import Settings, settings

# Engine
from .engine import (
    ContradictionSummary,
    KnowledgeRecord,
    MemoryEngine,
    MemoryOperation,
    WriteResult,
    classify_episode_type,
)

# Exceptions
from .exceptions import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    MnemosError,
    StorageError,
    ValidationError,
)

# Logging
from .logging import (
    configure_logging,
    get_logger,
    log_context,
    logger,
)

# Models
from .models import (
    Contradiction,
    Entity,
    Episode,
    EpisodeType,
    ExtractionResult,
    Fact,
    FactNetwork,
    FactRef,
    MemoryItem,
    Relationship,
    SearchResult,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Settings",
    "settings",
    # Engine
    "MemoryEngine",
    "MemoryOperation",
    "WriteResult",
    "ContradictionSummary",
    "KnowledgeRecord",
    "classify_episode_type",
    # Exceptions
    "MnemosError",
    "ValidationError",
    "StorageError",
    "EmbeddingError",
    "ExtractionError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "get_logger",
    "logger",
    "log_context",
    # Models
    "Contradiction",
    "Entity",
    "Episode",
    "EpisodeType",
    "ExtractionResult",
    "Fact",
    "FactNetwork",
    "FactRef",
    "MemoryItem",
    "Relationship",
    "SearchResult",
]
