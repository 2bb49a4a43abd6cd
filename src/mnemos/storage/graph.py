"""Graph store: episodes, entities and contradictions.

The graph store is optional. The engine writes one Episode per
remember() call that extracted facts, links it to every entity the facts
mention, and records detected contradictions as their own nodes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from mnemos.exceptions import StorageError
from mnemos.models import Contradiction, Episode

logger = logging.getLogger(__name__)


class GraphStore(ABC):
    """Abstract graph store consumed by the memory engine.

    ``get_episodes_by_query`` may return Episode models or raw row mappings
    (as a Cypher-backed store would); the engine reads both.
    """

    @abstractmethod
    async def upsert_episode(self, episode: Episode) -> None:
        """Create or replace the episode node with the same id."""
        ...

    @abstractmethod
    async def link_episode_entity(self, episode_id: str, entity_name: str) -> None:
        """Ensure the entity node exists and a MENTIONS edge connects it."""
        ...

    @abstractmethod
    async def get_episodes_by_query(
        self, query: str, limit: int = 10
    ) -> Sequence[Episode | Mapping[str, Any]]:
        """Return episodes matching the query, newest first."""
        ...

    @abstractmethod
    async def upsert_contradiction(self, contradiction: Contradiction) -> None:
        """Create or replace the contradiction node with the same id."""
        ...


class InMemoryGraphStore(GraphStore):
    """Dict-backed graph store for single-process agents and tests.

    Nodes:
        - Episode, keyed by id
        - Entity, keyed by name (created on first link)
        - Contradiction, keyed by id

    Edges:
        - Episode -[MENTIONS]-> Entity

    Example:
        ```python
        graph = InMemoryGraphStore()
        await graph.upsert_episode(episode)
        await graph.link_episode_entity(episode.id, "Redis")
        rows = await graph.get_episodes_by_query("redis", limit=5)
        ```
    """

    def __init__(self) -> None:
        self._episodes: dict[str, Episode] = {}
        self._entities: dict[str, dict[str, Any]] = {}
        self._mentions: dict[str, list[str]] = {}
        self._contradictions: dict[str, Contradiction] = {}

    async def upsert_episode(self, episode: Episode) -> None:
        self._episodes[episode.id] = episode.model_copy(deep=True)
        self._mentions.setdefault(episode.id, [])

    async def link_episode_entity(self, episode_id: str, entity_name: str) -> None:
        """Link an episode to an entity, creating the entity node if needed.

        Linking the same pair twice leaves a single edge.

        Raises:
            StorageError: If the episode does not exist.
        """
        if episode_id not in self._episodes:
            raise StorageError(f"Cannot link entity to unknown episode {episode_id}")

        self._entities.setdefault(entity_name, {"name": entity_name})
        linked = self._mentions[episode_id]
        if entity_name not in linked:
            linked.append(entity_name)

    async def get_episodes_by_query(self, query: str, limit: int = 10) -> list[Episode]:
        """Case-insensitive substring match against episode summary or content."""
        if limit < 1:
            return []
        needle = query.lower()
        matches = [
            ep
            for ep in self._episodes.values()
            if needle in ep.summary.lower() or needle in ep.content.lower()
        ]
        matches.sort(key=lambda ep: ep.timestamp, reverse=True)
        return [ep.model_copy(deep=True) for ep in matches[:limit]]

    async def upsert_contradiction(self, contradiction: Contradiction) -> None:
        self._contradictions[contradiction.id] = contradiction.model_copy(deep=True)

    async def get_episode(self, episode_id: str) -> Episode | None:
        episode = self._episodes.get(episode_id)
        return episode.model_copy(deep=True) if episode else None

    async def get_episode_entities(self, episode_id: str) -> list[str]:
        """Entity names linked from the episode, in link order."""
        return list(self._mentions.get(episode_id, []))

    async def get_contradiction(self, contradiction_id: str) -> Contradiction | None:
        found = self._contradictions.get(contradiction_id)
        return found.model_copy(deep=True) if found else None

    async def get_unresolved_contradictions(self) -> list[Contradiction]:
        """Contradictions no resolver has decided yet, oldest first."""
        pending = [c for c in self._contradictions.values() if not c.resolved]
        pending.sort(key=lambda c: c.detected_at)
        return [c.model_copy(deep=True) for c in pending]

    async def resolve_contradiction(
        self,
        contradiction_id: str,
        winner: str,
        reasoning: str,
    ) -> bool:
        """Record a resolver's decision on a contradiction.

        Args:
            contradiction_id: Contradiction to resolve.
            winner: Id of the fact that should be believed.
            reasoning: Why the winner was chosen.

        Returns:
            True if the contradiction existed and was updated.
        """
        existing = self._contradictions.get(contradiction_id)
        if existing is None:
            return False
        self._contradictions[contradiction_id] = existing.model_copy(
            update={"resolution_winner": winner, "resolution_reasoning": reasoning}
        )
        logger.info("Resolved contradiction %s in favour of %s", contradiction_id, winner)
        return True

    @property
    def episode_count(self) -> int:
        return len(self._episodes)

    @property
    def entity_count(self) -> int:
        return len(self._entities)
