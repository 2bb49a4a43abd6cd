"""Episode type classification from extracted facts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from mnemos.models import EpisodeType, Fact, FactNetwork


def classify_episode_type(facts: Sequence[Fact]) -> EpisodeType:
    """Pick the episode type for a write from its facts.

    Rules, first match wins:
        1. any experience fact -> ACTION
        2. any belief fact -> DECISION
        3. more entity summaries than world facts -> OBSERVATION
        4. otherwise -> LEARNING

    Example:
        >>> classify_episode_type([Fact(network=FactNetwork.EXPERIENCE, statement="Deployed v2")])
        <EpisodeType.ACTION: 'action'>
    """
    counts = Counter(fact.network for fact in facts)

    if counts[FactNetwork.EXPERIENCE]:
        return EpisodeType.ACTION
    if counts[FactNetwork.BELIEF]:
        return EpisodeType.DECISION
    if counts[FactNetwork.ENTITY_SUMMARY] > counts[FactNetwork.WORLD_FACT]:
        return EpisodeType.OBSERVATION
    return EpisodeType.LEARNING
