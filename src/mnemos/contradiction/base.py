"""Contradiction detector interface."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol, TypedDict, runtime_checkable

from mnemos.models import Contradiction, FactRef


class FactMetadata(TypedDict, total=False):
    """Provenance of one side of a comparison."""

    id: str
    source: str
    timestamp: str


DetectionResult = Contradiction | None


@runtime_checkable
class ContradictionDetector(Protocol):
    """Judges whether two statements contradict each other.

    ``statement_a`` is the stored memory and ``statement_b`` the newly
    extracted fact. A detector may return its verdict directly or as an
    awaitable (for detectors that call a model); the engine handles both
    and treats a raised exception as "no contradiction".
    """

    def detect(
        self,
        statement_a: str,
        statement_b: str,
        meta_a: FactMetadata | None = None,
        meta_b: FactMetadata | None = None,
    ) -> DetectionResult | Awaitable[DetectionResult]: ...


def build_contradiction(
    statement_a: str,
    statement_b: str,
    meta_a: FactMetadata | None = None,
    meta_b: FactMetadata | None = None,
) -> Contradiction:
    """Create a Contradiction, defaulting missing provenance to "unknown" and now."""
    return Contradiction(
        fact_a=FactRef(statement=statement_a, **(meta_a or {})),
        fact_b=FactRef(statement=statement_b, **(meta_b or {})),
    )
