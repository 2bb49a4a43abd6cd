"""Base class for fact extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mnemos.models import ExtractionResult


class FactExtractor(ABC):
    """Turns free text into typed facts.

    The engine calls ``extract`` at most once per remember(). Implementations
    may raise on failure; the engine logs the error and continues with no
    facts, so an extractor never has to swallow its own errors.

    Example:
        ```python
        class KeywordExtractor(FactExtractor):
            async def extract(self, text: str) -> ExtractionResult:
                facts = [Fact(network=FactNetwork.WORLD_FACT, statement=s)
                         for s in text.split(".") if s.strip()]
                return ExtractionResult(facts=facts, raw_text=text)
        ```
    """

    @abstractmethod
    async def extract(self, text: str) -> ExtractionResult:
        """Extract facts from text.

        Args:
            text: Raw input text.

        Returns:
            ExtractionResult with facts in order of appearance.

        Raises:
            ExtractionError: If extraction fails.
        """
        ...
