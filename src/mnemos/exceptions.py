"""Mnemos exception hierarchy.

Provides structured exceptions for error handling throughout the codebase.
All exceptions inherit from MnemosError for easy catching.

Errors fall into two groups from the engine's point of view:
    - Fail-the-call: StorageError, EmbeddingError (the vector store is the
      source of truth, so the caller must see these).
    - Degrade-and-continue: ExtractionError and anything raised by a
      contradiction detector or graph store (logged, never surfaced).
"""

from __future__ import annotations


class MnemosError(Exception):
    """Base exception for all Mnemos errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code for tool responses.
    """

    code: str = "mnemos_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a JSON-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ValidationError(MnemosError):
    """Invalid input provided.

    Attributes:
        field: The field that failed validation.
    """

    code: str = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a JSON-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "field": self.field,
                "message": self.message,
            }
        }


class StorageError(MnemosError):
    """Vector store operation failed.

    Raised when a Qdrant write, read, or delete fails after retries.
    """

    code: str = "storage_error"


class EmbeddingError(MnemosError):
    """Embedding generation failed.

    Raised when the embedding service is unreachable, misconfigured
    (e.g. missing credentials), or returns unexpected data.
    """

    code: str = "embedding_error"


class ExtractionError(MnemosError):
    """Fact extraction failed.

    Raised when the extraction model times out, errors, or produces
    output that does not validate.
    """

    code: str = "extraction_error"


class ConfigurationError(MnemosError):
    """Configuration error.

    Raised when required configuration is missing or invalid.
    """

    code: str = "configuration_error"
