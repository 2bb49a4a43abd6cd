"""Memory tools: JSON-in, JSON-out wrappers over a MemoryEngine.

Each tool validates its input, calls the engine and returns a JSON string
with a ``success`` flag. Tools never raise; failures come back as
``{"success": false, "error": ..., "code": ...}`` so an agent can read them.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from mnemos.exceptions import MnemosError, ValidationError
from mnemos.logging import get_logger, log_context

if TYPE_CHECKING:
    from mnemos.engine import MemoryEngine

logger = get_logger(__name__)

MAX_TEXT_LENGTH = 10_000
MAX_QUERY_LENGTH = 1_000
MAX_LIMIT = 20
IMPORTANCE_LEVELS = ("low", "medium", "high")


def _require_text(field: str, value: str, max_length: int) -> str:
    if not value or not value.strip():
        raise ValidationError(field, "must not be empty")
    if len(value) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters")
    return value


def _check_limit(value: int | None) -> int | None:
    if value is not None and not 1 <= value <= MAX_LIMIT:
        raise ValidationError("limit", f"must be between 1 and {MAX_LIMIT}")
    return value


def _check_threshold(value: float | None) -> float | None:
    if value is not None and not 0.0 <= value <= 1.0:
        raise ValidationError("threshold", "must be between 0 and 1")
    return value


def _ok(**payload: Any) -> str:
    return json.dumps({"success": True, **payload})


def _failure(error: Exception) -> str:
    code = error.code if isinstance(error, MnemosError) else "internal_error"
    message = error.message if isinstance(error, MnemosError) else str(error) or "Failed"
    if isinstance(error, ValidationError):
        logger.info("Tool input rejected", field=error.field, error=message)
    else:
        logger.error("Tool failed", error=message)
    return json.dumps({"success": False, "error": message, "code": code})


class MemoryTools:
    """Agent-facing memory tools bound to one engine.

    Example:
        ```python
        tools = MemoryTools(engine)
        print(await tools.remember("Staging uses Postgres 16", tags=["infra"]))
        print(await tools.recall("which postgres version?", limit=3))
        ```
    """

    def __init__(self, engine: MemoryEngine) -> None:
        self.engine = engine

    async def remember(
        self,
        text: str,
        tags: list[str] | None = None,
        importance: str | None = None,
    ) -> str:
        """Store information in long-term memory."""
        with log_context(tool="remember"):
            try:
                _require_text("text", text, MAX_TEXT_LENGTH)
                if importance is not None and importance not in IMPORTANCE_LEVELS:
                    raise ValidationError("importance", f"must be one of {', '.join(IMPORTANCE_LEVELS)}")

                metadata: dict[str, Any] = {}
                if tags:
                    metadata["tags"] = list(tags)
                if importance:
                    metadata["importance"] = importance

                result = await self.engine.remember(text, metadata)
            except Exception as e:
                return _failure(e)

        contradiction = result.contradiction.model_dump() if result.contradiction else None
        return _ok(
            id=result.vector_store_id,
            write_id=result.id,
            operation=result.operation.value,
            fact_count=len(result.facts),
            contradiction=contradiction,
            message="Memory stored",
        )

    async def recall(
        self,
        query: str,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> str:
        """Search long-term memory for relevant information."""
        with log_context(tool="recall"):
            try:
                _require_text("query", query, MAX_QUERY_LENGTH)
                results = await self.engine.recall(
                    query,
                    top_k=_check_limit(limit),
                    threshold=_check_threshold(threshold),
                )
            except Exception as e:
                return _failure(e)

        memories = [
            {
                "id": r.item.id,
                "text": r.item.text,
                "score": round(r.score, 2),
                "tags": r.item.metadata.get("tags"),
                "timestamp": r.item.timestamp.isoformat(),
            }
            for r in results
        ]
        return _ok(memories=memories, count=len(memories))

    async def query_knowledge(self, query: str, limit: int | None = None) -> str:
        """Search recorded episodes by text."""
        with log_context(tool="query_knowledge"):
            try:
                _require_text("query", query, MAX_QUERY_LENGTH)
                records = await self.engine.query_knowledge(query, _check_limit(limit) or 10)
            except Exception as e:
                return _failure(e)

        return _ok(records=[r.model_dump() for r in records], count=len(records))

    async def forget(self, id: str) -> str:
        """Remove a specific memory from long-term storage."""
        with log_context(tool="forget"):
            try:
                _require_text("id", id, MAX_QUERY_LENGTH)
                deleted = await self.engine.forget(id)
            except Exception as e:
                return _failure(e)

        return json.dumps(
            {"success": deleted, "message": "Memory deleted" if deleted else "Not found"}
        )

    async def count(self) -> str:
        """Number of stored memories."""
        with log_context(tool="count"):
            try:
                total = await self.engine.count()
            except Exception as e:
                return _failure(e)
        return _ok(count=total)
