"""MCP server implementation for Mnemos.

Exposes the memory tools over the Model Context Protocol with STDIO
transport. The engine is created lazily on the first tool call from
environment settings (see mnemos.config).

Tools provided (5):
- mnemos_remember: Store information, reporting contradictions
- mnemos_recall: Semantic search over stored memories
- mnemos_query_knowledge: Text search over recorded episodes
- mnemos_forget: Delete a memory by id
- mnemos_count: Number of stored memories
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable

from mcp.server.fastmcp import FastMCP

from mnemos.config import Settings
from mnemos.engine import MemoryEngine
from mnemos.logging import configure_logging, get_logger

from .tools import MemoryTools

logger = get_logger(__name__)


def create_server(engine_factory: Callable[[], MemoryEngine] | None = None) -> FastMCP:
    """Create and configure the MCP server with Mnemos tools.

    Args:
        engine_factory: Builds the shared engine on first use.
            Defaults to ``MemoryEngine.create(Settings())``.

    Returns:
        Configured FastMCP server instance.
    """
    mcp = FastMCP("mnemos")

    _tools: MemoryTools | None = None
    _lock = asyncio.Lock()

    async def get_tools() -> MemoryTools:
        """Get or create the shared tools over a single engine."""
        nonlocal _tools
        async with _lock:
            if _tools is None:
                engine = engine_factory() if engine_factory else MemoryEngine.create(Settings())
                await engine.initialize()
                _tools = MemoryTools(engine)
            return _tools

    @mcp.tool()
    async def mnemos_remember(
        text: str,
        tags: list[str] | None = None,
        importance: str | None = None,
    ) -> str:
        """Store information in long-term memory for later recall.

        Facts are extracted from the text and checked against similar
        memories. If a new fact contradicts a stored one, the response has
        operation "UPDATE" and names both statements. The old memory is kept.

        Args:
            text: Information to remember (1-10000 characters).
            tags: Optional tags for categorization.
            importance: Optional importance: "low", "medium" or "high".

        Returns:
            JSON with id, operation, fact_count and contradiction.
        """
        tools = await get_tools()
        return await tools.remember(text, tags=tags, importance=importance)

    @mcp.tool()
    async def mnemos_recall(
        query: str,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> str:
        """Search long-term memory for relevant information.

        Args:
            query: What to search for (1-1000 characters).
            limit: Maximum results, 1-20 (default 5).
            threshold: Minimum similarity, 0-1 (default 0.7).

        Returns:
            JSON with memories (id, text, score, tags, timestamp) best first.
        """
        tools = await get_tools()
        return await tools.recall(query, limit=limit, threshold=threshold)

    @mcp.tool()
    async def mnemos_query_knowledge(query: str, limit: int | None = None) -> str:
        """Search recorded episodes (what was learned, decided or done) by text.

        Args:
            query: Text to look for in episode summaries and contents.
            limit: Maximum records, 1-20 (default 10).

        Returns:
            JSON with records (id, summary, content, timestamp, type), newest first.
        """
        tools = await get_tools()
        return await tools.query_knowledge(query, limit=limit)

    @mcp.tool()
    async def mnemos_forget(id: str) -> str:
        """Remove a specific memory from long-term storage.

        Args:
            id: Memory id as returned by mnemos_remember or mnemos_recall.

        Returns:
            JSON with success true if deleted, false if not found.
        """
        tools = await get_tools()
        return await tools.forget(id)

    @mcp.tool()
    async def mnemos_count() -> str:
        """Count stored memories.

        Returns:
            JSON with count.
        """
        tools = await get_tools()
        return await tools.count()

    return mcp


def main() -> None:
    """Run the MCP server with STDIO transport."""
    settings = Settings()
    # stdout is reserved for the MCP protocol
    configure_logging(settings.log_level, settings.log_format, stream=sys.stderr)
    logger.info("Starting Mnemos MCP server", collection=settings.collection_name)

    mcp = create_server()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
