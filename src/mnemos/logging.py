"""Structured logging for Mnemos.

The engine and the MCP tools log through structlog; storage and LLM
collaborators use plain ``logging`` loggers, which end up on the same
handler. Two output formats are supported: ``json`` (one object per line)
and ``text`` (coloured console).

The MCP server must keep stdout free for the protocol, so it passes
``stream=sys.stderr``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from structlog.typing import Processor

_configured = False


def _renderer(format: str) -> list[Processor]:
    if format.lower() == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(
    level: str = "INFO",
    format: str = "json",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the root handler.

    Args:
        level: Log level name. Unknown names fall back to INFO.
        format: "json" or "text".
        stream: Destination for log lines. Defaults to stdout. Passing a
            stream replaces any handler installed earlier.

    Example:
        ```python
        configure_logging(settings.log_level, settings.log_format, stream=sys.stderr)
        get_logger(__name__).info("Starting", collection=settings.collection_name)
        ```
    """
    global _configured

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=stream is not None,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring defaults on first use."""
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)  # type: ignore[no-any-return]


@contextmanager
def log_context(**fields: object) -> Iterator[None]:
    """Attach fields to every log line emitted inside the block.

    The fields live in contextvars, so they follow the current asyncio
    task and are removed again on exit. The memory tools use this to tag
    engine logs with the tool that triggered them.
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield


logger = get_logger("mnemos")
