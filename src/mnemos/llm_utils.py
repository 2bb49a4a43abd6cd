"""Run pydantic-ai agents with a per-attempt timeout and retries.

Used by the LLM fact extractor and the LLM contradiction detector. Each
attempt is bounded by ``asyncio.timeout``; transient failures (rate
limits, 5xx, connection problems, timeouts) back off exponentially, while
fatal ones (auth, bad request, validation) fail at once.

Cancellation of the calling task is never treated as a failure: it
propagates out of the retry loop untouched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from pydantic_ai import Agent

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0
DEFAULT_BACKOFF_FACTOR = 2.0

_FATAL_PATTERNS = (
    "validation error",
    "validationerror",
    "400",
    "401",
    "403",
    "404",
    "invalid",
    "authentication",
    "unauthorized",
    "forbidden",
    "not found",
    "api key",
)


class LLMCallError(Exception):
    """An agent call failed for good.

    Attributes:
        retriable: Whether the last failure looked transient (retries
            were exhausted) rather than fatal.
    """

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


def is_retriable_error(error: BaseException) -> bool:
    """Classify an agent error by its message.

    Only fatal patterns are matched; everything else, transient or
    unrecognised, is retried. A fatal marker wins even when the message
    also mentions a timeout ("invalid request ... timeout").
    """
    if isinstance(error, TimeoutError):
        return True
    text = str(error).lower()
    return not any(pattern in text for pattern in _FATAL_PATTERNS)


async def run_agent_with_retry(
    agent: Agent[None, T],
    prompt: str,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
) -> T:
    """Run a pydantic-ai agent and return its typed output.

    Args:
        agent: The agent to run.
        prompt: User prompt for the agent.
        timeout_seconds: Limit for each attempt.
        max_retries: Extra attempts after the first (0 = single attempt).
        initial_delay: First backoff delay in seconds.
        max_delay: Backoff ceiling in seconds.
        backoff_factor: Delay multiplier after each failed attempt.

    Returns:
        The agent's output model.

    Raises:
        LLMCallError: On a fatal error, or once every attempt has failed.

    Example:
        ```python
        agent = Agent("openai:gpt-4o-mini", output_type=ExtractionOutput)
        output = await run_agent_with_retry(agent, "Extract facts from ...")
        ```
    """
    attempts = max_retries + 1
    delay = initial_delay
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            async with asyncio.timeout(timeout_seconds):
                result = await agent.run(prompt)
            return result.output
        except TimeoutError as e:
            last_error = e
            logger.warning(
                "LLM call timed out after %ss (attempt %d/%d)",
                timeout_seconds,
                attempt,
                attempts,
            )
        except Exception as e:
            if not is_retriable_error(e):
                logger.error("Non-retriable LLM error: %s", e)
                raise LLMCallError(str(e), retriable=False) from e
            last_error = e
            logger.warning("Retriable LLM error (attempt %d/%d): %s", attempt, attempts, e)

        if attempt < attempts:
            await asyncio.sleep(delay)
            delay = min(delay * backoff_factor, max_delay)

    raise LLMCallError(
        f"LLM call failed after {attempts} attempts: {last_error or 'timeout'}",
        retriable=True,
    ) from last_error
