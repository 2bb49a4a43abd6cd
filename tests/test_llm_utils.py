"""Tests for the agent retry helper."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from mnemos.llm_utils import LLMCallError, is_retriable_error, run_agent_with_retry


def agent_returning(*outcomes) -> MagicMock:
    """Agent whose run() yields each outcome in turn (exceptions are raised)."""
    agent = MagicMock()
    agent.run = AsyncMock(
        side_effect=[o if isinstance(o, Exception) else MagicMock(output=o) for o in outcomes]
    )
    return agent


class TestIsRetriableError:
    @pytest.mark.parametrize(
        "message",
        ["Rate limit exceeded", "HTTP 503 Service Unavailable", "Connection reset by peer", "model overloaded"],
    )
    def test_transient(self, message):
        assert is_retriable_error(RuntimeError(message))

    @pytest.mark.parametrize(
        "message",
        ["401 Unauthorized", "Invalid API key", "1 validation error for ExtractionOutput", "404 model not found"],
    )
    def test_fatal(self, message):
        assert not is_retriable_error(RuntimeError(message))

    def test_fatal_wins_over_transient(self):
        assert not is_retriable_error(RuntimeError("invalid request: timeout must be positive"))

    def test_timeout_error(self):
        assert is_retriable_error(TimeoutError())

    def test_unknown_is_retried(self):
        assert is_retriable_error(RuntimeError("something odd happened"))


class TestRunAgentWithRetry:
    async def test_returns_output(self):
        agent = agent_returning("ok")

        assert await run_agent_with_retry(agent, "prompt") == "ok"
        agent.run.assert_awaited_once_with("prompt")

    async def test_retries_transient_then_succeeds(self):
        agent = agent_returning(RuntimeError("429 rate limit"), RuntimeError("502 bad gateway"), "ok")

        result = await run_agent_with_retry(agent, "prompt", max_retries=2, initial_delay=0.0)

        assert result == "ok"
        assert agent.run.await_count == 3

    async def test_fatal_fails_immediately(self):
        agent = agent_returning(RuntimeError("401 Unauthorized"), "never reached")

        with pytest.raises(LLMCallError) as exc_info:
            await run_agent_with_retry(agent, "prompt", max_retries=3, initial_delay=0.0)

        assert exc_info.value.retriable is False
        assert agent.run.await_count == 1

    async def test_exhausted_retries(self):
        agent = agent_returning(*[RuntimeError("503 service unavailable")] * 3)

        with pytest.raises(LLMCallError, match="after 3 attempts") as exc_info:
            await run_agent_with_retry(agent, "prompt", max_retries=2, initial_delay=0.0)

        assert exc_info.value.retriable is True

    async def test_per_attempt_timeout(self):
        calls = 0

        async def slow_then_fast(prompt):
            nonlocal calls
            calls += 1
            if calls == 1:
                await asyncio.sleep(10)
            return MagicMock(output="second try")

        agent = MagicMock()
        agent.run = slow_then_fast

        result = await run_agent_with_retry(
            agent, "prompt", timeout_seconds=0.05, max_retries=1, initial_delay=0.0
        )

        assert result == "second try"
        assert calls == 2

    async def test_timeout_on_every_attempt(self):
        async def hang(prompt):
            await asyncio.sleep(10)

        agent = MagicMock()
        agent.run = hang

        with pytest.raises(LLMCallError) as exc_info:
            await run_agent_with_retry(agent, "prompt", timeout_seconds=0.01, max_retries=0)

        assert exc_info.value.retriable is True

    async def test_cancellation_propagates(self):
        started = asyncio.Event()

        async def hang(prompt):
            started.set()
            await asyncio.sleep(10)

        agent = MagicMock()
        agent.run = hang

        task = asyncio.create_task(run_agent_with_retry(agent, "prompt", max_retries=5))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
