"""Retry policy for Qdrant calls.

Transient transport failures (connection refused, timeouts, 5xx responses)
are retried with exponential backoff. Anything else surfaces immediately.
"""

from __future__ import annotations

import logging

import httpx
from qdrant_client.http.exceptions import UnexpectedResponse
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

RETRY_ATTEMPTS = 3


def is_transient_error(error: BaseException) -> bool:
    """Return True for errors worth another attempt.

    Qdrant reports 4xx and 5xx alike as UnexpectedResponse, so the
    status code decides: only server-side failures are retried.
    """
    if isinstance(error, (httpx.ConnectError, httpx.TimeoutException)):
        return True
    if isinstance(error, UnexpectedResponse):
        return error.status_code is not None and error.status_code >= 500
    return False


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    logger.warning(
        "Qdrant call %s failed (attempt %d/%d): %s",
        retry_state.fn.__name__ if retry_state.fn else "unknown",
        retry_state.attempt_number,
        RETRY_ATTEMPTS,
        outcome.exception() if outcome else None,
    )


qdrant_retry = retry(
    stop=stop_after_attempt(RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception(is_transient_error),
    before_sleep=_log_retry,
    reraise=True,
)
