"""Bounded exponential-backoff retry for remote engine and REST calls.

The executor is generic: it receives a zero-argument coroutine factory and
knows nothing about what it wraps. Delays double after every failed attempt
with no jitter and no cap. When the retry budget is spent the last exception
propagates unchanged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from qlik_mcp.config import RetrievalSettings
from qlik_mcp.logger import Logger

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_ms: int = 1000

    @classmethod
    def from_settings(cls, settings: RetrievalSettings) -> "RetryPolicy":
        return cls(max_retries=settings.max_retries, initial_delay_ms=settings.retry_delay_ms)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    retries: Optional[int] = None,
    delay_ms: Optional[int] = None,
    logger: Optional[Logger] = None,
    description: str = "operation",
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds or the retry budget is exhausted.

    Args:
        operation: Zero-argument callable returning an awaitable
        policy: Retry budget and first delay; ``retries``/``delay_ms`` override it
        logger: Receives one warning per retry
        description: Label used in log lines
        sleep: Awaitable sleep taking seconds (injectable for tests)

    Returns:
        The first successful result of ``operation``

    Raises:
        Exception: Whatever the final attempt raised
    """
    policy = policy or RetryPolicy()
    retries_left = policy.max_retries if retries is None else retries
    current_delay_ms = policy.initial_delay_ms if delay_ms is None else delay_ms

    while True:
        try:
            return await operation()
        except Exception as exc:
            if retries_left <= 0:
                raise
            if logger is not None:
                logger.warning(
                    f"{description} failed, retrying in {current_delay_ms}ms",
                    retries_left=retries_left,
                    delay_ms=current_delay_ms,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
            await sleep(current_delay_ms / 1000)
            retries_left -= 1
            current_delay_ms *= 2
