"""Bounded retry with randomized exponential backoff for transport calls."""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

from feed_fetcher.errors import FeedRequestError, TransportError
from feed_fetcher.models.domain import FetchFailure, FetchFailureKind
from feed_fetcher.settings import Settings
from feed_fetcher.utils.logging import get_logger


T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[None]]

logger = get_logger(__name__)


class RetryPolicy:
    """Retries an async operation on ``TransportError`` only.

    ``retries`` counts retries after the first attempt, so the operation runs
    at most ``retries + 1`` times. Anything the operation returns, including
    a non-2xx response, ends the loop untouched.
    """

    def __init__(
        self,
        retries: int = 5,
        *,
        min_delay_seconds: float = 1.0,
        factor: float = 2.0,
        max_delay_seconds: float = 30.0,
        randomize: bool = True,
        sleep: SleepFn = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self.retries = retries
        self.min_delay_seconds = min_delay_seconds
        self.factor = factor
        self.max_delay_seconds = max_delay_seconds
        self.randomize = randomize
        self._sleep = sleep
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: Settings, retries: Optional[int] = None, **kwargs) -> "RetryPolicy":
        return cls(
            settings.feed_requests_max_retries if retries is None else retries,
            min_delay_seconds=settings.feed_requests_retry_min_delay_seconds,
            max_delay_seconds=settings.feed_requests_retry_max_delay_seconds,
            **kwargs,
        )

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number ``attempt`` (1-based)."""
        jitter = self._rng.uniform(1.0, 2.0) if self.randomize else 1.0
        delay = self.min_delay_seconds * (self.factor ** (attempt - 1)) * jitter
        return min(delay, self.max_delay_seconds)

    async def run(self, operation: Callable[[], Awaitable[T]], *, description: str = "operation") -> T:
        attempts = 0
        last_error: Optional[TransportError] = None
        while attempts <= self.retries:
            attempts += 1
            try:
                return await operation()
            except TransportError as exc:  # retry
                last_error = exc
                if attempts > self.retries:
                    break
                delay = self.delay_for(attempts)
                logger.warning(
                    "fetch.retry",
                    extra={"attempt": attempts, "delay_seconds": round(delay, 3), "error": str(exc)},
                )
                await self._sleep(delay)

        assert last_error is not None
        logger.error("fetch.network_failed", extra={"attempts": attempts, "error": str(last_error)})
        raise FeedRequestError(
            FetchFailure(
                kind=FetchFailureKind.NETWORK,
                message=f"Failed to execute request to {description}: {last_error}",
            )
        ) from last_error
