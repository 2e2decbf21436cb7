"""HTTP utilities providing retry/backoff semantics.

A single attempt reports how it went through a tagged outcome instead of
raising, and :func:`retry_with_backoff` loops over those outcomes:

* :class:`Success` ends the loop with a value.
* :class:`Fatal` ends the loop immediately, without waiting.
* :class:`Transient` waits ``attempt * backoff_seconds`` and tries again until
  the attempt budget is spent. The last transient attempt still waits before
  :class:`Exhausted` is returned.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class RetryConfig:
    def __init__(
        self,
        *,
        attempts: int = 3,
        backoff_seconds: float = 1.0,
        timeout_seconds: float = 5.0,
    ) -> None:
        if attempts < 1:
            raise ValueError("Retry attempts must be at least 1.")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds
        self.timeout_seconds = timeout_seconds

    def delay_for(self, attempt: int) -> float:
        """Linear backoff: wait ``attempt`` times the base delay."""
        return self.backoff_seconds * attempt


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Transient:
    reason: str


@dataclass(frozen=True)
class Fatal:
    reason: str


@dataclass(frozen=True)
class Exhausted:
    attempts: int
    last_reason: str


AttemptOutcome = Union[Success[T], Transient, Fatal]
RetryOutcome = Union[Success[T], Fatal, Exhausted]


def is_transient_status(status_code: int) -> bool:
    """Server-side errors are worth another attempt; nothing else is."""
    return 500 <= status_code < 600


async def retry_with_backoff(
    attempt: Callable[[], Awaitable[AttemptOutcome[T]]],
    *,
    retry_config: RetryConfig | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> RetryOutcome[T]:
    config = retry_config or RetryConfig()
    attempt_count = 0
    last_reason = ""

    while attempt_count < config.attempts:
        outcome = await attempt()
        if not isinstance(outcome, Transient):
            return outcome

        attempt_count += 1
        last_reason = outcome.reason
        delay = config.delay_for(attempt_count)
        logger.warning(
            "Transient failure on attempt %d (%s); waiting %.1fs",
            attempt_count,
            outcome.reason,
            delay,
        )
        await sleep(delay)

    return Exhausted(attempts=attempt_count, last_reason=last_reason)


__all__ = [
    "AttemptOutcome",
    "Exhausted",
    "Fatal",
    "RetryConfig",
    "RetryOutcome",
    "SleepFunc",
    "Success",
    "Transient",
    "is_transient_status",
    "retry_with_backoff",
]
