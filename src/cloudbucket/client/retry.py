"""Exponential backoff for throttled S3 calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Coroutine, ParamSpec, TypeVar

from botocore.exceptions import ClientError


logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

THROTTLING_CODES = frozenset({"SlowDown", "RequestLimitExceeded", "ServiceUnavailable"})


@dataclass(frozen=True)
class RetryScheduled:
    """Planned retry with bounded, explicit delay."""

    attempt: int
    delay_seconds: float


@dataclass(frozen=True)
class RetryExhausted:
    """Retry budget consumed."""

    attempts: int


@dataclass(frozen=True)
class RetryGiveUp:
    """Explicit stop signal when retries are not allowed for an error."""

    reason: str


RetryControl = RetryScheduled | RetryExhausted | RetryGiveUp


def retry_schedule(max_retries: int, base_delay: float, max_delay: float) -> list[RetryScheduled]:
    """Deterministic retry plan: delay = min(base_delay * 2**attempt, max_delay)."""
    return [
        RetryScheduled(attempt=attempt, delay_seconds=min(base_delay * (2**attempt), max_delay))
        for attempt in range(max_retries)
    ]


def retry_decision(
    *,
    attempt: int,
    error_code: str,
    schedule: list[RetryScheduled],
) -> RetryControl:
    """Map an error code and attempt to an explicit retry control signal."""
    if error_code not in THROTTLING_CODES:
        return RetryGiveUp(reason=f"non_retryable:{error_code}")
    if attempt >= len(schedule):
        return RetryExhausted(attempts=attempt + 1)
    return schedule[attempt]


def retry_on_throttle(
    max_retries: int = 5, base_delay: float = 0.1, max_delay: float = 5.0
) -> Callable[
    [Callable[P, Coroutine[object, object, R]]],
    Callable[P, Coroutine[object, object, R]],
]:
    """
    Decorator to retry S3 calls that fail with a throttling ClientError.

    Non-throttling errors and an exhausted budget re-raise the original
    ClientError so callers classify it like any other failure.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
    """

    def decorator(
        func: Callable[P, Coroutine[object, object, R]],
    ) -> Callable[P, Coroutine[object, object, R]]:
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            schedule = retry_schedule(max_retries, base_delay, max_delay)
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except ClientError as e:
                    match retry_decision(
                        attempt=attempt,
                        error_code=e.response["Error"]["Code"],
                        schedule=schedule,
                    ):
                        case RetryGiveUp() | RetryExhausted():
                            raise
                        case RetryScheduled(delay_seconds=delay):
                            logger.warning(
                                "%s throttled (attempt %d), retrying in %.2fs",
                                func.__qualname__,
                                attempt + 1,
                                delay,
                            )
                            await asyncio.sleep(delay)
                            attempt += 1

        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        wrapper.__module__ = func.__module__
        wrapper.__qualname__ = func.__qualname__
        wrapper.__annotations__ = func.__annotations__

        return wrapper

    return decorator


__all__ = [
    "RetryScheduled",
    "RetryExhausted",
    "RetryGiveUp",
    "RetryControl",
    "retry_schedule",
    "retry_decision",
    "retry_on_throttle",
]
