"""Retry utilities for platform record fetches."""

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from saas_analytics.core.exceptions import InvalidRecord

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Non-retryable exceptions
NON_RETRYABLE_EXCEPTIONS = (
    InvalidRecord,
    ValueError,
    TypeError,
    KeyError,
)


@dataclass
class RetryPolicy:
    """Configuration for retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 1.0
    max_wait: float = 60.0


def is_retryable_error(error: Exception) -> bool:
    """Determine if an error is retryable."""
    if isinstance(error, NON_RETRYABLE_EXCEPTIONS):
        return False

    # Lost connections and locked databases clear up on their own
    if isinstance(error, OperationalError):
        return True
    if isinstance(error, DBAPIError):
        return bool(error.connection_invalidated)

    if isinstance(error, (TimeoutError, ConnectionError)):
        return True

    return False


def _wait_time(policy: RetryPolicy, attempt: int) -> float:
    return min(
        policy.backoff_factor * (2 ** attempt) + random.uniform(0, policy.backoff_factor),
        policy.max_wait,
    )


def retry_with_backoff(policy: RetryPolicy | None = None):
    """Decorator that retries async functions with exponential backoff."""
    if policy is None:
        policy = RetryPolicy()

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            for attempt in range(policy.max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not is_retryable_error(e):
                        logger.warning(f"Non-retryable error in {func.__name__}: {e}")
                        raise

                    if attempt >= policy.max_retries:
                        logger.error(
                            f"{func.__name__} failed after {policy.max_retries + 1} attempts: {e}"
                        )
                        raise

                    wait_time = _wait_time(policy, attempt)
                    logger.warning(
                        f"{func.__name__} attempt {attempt + 1}/{policy.max_retries + 1} "
                        f"failed: {e}. Retrying in {wait_time:.1f}s..."
                    )
                    await asyncio.sleep(wait_time)

            raise RuntimeError("Unexpected retry failure")

        return wrapper

    return decorator


async def call_with_retry(policy: RetryPolicy, func: Callable[..., T], *args, **kwargs) -> T:
    """Run a blocking callable in a worker thread, retrying transient errors."""

    async def _in_thread() -> T:
        return await asyncio.to_thread(func, *args, **kwargs)

    _in_thread.__name__ = getattr(func, "__name__", "fetch")
    return await retry_with_backoff(policy)(_in_thread)()

