"""
Retry utilities with exponential backoff.

A `RetryPolicy` states which failures are transient and how long to back off
between attempts. Only idempotent calls should be wrapped: a write that fails
after the server applied it would be applied again.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many attempts a call gets and which exceptions earn another one."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    retry_on: tuple[type[Exception], ...] = (Exception,)

    def delay(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (0-based)."""
        return min(self.initial_delay * self.exponential_base**attempt, self.max_delay)


def retry_with_backoff(policy: RetryPolicy) -> Any:
    """
    Decorator for retrying async functions according to a policy.

    Exceptions outside `policy.retry_on` propagate on the first failure; the
    last transient failure propagates once the attempts are used up.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(policy.max_attempts):
                try:
                    result = await func(*args, **kwargs)
                except policy.retry_on as e:
                    if attempt == policy.max_attempts - 1:
                        logger.error(f"{func.__name__} failed after {policy.max_attempts} attempts: {e}")
                        raise

                    wait_time = policy.delay(attempt)
                    logger.warning(
                        f"{func.__name__} attempt {attempt + 1}/{policy.max_attempts} failed, "
                        f"retrying in {wait_time:.2f}s: {e}"
                    )
                    await asyncio.sleep(wait_time)
                else:
                    if attempt > 0:
                        logger.info(f"{func.__name__} succeeded on attempt {attempt + 1}/{policy.max_attempts}")
                    return result

            raise RuntimeError(f"{func.__name__} was given no attempts")

        return wrapper

    return decorator
