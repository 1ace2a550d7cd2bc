"""
Retry with exponential backoff for transient LLM/API failures.
"""

import os
import asyncio
import logging
import random
from functools import wraps
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
NON_RETRYABLE_STATUS_CODES = {400, 401, 403, 404, 422}

NETWORK_KEYWORDS = (
    "connection",
    "timeout",
    "timed out",
    "network",
    "unreachable",
    "unavailable",
    "temporarily",
)


def _status_code_of(error: Exception) -> Optional[int]:
    # anthropic and httpx errors carry status_code, or a response with one
    status = getattr(error, "status_code", None)
    if status is None:
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def is_retryable_error(error: Exception) -> bool:
    """
    Decide whether an error is worth retrying.

    Status codes are used when the exception carries one; otherwise the
    error type and message are inspected.
    """
    status = _status_code_of(error)
    if status is not None:
        return status in RETRYABLE_STATUS_CODES

    if isinstance(error, (ConnectionError, TimeoutError)):
        return True

    error_str = str(error).lower()
    if any(f"status code {code}" in error_str for code in NON_RETRYABLE_STATUS_CODES):
        return False
    if any(f"status code {code}" in error_str for code in RETRYABLE_STATUS_CODES):
        return True

    return any(keyword in error_str for keyword in NETWORK_KEYWORDS)


def calculate_delay(
    attempt: int,
    base_delay: float,
    exponential_base: float,
    max_delay: float,
    jitter: bool
) -> float:
    """
    Delay before retry `attempt` (0-indexed), capped at max_delay.

    Jitter scales the delay into [50%, 100%] of its nominal value.
    """
    delay = min(base_delay * (exponential_base ** attempt), max_delay)
    if jitter:
        delay = delay * (0.5 + random.random() * 0.5)
    return delay


def retry_with_backoff(
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    exponential_base: Optional[float] = None,
    jitter: bool = True
):
    """
    Decorator for retrying async functions with exponential backoff.

    Reads configuration from environment variables if not provided:
    - MAX_RETRIES: Maximum number of retry attempts (default: 3)
    - RETRY_BASE_DELAY: Delay before the first retry (default: 1.0)
    - RETRY_BACKOFF_BASE: Exponential base for backoff (default: 2.0)
    - RETRY_MAX_DELAY: Maximum delay between retries (default: 60.0)

    Example:
        @retry_with_backoff(max_retries=3, base_delay=1.0)
        async def create_message(...):
            ...
    """
    if max_retries is None:
        max_retries = int(os.getenv("MAX_RETRIES", "3"))
    if base_delay is None:
        base_delay = float(os.getenv("RETRY_BASE_DELAY", "1.0"))
    if max_delay is None:
        max_delay = float(os.getenv("RETRY_MAX_DELAY", "60.0"))
    if exponential_base is None:
        exponential_base = float(os.getenv("RETRY_BACKOFF_BASE", "2.0"))

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            for attempt in range(max_retries + 1):
                try:
                    result = await func(*args, **kwargs)
                    if attempt > 0:
                        logger.info(f"{func.__name__} succeeded on attempt {attempt + 1}")
                    return result

                except Exception as e:
                    if attempt >= max_retries:
                        logger.error(f"{func.__name__} failed after {max_retries + 1} attempts")
                        raise

                    if not is_retryable_error(e):
                        logger.debug(f"{func.__name__} failed with non-retryable error: {e}")
                        raise

                    delay = calculate_delay(attempt, base_delay, exponential_base, max_delay, jitter)
                    logger.warning(
                        f"{func.__name__} failed on attempt {attempt + 1}/{max_retries + 1}, "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
