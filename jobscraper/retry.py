"""Backoff arithmetic and a retry decorator with linear backoff."""
from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)

RATE_LIMITED = 429


def backoff_delay(attempt: int, base_delay: float, status: int | None = None) -> float:
    """Seconds to wait after a failed *attempt* (1-based).

    Rate limiting and transport errors (``status is None``) back off
    linearly; server errors wait a flat ``base_delay``.
    """
    if status is not None and status >= 500:
        return base_delay
    return base_delay * attempt


def is_retryable_status(status: int) -> bool:
    return status == RATE_LIMITED or status >= 500


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable:
    """Decorator: retries the wrapped function, waiting ``base_delay * attempt``."""

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            last_exc: BaseException | None = None
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    last_exc = exc
                    if attempt == max_attempts:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            fn.__qualname__,
                            max_attempts,
                            exc,
                        )
                        raise
                    delay = backoff_delay(attempt, base_delay)
                    logger.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__,
                        attempt,
                        max_attempts,
                        exc,
                        delay,
                    )
                    sleep(delay)
            raise last_exc  # type: ignore[misc]

        return wrapper

    return decorator
