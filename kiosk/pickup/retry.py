"""Bounded retry for operations that may produce unusable results."""
import logging
from collections.abc import Callable
from typing import TypeVar

from kiosk.core.errors import RetryExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry(
    fn: Callable[[], T],
    max_attempts: int,
    is_acceptable: Callable[[T], bool],
) -> T:
    """
    Call ``fn`` until ``is_acceptable`` accepts its result.

    Returns the first acceptable result. Raises RetryExhausted after
    ``max_attempts`` rejected results; nothing rejected is ever returned.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        result = fn()
        if is_acceptable(result):
            return result
        logger.warning(f"Attempt {attempt}/{max_attempts} rejected: {result!r}")

    raise RetryExhausted(
        f"No acceptable result after {max_attempts} attempts",
        attempts=max_attempts,
    )
