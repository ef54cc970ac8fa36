"""Bounded retry helper.

One combinator serves both the API rate limit loop and the font copy loop;
they differ only in the retry predicate and the backoff function.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to wait before trying again.

    Attributes:
        max_attempts: Total number of calls, including the first one
        backoff: Maps (retry_index, error) to seconds to sleep; retry_index starts at 0
        retry_on: Returns True for errors worth another attempt
    """

    max_attempts: int
    backoff: Callable[[int, Exception], float]
    retry_on: Callable[[Exception], bool]

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")


def fixed_delay(seconds: float) -> Callable[[int, Exception], float]:
    """Backoff that always waits the same time."""

    def _backoff(_retry_index: int, _error: Exception) -> float:
        return seconds

    return _backoff


def exponential_delay(base_seconds: float) -> Callable[[int, Exception], float]:
    """Backoff of ``base_seconds * 2**retry_index``."""

    def _backoff(retry_index: int, _error: Exception) -> float:
        return base_seconds * (2**retry_index)

    return _backoff


def retry_call(
    func: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    description: str = "operation",
) -> T:
    """Call ``func`` until it succeeds or the policy gives up.

    Errors rejected by ``policy.retry_on`` propagate immediately. When the
    attempts are exhausted the last error propagates unchanged.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except Exception as e:
            if not policy.retry_on(e):
                raise
            if attempt >= policy.max_attempts:
                logger.debug(f"{description} failed after {attempt} attempts: {e}")
                raise
            delay = policy.backoff(attempt - 1, e)
            logger.warning(
                f"{description} attempt {attempt}/{policy.max_attempts} failed: {e}; "
                f"retrying in {delay:g}s"
            )
            sleep(delay)
