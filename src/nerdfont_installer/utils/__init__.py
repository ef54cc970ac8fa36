"""Utility helpers."""

from .retry import RetryPolicy, exponential_delay, fixed_delay, retry_call

__all__ = ["RetryPolicy", "exponential_delay", "fixed_delay", "retry_call"]
