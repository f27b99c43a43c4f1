"""Shared validation helpers."""

from __future__ import annotations

import math


def validate_positive_finite_timeout(timeout: float, *, name: str = "timeout") -> None:
    """Ensure *timeout* represents a usable socket timeout value."""
    if isinstance(timeout, bool):
        msg = f"{name} must be a real number"
        raise TypeError(msg)

    if not (timeout > 0 and math.isfinite(timeout)):
        msg = f"{name} must be > 0 and finite"
        raise ValueError(msg)


def validate_retry_attempts(retries: int) -> None:
    """Ensure the retry count allows at least one attempt."""
    if isinstance(retries, bool) or not isinstance(retries, int):
        msg = "retries must be an integer"
        raise TypeError(msg)
    if retries < 1:
        msg = "retries must be >= 1"
        raise ValueError(msg)


def validate_retry_backoff(backoff: float) -> None:
    """Ensure the linear backoff factor is a finite, non-negative number."""
    if not (backoff >= 0 and math.isfinite(backoff)):
        msg = "backoff must be >= 0 and finite"
        raise ValueError(msg)


def validate_retry_jitter(jitter: float) -> None:
    """Ensure the jitter fraction lies within ``[0, 1]``."""
    if not (0.0 <= jitter <= 1.0):
        msg = "jitter must be between 0 and 1"
        raise ValueError(msg)


def validate_unsigned(value: int, *, name: str = "value") -> None:
    """Ensure *value* can be rendered as an unsigned decimal field."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer, not {type(value).__name__}"
        raise TypeError(msg)
    if value < 0:
        msg = f"{name} must be >= 0"
        raise ValueError(msg)
