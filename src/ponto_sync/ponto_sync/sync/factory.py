from __future__ import annotations

from dataclasses import dataclass

from ..core.exceptions import ValidationError
from .strategies.base import RetryStrategy
from .strategies.exponential_strategy import ExponentialBackoffStrategy
from .strategies.fixed_delay_strategy import FixedDelayStrategy
from .strategies.no_retry_strategy import NoRetryStrategy


@dataclass
class RetryStrategyFactory:
    """Factory Pattern: build the replay retry policy named in settings."""

    def from_settings(self, *, policy: str, retries: int = 3, delay: float = 1.0) -> RetryStrategy:
        policy = (policy or "none").strip().lower()
        if policy == "none":
            return NoRetryStrategy()
        if policy == "fixed":
            return FixedDelayStrategy(delay=float(delay), retries=int(retries))
        if policy == "exponential":
            return ExponentialBackoffStrategy(base=float(delay), retries=int(retries))
        raise ValidationError(f"Unknown retry policy: {policy!r}")
