from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .base import RetryStrategy


@dataclass(frozen=True)
class ExponentialBackoffStrategy(RetryStrategy):
    """base, base*factor, base*factor**2, ... capped at max_delay."""

    base: float = 0.5
    factor: float = 2.0
    retries: int = 4
    max_delay: float = 30.0

    def delays(self) -> Iterator[float]:
        delay = self.base
        for _ in range(max(0, self.retries)):
            yield min(delay, self.max_delay)
            delay *= self.factor
