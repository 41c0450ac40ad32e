from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .base import RetryStrategy


@dataclass(frozen=True)
class FixedDelayStrategy(RetryStrategy):
    delay: float = 1.0
    retries: int = 3

    def delays(self) -> Iterator[float]:
        for _ in range(max(0, self.retries)):
            yield self.delay
