from __future__ import annotations

from typing import Iterator

from .base import RetryStrategy


class NoRetryStrategy(RetryStrategy):
    """One attempt; the entry waits for the next connectivity event."""

    def delays(self) -> Iterator[float]:
        return iter(())
