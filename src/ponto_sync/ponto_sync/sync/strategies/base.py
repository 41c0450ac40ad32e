from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class RetryStrategy(ABC):
    """Strategy Pattern: how long to wait between attempts of one queued write.

    `delays()` yields one wait (in seconds) per extra attempt; an empty
    iterator means a single attempt.
    """

    @abstractmethod
    def delays(self) -> Iterator[float]:
        raise NotImplementedError
