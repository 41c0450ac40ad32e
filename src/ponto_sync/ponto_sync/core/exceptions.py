from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid, before any network attempt."""


class AuthenticationError(DomainError):
    """Raised when admin credentials are invalid."""


class TransientNetworkError(DomainError):
    """The backend could not be reached or answered with a failure.

    Recovered locally: reads fall back to the cache, writes are queued.
    """

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


class ReplayError(DomainError):
    """A queued write failed again while draining the queue."""

    def __init__(self, message: str, *, entry_id: str | None = None):
        super().__init__(message)
        self.entry_id = entry_id


class CascadeError(DomainError):
    """A dependent punch update failed while the employee update succeeded."""

    def __init__(self, message: str, *, punch_id: str | None = None):
        super().__init__(message)
        self.punch_id = punch_id
