from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced course, student, enrollment or record is missing."""


class ConflictError(DomainError):
    """Raised when the store rejects a write because of a uniqueness constraint."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class TransientIOError(DomainError):
    """Raised when a call to the REST store fails (network error or 5xx)."""


class PartialBatchFailure(DomainError):
    """Some rows of a multi-row write landed and others did not.

    ``outcomes`` holds one entry per row so callers can report partial success
    and retry only what failed.
    """

    def __init__(self, message: str, outcomes: Sequence = ()):
        super().__init__(message)
        self.outcomes = list(outcomes)

    @property
    def failed(self) -> list:
        return [o for o in self.outcomes if not o.ok]

    @property
    def succeeded(self) -> list:
        return [o for o in self.outcomes if o.ok]
