from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is what the HTTP layer answers with; ``code`` is an optional
    machine-readable reason (e.g. a ``ScanRejection`` value).
    """

    status_code = 400

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no session exists."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class InvalidStateError(DomainError):
    """The request is well-formed but not allowed right now."""


class ConflictError(DomainError):
    """The action would violate a uniqueness rule."""


class StoreError(DomainError):
    """Underlying persistence failure. Never shown to the caller in detail."""

    status_code = 500
