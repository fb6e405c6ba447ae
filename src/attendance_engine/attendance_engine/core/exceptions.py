from __future__ import annotations

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.VALIDATION
    retryable: bool = False


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Raised when the pairing slot is held by another user."""

    kind = ErrorKind.CONFLICT


class InvalidSessionError(DomainError):
    """Raised on confirm/cancel against a missing, expired or foreign session."""

    kind = ErrorKind.INVALID_SESSION


class UnknownCardError(DomainError):
    kind = ErrorKind.UNKNOWN_CARD


class InvalidStateError(DomainError):
    """Raised when a request was already decided."""

    kind = ErrorKind.INVALID_STATE


class ConfigUnavailableError(DomainError):
    kind = ErrorKind.CONFIG_UNAVAILABLE


class StoreFailure(DomainError):
    """Raised when a transaction or commit fails. Safe to retry by the caller."""

    kind = ErrorKind.STORE_FAILURE
    retryable = True
