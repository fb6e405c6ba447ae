from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .enums import ErrorKind
from .exceptions import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success payload or typed error, returned by the engine façade."""

    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    retryable: bool = False

    @classmethod
    def success(cls, value: T, message: str = "") -> "Result[T]":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: ErrorKind, message: str, *, retryable: bool = False) -> "Result[T]":
        return cls(ok=False, error=error, message=message, retryable=retryable)

    @classmethod
    def from_error(cls, exc: DomainError) -> "Result[T]":
        return cls.failure(exc.kind, str(exc), retryable=exc.retryable)
