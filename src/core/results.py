"""
Friend Finder: Operation results.

Mutating store operations that drive a visible transition return a Result
rather than raising: either the constructed record or a tagged failure the
UI turns into a corrective message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from src.ports.storage_port import PersistenceError

T = TypeVar("T")


class ErrorKind(Enum):
    EMPTY_NAME = "empty_name"
    INVALID_BIRTHDATE = "invalid_birthdate"
    MISSING_SELECTION = "missing_selection"


# User-facing texts shown by the app for each kind
_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EMPTY_NAME: "Navn er påkrævet",
    ErrorKind.INVALID_BIRTHDATE: "Indtast en gyldig fødselsdato i formatet YYYY-MM-DD",
    ErrorKind.MISSING_SELECTION: (
        "Du skal vælge både en aktivitet og et tidspunkt før du kan bekræfte."
    ),
}


@dataclass(frozen=True)
class ValidationError:
    """A user-correctable rejection."""

    kind: ErrorKind
    message: str

    @classmethod
    def of(cls, kind: ErrorKind) -> ValidationError:
        return cls(kind=kind, message=_MESSAGES[kind])


@dataclass
class Result(Generic[T]):
    """Either a value or an error, never both."""

    value: T | None = None
    error: ValidationError | PersistenceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        """The validation kind, or None for success and persistence failures."""
        if isinstance(self.error, ValidationError):
            return self.error.kind
        return None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ValidationError | PersistenceError) -> Result[T]:
        return cls(error=error)

    @classmethod
    def invalid(cls, kind: ErrorKind) -> Result[T]:
        return cls(error=ValidationError.of(kind))
