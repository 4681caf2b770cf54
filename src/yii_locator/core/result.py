"""Explicit success/failure outcomes for locator operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_IN_CONVENTION_DIRECTORY = "not_in_convention_directory"
    RESOURCE_NOT_FOUND = "resource_not_found"
    UNRESOLVABLE_REFERENCE = "unresolvable_reference"


@dataclass(frozen=True)
class LocatorError:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class LocatorFailure(Exception):
    """Raised by ``Outcome.unwrap`` on a failed outcome."""

    def __init__(self, error: LocatorError) -> None:
        super().__init__(str(error))
        self.error = error


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: LocatorError | None = None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> Outcome[T]:
        return cls(error=LocatorError(kind, message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise LocatorFailure(self.error)
        return self.value  # type: ignore[return-value]
