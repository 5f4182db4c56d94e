"""Minimal result type for multi-step flows that must report a typed failure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from app.services._shared.errors import ServiceError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Either a value or a :class:`ServiceError`, never both.

    :ivar value: Successful payload (``None`` on failure).
    :ivar error: Failure carrying its :class:`~app.services._shared.errors.ErrorKind`.
    """

    value: T | None = None
    error: ServiceError | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ServiceError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
