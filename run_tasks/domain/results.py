from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import RunTasksError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """A ``data``/``error`` pair. Check ``ok`` before trusting ``data``."""

    data: T | None = None
    error: RunTasksError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T | None = None) -> Result[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, error: RunTasksError) -> Result[T]:
        return cls(error=error)
