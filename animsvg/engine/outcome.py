"""Outcome — the success/failure value every public operation returns.

A failed outcome carries the typed ``AnimSvgError``; there is no silent
"return the input unchanged" path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from animsvg.errors import AnimSvgError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: AnimSvgError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: AnimSvgError) -> Outcome[T]:
        return cls(error=error)
