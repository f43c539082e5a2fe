"""Typed Result container for explicit success/failure returns.

Agents in the flashcard pipeline report expected failures (bad model output,
a failed image call) as values instead of raising them. The orchestrator then
decides what a failure means for the run. This module provides:

- `Ok(value)` / `Err(error)` variants,
- predicates: `is_ok`, `is_err`,
- unwrap helpers: `unwrap`, `unwrap_err`.

Example
-------
>>> from wordcards.core.result import ok, err, Result
>>> def count_cards(n: int) -> Result[int, str]:
...     return ok(n) if n in (1, 4) else err(f"expected 1 or 4 cards, got {n}")
>>> count_cards(4).unwrap()
4
>>> count_cards(2).unwrap_err()
'expected 1 or 4 cards, got 2'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, cast, overload

T = TypeVar("T")
E = TypeVar("E")


class Result(Generic[T, E]):
    """Sum type representing either success (`Ok[T]`) or failure (`Err[E]`)."""

    def is_ok(self) -> bool:
        """Return ``True`` if this is an :class:`Ok` value."""
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` if this is an :class:`Err` value."""
        return isinstance(self, Err)

    @overload
    def unwrap(self) -> T: ...
    @overload
    def unwrap(self, default: T) -> T: ...

    def unwrap(self, default: T | None = None) -> T:
        """Return the inner value if ``Ok``, else raise or return ``default``."""
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        if default is not None:
            return default
        raise RuntimeError(f"Attempted to unwrap Err: {self!r}")

    def unwrap_err(self) -> E:
        """Return the error value if ``Err``, else raise."""
        if isinstance(self, Err):
            return cast(Err[T, E], self).error
        raise RuntimeError(f"Attempted to unwrap_err on Ok: {self!r}")

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        if isinstance(self, Ok):
            return f"Ok({cast(Ok[T, E], self).value!r})"
        if isinstance(self, Err):
            return f"Err({cast(Err[T, E], self).error!r})"
        return "Result(?)"


@dataclass(frozen=True)
class Ok(Result[T, E]):
    """Successful result wrapping a value of type ``T``."""

    value: T


@dataclass(frozen=True)
class Err(Result[T, E]):
    """Failed result wrapping an error payload of type ``E``."""

    error: E


def ok(value: T) -> Result[T, E]:
    """Construct :class:`Ok` with better type inference at call sites."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Construct :class:`Err` with better type inference at call sites."""
    return Err(error)


__all__ = ["Result", "Ok", "Err", "ok", "err"]
