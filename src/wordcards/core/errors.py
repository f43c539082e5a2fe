"""Error taxonomy for a flashcard generation run.

Every kind is constructed where the failure happens and handed to the
orchestrator inside an ``Err`` (see :mod:`wordcards.core.result`). Only
:class:`AssemblyInvariantViolation` is ever raised, because it signals a bug
rather than a condition the user can act on.

==========================  ==============================================
Kind                        Meaning
==========================  ==============================================
InvalidInputError           Input was empty after trimming whitespace.
ExpansionError              Term expansion call failed or returned junk.
SynthesisError              An image call failed or returned no image.
AssemblyInvariantViolation  Terms and images differ in length (a defect).
==========================  ==============================================
"""

from __future__ import annotations


class FlashcardError(Exception):
    """Base class for all pipeline errors.

    ``detail`` is the human-readable text shown to the user after the fixed
    error prefix, so it should be a complete sentence on its own.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.detail == getattr(other, "detail", None)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.detail))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.detail!r})"


class InvalidInputError(FlashcardError):
    """The raw input was empty or whitespace-only."""


class ExpansionError(FlashcardError):
    """The term expansion stage produced no usable term set."""


class SynthesisError(FlashcardError):
    """An image synthesis call failed.

    ``index`` is the position of the term whose image failed, when known.
    """

    def __init__(self, detail: str, *, index: int | None = None) -> None:
        super().__init__(detail)
        self.index = index


class AssemblyInvariantViolation(FlashcardError):
    """Terms and images could not be paired position by position."""


__all__ = [
    "FlashcardError",
    "InvalidInputError",
    "ExpansionError",
    "SynthesisError",
    "AssemblyInvariantViolation",
]
