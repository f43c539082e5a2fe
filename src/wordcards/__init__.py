"""WordCards: illustrated Arabic/English flashcards from a single word or category."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
