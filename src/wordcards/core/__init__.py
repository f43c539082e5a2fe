"""Core package initializer for WordCards.

Settings, the ``Result`` container, the error taxonomy, and the data contracts
live here so that agents, pipelines, and surfaces share one vocabulary.
"""

from __future__ import annotations

__all__ = ["__doc__"]
