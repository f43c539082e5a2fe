"""Pipeline entry points for WordCards.

Currently exposed:

- :class:`PipelineOrchestrator`: callback-driven, one-run-at-a-time
  orchestrator (expand → synthesize → assemble), in ``flashcards.py``.
- :func:`run_pipeline`: synchronous wrapper returning a :class:`PipelineResult`.
"""

from __future__ import annotations

from .flashcards import PipelineOrchestrator, PipelineResult, RunState, run_pipeline

__all__ = ["PipelineOrchestrator", "PipelineResult", "RunState", "run_pipeline"]
