# src/wordcards/api/background.py
"""
Background task runner for flashcard jobs.

Each job gets its own :class:`PipelineOrchestrator`, so concurrent HTTP
requests never share run state. The orchestrator's callbacks write straight
into the job store: progress text to ``stage``, cards to ``result``, and the
user-facing message to ``error``.
"""

from __future__ import annotations

from wordcards.api.job_store import get_job_store
from wordcards.api.schemas import FlashcardsResult
from wordcards.core.contracts.card import CardData
from wordcards.core.settings import get_logger
from wordcards.pipelines.flashcards import PipelineOrchestrator

logger = get_logger(__name__)


async def run_flashcards_task(job_id: str, text: str) -> None:
    """
    Run one pipeline for ``job_id`` and record the outcome in the job store.

    Scheduled via `FastAPI.BackgroundTasks`. It never raises to the caller;
    anything unexpected marks the job as FAILED.
    """
    store = get_job_store()
    store.mark_processing(job_id)

    def on_success(cards: list[CardData]) -> None:
        store.mark_completed(job_id, FlashcardsResult(cards=cards))

    def on_error(message: str) -> None:
        store.mark_failed(job_id, message)

    orchestrator = PipelineOrchestrator(
        on_progress=lambda stage: store.update_stage(job_id, stage),
        on_success=on_success,
        on_error=on_error,
    )

    try:
        await orchestrator.request_generation(text)
    except Exception as exc:
        logger.exception("job %s crashed", job_id)
        store.mark_failed(job_id, f"Pipeline Error: {exc}")


__all__ = ["run_flashcards_task"]
