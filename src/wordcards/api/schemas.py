"""Request/response models for the WordCards HTTP API."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from wordcards.core.contracts.card import CardData


class JobStatus(str, Enum):
    """Lifecycle of an API job (coarser than the pipeline's RunState)."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerateRequest(BaseModel):
    """Body of ``POST /flashcards``.

    Blank text is accepted here on purpose; the pipeline rejects it and the job
    fails with the same message every other surface shows.
    """

    text: str = Field(max_length=200, description="An Arabic word or category.")


class FlashcardsResult(BaseModel):
    """Payload attached to a completed job."""

    cards: list[CardData] = Field(default_factory=list)


class JobInfo(BaseModel):
    """Status document returned by every job endpoint."""

    job_id: str
    status: JobStatus
    created_at: datetime
    stage: str | None = Field(default=None, description="Latest progress text.")
    error: str | None = None
    result: FlashcardsResult | None = None


__all__ = ["JobStatus", "GenerateRequest", "FlashcardsResult", "JobInfo"]
