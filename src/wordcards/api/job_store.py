"""
In-Memory Job Store for flashcard generation jobs.

Responsibilities
----------------
- **Create**: Generate UUIDs for new requests and mark them PENDING.
- **Read**: Retrieve current status, stage text, and results by Job ID.
- **Update**: Move jobs through PROCESSING -> COMPLETED/FAILED and record
  progress text as the pipeline reports it.
- **Evict**: Hold at most `max_jobs` entries; when a new job pushes the store
  over the cap, the oldest COMPLETED/FAILED jobs are dropped. Pending and
  processing jobs are never evicted.

This is a volatile store: if the server restarts, all jobs are lost.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import ClassVar

from wordcards.api.schemas import FlashcardsResult, JobInfo, JobStatus
from wordcards.core.settings import load_settings

_FINISHED = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})


class JobStore:
    """A dictionary-backed store for JobInfo objects."""

    _instance: ClassVar[JobStore | None] = None

    def __init__(self, max_jobs: int | None = None) -> None:
        self._jobs: dict[str, JobInfo] = {}
        self.max_jobs = max_jobs if max_jobs is not None else load_settings().max_jobs

    @classmethod
    def get_instance(cls) -> JobStore:
        """Accessor for the global singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def create_job(self) -> str:
        """Register a new job ID in PENDING state and return it."""
        job_id = str(uuid.uuid4())
        self._jobs[job_id] = JobInfo(
            job_id=job_id,
            status=JobStatus.PENDING,
            created_at=datetime.now(UTC),
        )
        self._evict_finished()
        return job_id

    def get_job(self, job_id: str) -> JobInfo | None:
        """Retrieve job metadata, or None if not found."""
        return self._jobs.get(job_id)

    def mark_processing(self, job_id: str) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.PROCESSING

    def update_stage(self, job_id: str, stage: str) -> None:
        """Record the latest progress text for a running job."""
        if job := self._jobs.get(job_id):
            job.stage = stage

    def mark_completed(self, job_id: str, result: FlashcardsResult) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.COMPLETED
            job.stage = None
            job.result = result

    def mark_failed(self, job_id: str, error: str) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.FAILED
            job.stage = None
            job.error = error

    def _evict_finished(self) -> None:
        """Drop the oldest finished jobs while the store is over its cap."""
        excess = len(self._jobs) - self.max_jobs
        if excess <= 0:
            return
        # dicts keep insertion order, so this walks oldest first
        stale = [jid for jid, job in self._jobs.items() if job.status in _FINISHED][:excess]
        for job_id in stale:
            del self._jobs[job_id]

    def clear(self) -> None:
        """Drop every job (used by tests)."""
        self._jobs.clear()


def get_job_store() -> JobStore:
    return JobStore.get_instance()


__all__ = ["JobStore", "get_job_store"]
