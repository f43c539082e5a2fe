"""
API routes for flashcard generation jobs.

Endpoints
---------
- `POST /flashcards`: Submit a word or category (returns 202 + job).
- `GET /jobs/{job_id}`: Poll status, progress text, and cards.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from wordcards.api.background import run_flashcards_task
from wordcards.api.job_store import get_job_store
from wordcards.api.schemas import GenerateRequest, JobInfo

router = APIRouter(tags=["Flashcards"])


@router.post(
    "/flashcards",
    response_model=JobInfo,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a new flashcard generation job",
)
async def submit_flashcards(
    request: GenerateRequest,
    background_tasks: BackgroundTasks,
) -> JobInfo:
    """
    Create a job for ``request.text`` and schedule the pipeline run.

    Client Workflow
    ---------------
    1. Receive `job_id` from this response.
    2. Poll `GET /jobs/{job_id}` until status is 'completed' or 'failed'.
    """
    store = get_job_store()
    job_id = store.create_job()
    background_tasks.add_task(run_flashcards_task, job_id=job_id, text=request.text)

    job_info = store.get_job(job_id)
    if not job_info:
        raise HTTPException(status_code=500, detail="Failed to create job")

    # Snapshot now, so the 202 body reflects the state before the task ran.
    return job_info.model_copy(deep=True)


@router.get(
    "/jobs/{job_id}",
    response_model=JobInfo,
    summary="Get job status and results",
)
async def get_job_status(job_id: str) -> JobInfo:
    """Return the job's status, latest stage text, and cards once completed."""
    job = get_job_store().get_job(job_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found",
        )
    return job


__all__ = ["router"]
