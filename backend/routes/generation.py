"""Generation API routes — async generation with job polling.

GET /prompt?prompt=...
  → Creates a job, returns { status, id, message } immediately.
  → Background task drives the browser session.

GET /response?id=...
  → Returns processing / ready (with artifact) / error.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import JSONResponse

from chatforge.jobs.service import JobService, get_job_service
from chatforge.schemas.api_schemas import JobErrorResponse, PromptSubmittedResponse, job_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/prompt",
    response_model=PromptSubmittedResponse,
    summary="Submit a prompt (async)",
    description="Creates a generation job and returns immediately. Poll GET /response?id=... for the result.",
)
async def submit_prompt(
    background_tasks: BackgroundTasks,
    prompt: Optional[str] = None,
    service: JobService = Depends(get_job_service),
):
    if not prompt or not prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt parameter is required")

    job = service.create_job(prompt)
    background_tasks.add_task(service.run_job, job.job_id)
    return PromptSubmittedResponse(id=job.job_id)


@router.get(
    "/response",
    summary="Get generation job status",
    description="Returns status; the generated artifact when ready, the cause when failed.",
)
async def get_response(
    id: Optional[str] = None,
    service: JobService = Depends(get_job_service),
):
    if not id:
        raise HTTPException(status_code=400, detail="id parameter is required")

    job = service.get(id)
    if not job:
        raise HTTPException(status_code=404, detail="Request not found")

    body = job_response(job)
    status_code = 500 if isinstance(body, JobErrorResponse) else 200
    return JSONResponse(content=body.model_dump(mode="json", by_alias=True), status_code=status_code)
