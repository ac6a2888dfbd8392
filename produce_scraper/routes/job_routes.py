from fastapi import APIRouter, Depends, HTTPException
import logging

from produce_scraper.core.dependencies import get_job_store
from produce_scraper.schemas.models import JobView
from produce_scraper.services.job_store import JobStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])

@router.get("/{job_id}", response_model=JobView)
async def get_job(job_id: str, job_store: JobStore = Depends(get_job_store)):
    """
    Get the status of a background scrape job.
    A 404 means the job has not been written yet or the id is wrong.
    """
    job = await job_store.get_job(job_id)
    if job is None:
        logger.debug(f"Job {job_id} not found")
        raise HTTPException(status_code=404, detail=f"Job {job_id} not found")
    return job
