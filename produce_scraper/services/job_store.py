from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from typing import List, Optional
import json
import logging

from produce_scraper.core.exceptions import JobExistsError, StorageError
from produce_scraper.models.database import ScrapeJob, utcnow
from produce_scraper.schemas.models import JobStatus, JobView, ProductRecord

logger = logging.getLogger(__name__)

def serialize_results(results: List[ProductRecord]) -> str:
    return json.dumps([record.model_dump() for record in results])

def deserialize_results(raw: Optional[str]) -> Optional[List[ProductRecord]]:
    if raw is None:
        return None
    return [ProductRecord(**item) for item in json.loads(raw)]

class JobStore:
    """Job status table keyed by job id."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def create_pending(self, job_id: str, store_id: str) -> None:
        """Insert a pending row for a newly accepted job."""
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    session.add(ScrapeJob(job_id=job_id, store_id=store_id, status=JobStatus.PENDING.value))
        except IntegrityError as e:
            raise JobExistsError(f"Job {job_id} already exists") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create pending job {job_id}: {e}") from e
        logger.info(f"Job {job_id} recorded as pending")

    async def record_outcome(self, job_id: str, status: JobStatus,
                             results: Optional[List[ProductRecord]] = None,
                             error_message: Optional[str] = None,
                             store_id: Optional[str] = None) -> None:
        """
        Write the terminal status of a job in one transaction.

        Results are only stored for complete jobs. The row is created with
        store_id when no pending row exists.

        Raises:
            StorageError: If the database is unreachable, a constraint fails or
                the job already has a terminal status.
        """
        if not status.is_terminal:
            raise ValueError(f"record_outcome expects a terminal status, got {status.value}")

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    job = await session.get(ScrapeJob, job_id, with_for_update=True)
                    if job is None:
                        job = ScrapeJob(job_id=job_id, store_id=store_id)
                        session.add(job)
                    elif JobStatus(job.status).is_terminal:
                        raise StorageError(f"Job {job_id} is already {job.status}")

                    job.status = status.value
                    job.results = serialize_results(results) if status is JobStatus.COMPLETE and results else None
                    job.error_message = error_message if status is JobStatus.FAILED else None
                    job.updated_at = utcnow()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not record outcome for job {job_id}: {e}") from e
        logger.info(f"Job {job_id} recorded as {status.value}")

    async def get_job(self, job_id: str) -> Optional[JobView]:
        """Get a job by id, or None if it has not been written yet."""
        try:
            async with self.session_factory() as session:
                job = await session.get(ScrapeJob, job_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read job {job_id}: {e}") from e

        if job is None:
            return None
        return JobView(
            job_id=job.job_id,
            store_id=job.store_id,
            status=JobStatus(job.status),
            results=deserialize_results(job.results),
            error_message=job.error_message,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )
