from typing import List
import logging
import time

from produce_scraper.core.exceptions import ExtractionEmptyError, ScraperError, StorageError
from produce_scraper.schemas.models import JobStatus, ProductRecord
from produce_scraper.scrapers.base import BaseExtractor
from produce_scraper.services.fetch_client import ScrapingBeeClient
from produce_scraper.services.job_store import JobStore

logger = logging.getLogger(__name__)

class JobRunner:
    """Runs one scrape job from fetch to its single terminal status write."""

    def __init__(self, fetch_client: ScrapingBeeClient, extractor: BaseExtractor,
                 job_store: JobStore, fetch_timeout: float = 90):
        self.fetch_client = fetch_client
        self.extractor = extractor
        self.job_store = job_store
        self.fetch_timeout = fetch_timeout

    async def _scrape(self, store_id: str) -> List[ProductRecord]:
        html = await self.fetch_client.fetch(store_id, timeout=self.fetch_timeout)
        products = self.extractor.extract(html)
        if not products:
            raise ExtractionEmptyError(f"No items parsed for store {store_id}; the page layout may have changed")
        return products

    async def run(self, job_id: str, store_id: str) -> JobStatus:
        """
        Run the job and record its outcome.

        Never raises: failures are logged and recorded as a failed job, and a
        failed status write is only logged since no caller is left to tell.
        """
        start_time = time.monotonic()
        logger.info(f"Job {job_id} started for store {store_id}")

        try:
            products = await self._scrape(store_id)
        except ScraperError as e:
            logger.error(f"Job {job_id} failed: {e}")
            status, products, error_message = JobStatus.FAILED, None, e.public_message
        except Exception as e:
            logger.error(f"Job {job_id} failed with unexpected error: {e}", exc_info=True)
            status, products, error_message = JobStatus.FAILED, None, "Unexpected error while scraping."
        else:
            status, error_message = JobStatus.COMPLETE, None

        try:
            await self.job_store.record_outcome(job_id, status, results=products,
                                                error_message=error_message, store_id=store_id)
        except StorageError as e:
            logger.error(f"Could not record {status.value} status for job {job_id}: {e}", exc_info=True)

        elapsed = time.monotonic() - start_time
        logger.info(f"Job {job_id} finished as {status.value} in {elapsed:.1f} seconds")
        return status
