from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask
from typing import List, Optional
import logging

from produce_scraper.core.config import Settings, get_settings
from produce_scraper.core.dependencies import (
    build_job_runner,
    get_dispatcher,
    get_fetch_client,
    get_page_extractor,
    get_scrape_service,
)
from produce_scraper.core.exceptions import ConfigError, JobExistsError, ScrapeValidationError, StorageError
from produce_scraper.schemas.models import ProductRecord, ScrapeRequest
from produce_scraper.scrapers import BaseExtractor
from produce_scraper.services.fetch_client import ScrapingBeeClient
from produce_scraper.services.scrape_service import ScrapeService

logger = logging.getLogger(__name__)
router = APIRouter()

def parse_scrape_request(store: Optional[str], job_id: Optional[str]) -> ScrapeRequest:
    """Validate the /scrape query parameters."""
    if job_id is not None and (not job_id.strip() or not store):
        raise ScrapeValidationError(
            f"Incomplete async request: store={store!r}, jobId={job_id!r}",
            public_message="Both store and jobId are required.",
        )
    try:
        return ScrapeRequest(store_id=store or "", job_id=job_id)
    except ValidationError as e:
        raise ScrapeValidationError(f"Invalid store id {store!r}: {e.errors()[0]['msg']}") from e

@router.get("/scrape", response_model=List[ProductRecord])
async def scrape(
    request: Request,
    store: Optional[str] = Query(None, description="Numeric store id"),
    job_id: Optional[str] = Query(None, alias="jobId", description="Run in the background under this job id"),
    settings: Settings = Depends(get_settings),
    scrape_service: ScrapeService = Depends(get_scrape_service),
    fetch_client: ScrapingBeeClient = Depends(get_fetch_client),
    extractor: BaseExtractor = Depends(get_page_extractor),
):
    """
    Scrape the produce listing of a store.

    Without jobId the products are returned in the response. With jobId the
    request is acknowledged with 202 and the outcome is written to the job
    store once the background job finishes.
    """
    if not settings.scrapingbee_api_key:
        raise ConfigError("SCRAPINGBEE_API_KEY environment variable not set")

    scrape_request = parse_scrape_request(store, job_id)

    if not scrape_request.is_async:
        logger.info(f"Received sync scrape request for store {scrape_request.store_id}")
        return await scrape_service.scrape(scrape_request.store_id)

    logger.info(f"Received async scrape request for store {scrape_request.store_id}, job {scrape_request.job_id}")
    runner = build_job_runner(request, fetch_client, extractor, settings)
    dispatcher = get_dispatcher(request)

    if settings.record_pending_jobs:
        try:
            await runner.job_store.create_pending(scrape_request.job_id, scrape_request.store_id)
        except JobExistsError:
            raise
        except StorageError as e:
            # The runner still attempts its terminal write
            logger.error(f"Could not record pending status for job {scrape_request.job_id}: {e}")
    elif await runner.job_store.get_job(scrape_request.job_id) is not None:
        raise JobExistsError(f"Job {scrape_request.job_id} already exists")

    # Dispatched after the response is sent; the handler never waits for the job
    dispatch = BackgroundTask(
        dispatcher.submit,
        runner.run,
        scrape_request.job_id,
        scrape_request.store_id,
        name=f"scrape-job-{scrape_request.job_id}",
    )
    return PlainTextResponse(
        f"Scrape job {scrape_request.job_id} accepted for store {scrape_request.store_id}.",
        status_code=202,
        background=dispatch,
    )
