from fastapi import Depends, Request

from produce_scraper.core.config import Settings, get_settings
from produce_scraper.core.exceptions import StorageError
from produce_scraper.scrapers import BaseExtractor, get_extractor
from produce_scraper.services.fetch_client import ScrapingBeeClient
from produce_scraper.services.job_runner import JobRunner
from produce_scraper.services.job_store import JobStore
from produce_scraper.services.scrape_service import ScrapeService
from produce_scraper.services.task_dispatcher import BackgroundDispatcher

def get_fetch_client(settings: Settings = Depends(get_settings)) -> ScrapingBeeClient:
    """Get fetch client instance"""
    return ScrapingBeeClient(settings)

def get_page_extractor(settings: Settings = Depends(get_settings)) -> BaseExtractor:
    """Get extractor instance"""
    return get_extractor("walmart", max_items=settings.max_items)

def get_scrape_service(
    fetch_client: ScrapingBeeClient = Depends(get_fetch_client),
    extractor: BaseExtractor = Depends(get_page_extractor),
    settings: Settings = Depends(get_settings),
) -> ScrapeService:
    """Get scrape service instance"""
    return ScrapeService(fetch_client, extractor, fetch_timeout=settings.sync_fetch_timeout)

def get_job_store(request: Request) -> JobStore:
    """Get the process-wide job store"""
    job_store = getattr(request.app.state, "job_store", None)
    if job_store is None:
        raise StorageError("Job store is not initialized")
    return job_store

def get_dispatcher(request: Request) -> BackgroundDispatcher:
    """Get the process-wide background dispatcher"""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("Background dispatcher is not initialized")
    return dispatcher

def build_job_runner(request: Request, fetch_client: ScrapingBeeClient, extractor: BaseExtractor,
                     settings: Settings) -> JobRunner:
    """Build a job runner on top of the process-wide job store.

    Called from the route instead of Depends so sync-mode requests never
    touch the job store.
    """
    return JobRunner(fetch_client, extractor, get_job_store(request), fetch_timeout=settings.job_fetch_timeout)
