from typing import List
import logging

from produce_scraper.core.exceptions import ExtractionEmptyError
from produce_scraper.schemas.models import ProductRecord
from produce_scraper.scrapers.base import BaseExtractor
from produce_scraper.services.fetch_client import ScrapingBeeClient

logger = logging.getLogger(__name__)

class ScrapeService:
    """Fetches and extracts a store listing within the request lifecycle."""

    def __init__(self, fetch_client: ScrapingBeeClient, extractor: BaseExtractor, fetch_timeout: float = 55):
        self.fetch_client = fetch_client
        self.extractor = extractor
        self.fetch_timeout = fetch_timeout

    async def scrape(self, store_id: str) -> List[ProductRecord]:
        """
        Scrape the listing page of a store.

        Raises:
            FetchError: If the page could not be fetched (FetchTimeoutError on timeout).
            ExtractionEmptyError: If no items could be parsed.
        """
        html = await self.fetch_client.fetch(store_id, timeout=self.fetch_timeout)
        products = self.extractor.extract(html)
        if not products:
            logger.warning("No items were scraped. The page layout may have changed.")
            raise ExtractionEmptyError(f"No items parsed for store {store_id}")
        logger.info(f"Scraped {len(products)} items for store {store_id}")
        return products
