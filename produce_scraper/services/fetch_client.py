from typing import Dict, Optional
from urllib.parse import quote
import asyncio
import json
import logging
import httpx

from produce_scraper.core.config import Settings
from produce_scraper.core.exceptions import ConfigError, FetchError, FetchTimeoutError

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves alone besides [A-Za-z0-9_.~-]
_URI_COMPONENT_SAFE = "!'()*"

def build_store_cookie(store_id: str, cookie_name: str = "store-search-session-marker") -> str:
    """Build the cookie that scopes the rendered page to one physical store."""
    marker = json.dumps({"id": store_id}, separators=(",", ":"))
    return f"{cookie_name}={quote(marker, safe=_URI_COMPONENT_SAFE)}"

class ScrapingBeeClient:
    """Single-shot client for the ScrapingBee HTML API."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.api_key = settings.scrapingbee_api_key
        self.base_url = settings.scrapingbee_base_url
        self._transport = transport

    def get_request_params(self, store_id: str) -> Dict[str, str]:
        """Get ScrapingBee parameters for the store listing page."""
        if not self.api_key:
            raise ConfigError("SCRAPINGBEE_API_KEY environment variable not set")
        return {
            "api_key": self.api_key,
            "url": self.settings.target_url,
            "cookies": build_store_cookie(store_id, self.settings.store_cookie_name),
            "wait_for": self.settings.wait_for_selector,
            "premium_proxy": "true" if self.settings.premium_proxy else "false",
        }

    async def fetch(self, store_id: str, timeout: float) -> str:
        """
        Fetch the rendered listing page for a store.

        Args:
            store_id: Numeric store id used for the store-scoping cookie.
            timeout: Total seconds to wait for the provider.

        Returns:
            Raw HTML of the page.

        Raises:
            FetchTimeoutError: If the timeout elapses.
            FetchError: On a non-2xx answer or a transport failure.
        """
        params = self.get_request_params(store_id)
        logger.info(f"Fetching {self.settings.target_url} for store {store_id} (timeout {timeout}s)")

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(client.get(self.base_url, params=params), timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise FetchTimeoutError(f"ScrapingBee request for store {store_id} timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            raise FetchError(f"ScrapingBee request for store {store_id} failed: {e}") from e

        if not response.is_success:
            body = response.text
            raise FetchError(
                f"ScrapingBee error {response.status_code} for store {store_id}: {body[:500]}",
                upstream_status=response.status_code,
                upstream_body=body,
            )

        logger.debug(f"Received {len(response.text)} characters for store {store_id}")
        return response.text
