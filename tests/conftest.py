import pytest
import pytest_asyncio
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add the application root directory to the Python path
root_dir = str(Path(__file__).parent.parent)
sys.path.insert(0, root_dir)

from produce_scraper.core.config import Settings
from produce_scraper.models.database import create_engine_from_url, create_session_factory, init_db
from produce_scraper.schemas.models import JobStatus
from produce_scraper.services.job_store import JobStore


def product_item(item_id: str, name: Optional[str] = None, price: Optional[str] = None,
                 size: Optional[str] = None) -> str:
    """Markup of one Walmart grid item; None leaves the field out."""
    parts = [f'<div data-item-id="{item_id}" class="mb0 ph0-xl pt0-xl bb b--near-white w-25 pb3-m ph1">']
    if name is not None:
        parts.append(f'<span data-automation-id="product-title" class="normal dark-gray">{name}</span>')
    if price is not None:
        parts.append(
            '<div data-automation-id="product-price" class="flex flex-wrap">'
            f'<span class="w_iUH7">current price</span><div class="mr1 b black f2">{price}</div></div>'
        )
    if size is not None:
        parts.append(f'<div data-automation-id="product-size" class="gray f7">{size}</div>')
    parts.append('</div>')
    return "".join(parts)


def listing_page(*items: str) -> str:
    return (
        '<html><head><title>Fresh Produce - Walmart.com</title></head>'
        f'<body><div class="pa0-xl"><section>{"".join(items)}</section></div></body></html>'
    )


THREE_ITEMS_PAGE = listing_page(
    product_item("101", "Fresh Banana, Each", "$0.27", "0.4 lb"),
    product_item("102", "Fresh Strawberries, 1 lb", "$2.47", "1 lb"),
    product_item("103", "Fresh Hass Avocados, Each", "$0.98"),
)

EMPTY_PAGE = listing_page()


class StubFetchClient:
    """Stands in for ScrapingBeeClient; returns fixed markup or raises."""

    def __init__(self, html: str = "", error: Optional[Exception] = None,
                 pages: Optional[dict] = None, gate: Optional[asyncio.Event] = None):
        self.html = html
        self.error = error
        self.pages = pages or {}
        self.gate = gate
        self.calls: List[Tuple[str, float]] = []

    async def fetch(self, store_id: str, timeout: float) -> str:
        self.calls.append((store_id, timeout))
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.pages.get(store_id, self.html)


class RecordingJobStore(JobStore):
    """Real job store that remembers every terminal write."""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.outcomes: List[Tuple[str, JobStatus, Optional[list]]] = []

    async def record_outcome(self, job_id, status, results=None, error_message=None, store_id=None):
        self.outcomes.append((job_id, status, results))
        await super().record_outcome(job_id, status, results=results, error_message=error_message,
                                     store_id=store_id)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        scrapingbee_api_key="test-key",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'jobs.db'}",
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def stub_fetch_client():
    return StubFetchClient


@pytest.fixture
def make_item():
    return product_item


@pytest.fixture
def make_page():
    return listing_page


@pytest.fixture
def three_items_page():
    return THREE_ITEMS_PAGE


@pytest.fixture
def empty_page():
    return EMPTY_PAGE


@pytest_asyncio.fixture
async def session_factory(settings):
    engine = create_engine_from_url(settings.database_url)
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def job_store(session_factory):
    return RecordingJobStore(session_factory)
