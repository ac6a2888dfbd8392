import pytest
from fastapi.testclient import TestClient

from produce_scraper.core.config import Settings, get_settings
from produce_scraper.core.dependencies import get_fetch_client
from produce_scraper.core.exceptions import FetchError, FetchTimeoutError
from produce_scraper.main import create_app


@pytest.fixture
def make_client(settings):
    """Build a TestClient whose fetch client is a stub."""
    def _make(fetch_client, app_settings: Settings = settings):
        app = create_app()
        app.dependency_overrides[get_settings] = lambda: app_settings
        app.dependency_overrides[get_fetch_client] = lambda: fetch_client
        return TestClient(app)
    return _make


def test_scrape_returns_products(make_client, stub_fetch_client, three_items_page):
    fetch_client = stub_fetch_client(three_items_page)

    response = make_client(fetch_client).get("/scrape", params={"store": "1234"})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 3
    assert data[0] == {
        "name": "Fresh Banana, Each",
        "price": "$0.27",
        "size": "0.4 lb",
        "availability": "In Stock",
    }
    assert data[2]["size"] == "N/A"
    assert fetch_client.calls == [("1234", 55)]


@pytest.mark.parametrize("params", [{}, {"store": ""}, {"store": "abc"}, {"store": "12a4"}, {"store": "-12"}])
def test_invalid_store_is_rejected_without_fetching(make_client, stub_fetch_client, three_items_page, params):
    fetch_client = stub_fetch_client(three_items_page)

    response = make_client(fetch_client).get("/scrape", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "A valid numeric store ID is required."}
    assert fetch_client.calls == []


def test_missing_api_key_is_a_server_error(make_client, stub_fetch_client, three_items_page):
    fetch_client = stub_fetch_client(three_items_page)
    no_key = Settings(_env_file=None, scrapingbee_api_key=None)

    response = make_client(fetch_client, no_key).get("/scrape", params={"store": "1234"})

    assert response.status_code == 500
    assert response.json() == {"error": "Scraping API key is not configured on the server."}
    assert fetch_client.calls == []


def test_zero_items_is_a_parse_failure(make_client, stub_fetch_client, empty_page):
    response = make_client(stub_fetch_client(empty_page)).get("/scrape", params={"store": "1234"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to parse any items from the page."}


@pytest.mark.parametrize("error", [
    FetchError("ScrapingBee error 401", upstream_status=401, upstream_body="secret upstream detail"),
    FetchTimeoutError("timed out after 55s"),
])
def test_fetch_failure_hides_upstream_detail(make_client, stub_fetch_client, error):
    response = make_client(stub_fetch_client(error=error)).get("/scrape", params={"store": "1234"})

    assert response.status_code == 500
    assert response.json() == {"error": "The scraping service failed to retrieve the page."}
    assert "secret" not in response.text


def test_health(make_client, stub_fetch_client):
    response = make_client(stub_fetch_client()).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
