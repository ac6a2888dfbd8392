"""Error taxonomy for the scraping service.

Every error carries an HTTP status and a public message. The public message is
the only text that crosses the HTTP boundary; ``str(error)`` holds the detail
that gets logged.
"""
from typing import Optional


class ScraperError(Exception):
    """Base class for all service errors."""

    status_code: int = 500
    public_message: str = "Internal server error."

    def __init__(self, message: Optional[str] = None, public_message: Optional[str] = None):
        super().__init__(message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class ConfigError(ScraperError):
    """A required server-side setting is missing."""

    public_message = "Scraping API key is not configured on the server."


class ScrapeValidationError(ScraperError):
    """Malformed caller input."""

    status_code = 400
    public_message = "A valid numeric store ID is required."


class FetchError(ScraperError):
    """The fetch provider returned an error or could not be reached."""

    public_message = "The scraping service failed to retrieve the page."

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None,
                 upstream_body: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class FetchTimeoutError(FetchError, TimeoutError):
    """The fetch provider did not answer within the timeout."""


class ExtractionEmptyError(ScraperError):
    """No product records could be parsed from the page."""

    public_message = "Failed to parse any items from the page."


class StorageError(ScraperError):
    """The job store could not be written."""

    public_message = "Failed to record the scrape job."


class JobExistsError(StorageError):
    """A job with the same id has already been accepted."""

    status_code = 409
    public_message = "A job with this jobId already exists."
