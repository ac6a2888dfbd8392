"""Application configuration settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from functools import lru_cache

WALMART_PRODUCE_URL = (
    "https://www.walmart.com/browse/grocery/produce/"
    "?povid=globalnav_dept_4044_Produce&ebt_eligible=true"
)

class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",  # Allow extra fields
    )

    # ScrapingBee Configuration
    scrapingbee_api_key: Optional[str] = None
    scrapingbee_base_url: str = "https://app.scrapingbee.com/api/v1/"
    premium_proxy: bool = True

    # Target page
    target_url: str = WALMART_PRODUCE_URL
    wait_for_selector: str = ".pa0-xl"
    store_cookie_name: str = "store-search-session-marker"
    max_items: int = 15

    # Timeouts in seconds
    sync_fetch_timeout: float = 55
    job_fetch_timeout: float = 90  # background jobs hold no client connection open
    shutdown_grace_seconds: float = 95

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./data/jobs.db"
    record_pending_jobs: bool = True

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = ["*"]

    # Debug settings
    debug: bool = False
    log_dir: str = "logs"

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
