from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum

class JobStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PENDING

class ProductRecord(BaseModel):
    """Product listed on the store page."""
    name: str = Field(min_length=1)
    price: str = Field(min_length=1)
    size: str = "N/A"
    availability: str = "In Stock"

class ScrapeRequest(BaseModel):
    """Validated query of a /scrape call."""
    store_id: str
    job_id: Optional[str] = None

    @field_validator('store_id')
    def validate_store_id(cls, v):
        if not v or not v.isascii() or not v.isdigit():
            raise ValueError("store_id must contain digits only")
        return v

    @field_validator('job_id')
    def validate_job_id(cls, v):
        if v is not None and not v.strip():
            raise ValueError("job_id cannot be blank")
        return v

    @property
    def is_async(self) -> bool:
        return self.job_id is not None

class JobView(BaseModel):
    """Job record as returned by the job status route."""
    job_id: str
    store_id: Optional[str] = None
    status: JobStatus
    results: Optional[List[ProductRecord]] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('created_at', 'updated_at')
    def ensure_timezone(cls, v):
        # SQLite hands back naive datetimes
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
