from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
import os
import logging

logger = logging.getLogger(__name__)

# Create base class for models
Base = declarative_base()

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ScrapeJob(Base):
    __tablename__ = "scrape_job"

    job_id = Column(String, primary_key=True, index=True)
    store_id = Column(String, index=True)
    status = Column(String, index=True, nullable=False)  # 'pending', 'complete', 'failed'
    results = Column(Text, nullable=True)  # JSON array of product records
    error_message = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

def create_engine_from_url(database_url: str) -> AsyncEngine:
    """Create the process-wide async engine and its connection pool."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        # Create the database directory if it doesn't exist
        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)
    logger.info(f"Creating database engine for {url.render_as_string(hide_password=True)}")
    return create_async_engine(url, pool_pre_ping=True)

def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create session factory"""
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)

async def init_db(engine: AsyncEngine) -> None:
    """Create all tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
