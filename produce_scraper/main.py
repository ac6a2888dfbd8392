from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from produce_scraper.core.config import get_settings
from produce_scraper.core.exceptions import ScrapeValidationError, ScraperError
from produce_scraper.core.logging_config import configure_logging
from produce_scraper.models.database import create_engine_from_url, create_session_factory, init_db
from produce_scraper.routes.job_routes import router as job_router
from produce_scraper.routes.scrape_routes import router as scrape_router
from produce_scraper.services.job_store import JobStore
from produce_scraper.services.task_dispatcher import BackgroundDispatcher

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the process-wide resources and release them on shutdown."""
    settings = get_settings()
    log_filename = configure_logging(debug=settings.debug, log_dir=settings.log_dir)
    logger.info("=" * 80)
    logger.info(f"Starting scraper service - Log file: {log_filename}")
    logger.info("=" * 80)

    engine = create_engine_from_url(settings.database_url)
    await init_db(engine)
    app.state.job_store = JobStore(create_session_factory(engine))
    app.state.dispatcher = BackgroundDispatcher()
    try:
        yield
    finally:
        await app.state.dispatcher.drain(timeout=settings.shutdown_grace_seconds)
        await engine.dispose()
        logger.info("Scraper service stopped")

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Produce Scraper API",
        description="API for scraping store produce listings through ScrapingBee",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scrape_router)
    app.include_router(job_router)

    @app.exception_handler(ScraperError)
    async def scraper_exception_handler(request: Request, exc: ScraperError):
        if isinstance(exc, ScrapeValidationError):
            logger.info(f"Rejected {request.url.path}: {exc}")
        else:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception handler caught: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error."})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Check if the API is healthy."""
        return {"status": "healthy"}

    return app

app = create_app()
