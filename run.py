import uvicorn
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from produce_scraper.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    log_level = os.getenv("LOG_LEVEL", "debug" if settings.debug else "info")
    reload = os.getenv("RELOAD", "false").lower() == "true"

    uvicorn.run(
        "produce_scraper.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=log_level,
        access_log=True
    )
