import logging
import os
from datetime import datetime

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def configure_logging(debug: bool = False, log_dir: str = "logs"):
    """Configure application logging."""
    os.makedirs(log_dir, exist_ok=True)
    log_filename = os.path.join(log_dir, f"app_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")

    # DEBUG setting or DEBUG=true in environment
    if debug or os.getenv("DEBUG", "").lower() == "true":
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_filename)
        ]
    )

    # httpx logs every request line at INFO, which would include the API key
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)

    if log_level == logging.DEBUG:
        logging.getLogger('produce_scraper.scrapers').setLevel(logging.DEBUG)
        logging.getLogger('produce_scraper.services').setLevel(logging.DEBUG)
        logging.getLogger('sqlalchemy.engine').setLevel(logging.INFO)

    return log_filename