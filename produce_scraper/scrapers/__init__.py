"""
Product extraction strategies for store listing pages.
"""
from typing import Dict, List, Type
import logging
from .base import BaseExtractor, DEFAULT_MAX_ITEMS
from .walmart_scraper import WalmartProduceExtractor

logger = logging.getLogger(__name__)

# List of available extractors
AVAILABLE_EXTRACTORS: Dict[str, Type[BaseExtractor]] = {
    WalmartProduceExtractor.store_name: WalmartProduceExtractor,
}

def get_supported_stores() -> List[str]:
    """Get a list of supported store names."""
    return sorted(AVAILABLE_EXTRACTORS)

def get_extractor(store_name: str = "walmart", max_items: int = DEFAULT_MAX_ITEMS) -> BaseExtractor:
    """
    Get an extractor instance for a store name.

    Raises:
        ValueError: If no extractor is registered for the store
    """
    extractor_class = AVAILABLE_EXTRACTORS.get(store_name.lower().strip())
    if not extractor_class:
        supported = ", ".join(get_supported_stores())
        error_msg = f"No extractor found for store: {store_name}. Supported stores are: {supported}"
        logger.error(error_msg)
        raise ValueError(error_msg)
    return extractor_class(max_items=max_items)

__all__ = [
    'BaseExtractor',
    'DEFAULT_MAX_ITEMS',
    'WalmartProduceExtractor',
    'get_extractor',
    'get_supported_stores',
]
