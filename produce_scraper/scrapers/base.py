"""Base extractor implementation."""
from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from produce_scraper.schemas.models import ProductRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 15

class BaseExtractor(ABC):
    """Base class for page-layout specific extractors.

    An extractor turns raw markup into product records and performs no I/O.
    A layout change on the store page only requires a new extractor; the
    fetch and job orchestration stay untouched.
    """

    # Store name - must be set in subclasses
    store_name: str = ""

    def __init__(self, max_items: int = DEFAULT_MAX_ITEMS):
        if not self.store_name:
            raise ValueError("Extractor must define store_name")
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.max_items = max_items

    @abstractmethod
    def extract(self, html: str) -> List[ProductRecord]:
        """
        Extract product records from HTML content.

        Args:
            html (str): Raw HTML content

        Returns:
            List[ProductRecord]: Records in document order, at most max_items long.
            An empty list is a valid result.
        """
        pass

    @staticmethod
    def build_record(name: Optional[str], price: Optional[str], size: Optional[str] = None) -> Optional[ProductRecord]:
        """Build a record, or return None when name or price is missing."""
        name = (name or "").strip()
        price = (price or "").strip()
        if not name or not price:
            return None
        return ProductRecord(name=name, price=price, size=(size or "").strip() or "N/A")
