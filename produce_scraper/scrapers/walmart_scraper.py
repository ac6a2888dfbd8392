from typing import List
from parsel import Selector
import logging

from .base import BaseExtractor
from produce_scraper.schemas.models import ProductRecord

logger = logging.getLogger(__name__)

ITEM_SELECTOR = "div[data-item-id]"
NAME_SELECTOR = 'span[data-automation-id="product-title"] ::text'
PRICE_SELECTOR = '[data-automation-id="product-price"] .f2 ::text'
SIZE_SELECTOR = 'div[data-automation-id="product-size"] ::text'

def _text(node: Selector, query: str) -> str:
    return "".join(node.css(query).getall()).strip()

class WalmartProduceExtractor(BaseExtractor):
    """Extractor for the Walmart grocery browse grid."""

    store_name = "walmart"

    def extract(self, html: str) -> List[ProductRecord]:
        """Extract product records from Walmart browse HTML."""
        selector = Selector(text=html or "<html></html>")
        products = []

        # Only the first max_items candidates are looked at, kept or not
        candidates = selector.css(ITEM_SELECTOR)[:self.max_items]
        for item in candidates:
            record = self.build_record(
                _text(item, NAME_SELECTOR),
                _text(item, PRICE_SELECTOR),
                _text(item, SIZE_SELECTOR),
            )
            if record is None:
                logger.debug(f"Skipping item {item.attrib.get('data-item-id')}: missing name or price")
                continue
            products.append(record)

        logger.info(f"Extracted {len(products)} products from {len(candidates)} candidates")
        return products
