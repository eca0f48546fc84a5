"""
Scraper for Miniature Market (Magento) product pages.
"""

import logging

from ..error_handling import GameNotFoundError, MalformedDocumentError
from ..models import MiniatureMarketPrice
from .common import make_soup, meta_content, parse_price, strip_label, tag_value

logger = logging.getLogger(__name__)

# Magento renders its 404 page with this body class
NO_ROUTE_CLASS = 'cms-no-route'


def parse_mm_html(html_text: str, mm_id: int) -> MiniatureMarketPrice:
    """
    Parse a Miniature Market product page into a price record.

    Raises:
        GameNotFoundError: Magento served its no-route page
        MalformedDocumentError: no product title, or an unreadable price
    """
    soup = make_soup(html_text)

    body = soup.find('body')
    if body is not None and NO_ROUTE_CLASS in (body.get('class') or []):
        raise GameNotFoundError(f"Miniature Market has no product {mm_id}", identifier=mm_id)

    title = tag_value(soup.select_one('.product-name h1')) or meta_content(soup, 'og:title')
    if title is None:
        raise MalformedDocumentError(f"No product title on Miniature Market page {mm_id}", identifier=mm_id)

    # A special (sale) price wins over the regular one
    price_tag = (soup.select_one('.special-price .price')
                 or soup.select_one('.regular-price .price')
                 or soup.find(attrs={'itemprop': 'price'}))

    image = soup.find('img', id='image-main')
    image_url = image.get('src') if image is not None else None

    price = MiniatureMarketPrice(
        mm_id=mm_id,
        title=title,
        sku=strip_label(tag_value(soup.select_one('.sku') or soup.find(attrs={'itemprop': 'sku'})), 'SKU'),
        msrp=parse_price(tag_value(soup.select_one('.old-price .price')), 'msrp'),
        cur_price=parse_price(tag_value(price_tag), 'price'),
        availability=tag_value(soup.select_one('.availability span') or soup.select_one('.availability')),
        image_url=image_url or meta_content(soup, 'og:image'),
        description=tag_value(soup.select_one('.short-description .std')),
    )
    logger.debug(f"Parsed Miniature Market page {mm_id}: {title} @ {price.cur_price}")
    return price
