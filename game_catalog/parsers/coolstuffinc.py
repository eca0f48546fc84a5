"""
Scraper for CoolStuffInc product pages.

Fields are located through schema.org ``itemprop`` attributes and a few CSS
class landmarks, so surrounding page chrome is ignored.
"""

import logging
import re

from ..error_handling import GameNotFoundError, MalformedDocumentError
from ..models import CoolStuffIncPrice
from .common import clean_text, make_soup, meta_content, parse_price, strip_label, tag_value

logger = logging.getLogger(__name__)

NOT_FOUND_PATTERN = re.compile(r"\b(page|product|item) (was )?not found\b", re.IGNORECASE)


def parse_csi_html(html_text: str, csi_id: int) -> CoolStuffIncPrice:
    """
    Parse a CoolStuffInc product page into a price record.

    Args:
        html_text: Complete page body
        csi_id: Identifier the page was requested with

    Raises:
        GameNotFoundError: the page is CoolStuffInc's "not found" page
        MalformedDocumentError: no product title, or an unreadable price
    """
    soup = make_soup(html_text)

    for landmark in (soup.find('title'), soup.find('h1')):
        if landmark is not None and NOT_FOUND_PATTERN.search(landmark.get_text(" ", strip=True)):
            raise GameNotFoundError(f"CoolStuffInc has no product {csi_id}", identifier=csi_id)

    title = tag_value(soup.find('h1', attrs={'itemprop': 'name'})) or meta_content(soup, 'og:title')
    if title is None:
        raise MalformedDocumentError(f"No product title on CoolStuffInc page {csi_id}", identifier=csi_id)

    availability_tag = soup.find(attrs={'itemprop': 'availability'})
    availability = tag_value(availability_tag)
    if availability is None and availability_tag is not None:
        availability = clean_text(availability_tag.get('href'))
    if availability is None:
        availability = tag_value(soup.find(class_='availability'))
    elif availability.startswith('http'):
        # schema.org URL such as http://schema.org/InStock
        availability = availability.rstrip('/').rsplit('/', 1)[-1]

    price = CoolStuffIncPrice(
        csi_id=csi_id,
        title=title,
        sku=tag_value(soup.find(attrs={'itemprop': 'sku'})),
        msrp=parse_price(tag_value(soup.find(class_='msrp')), 'msrp'),
        cur_price=parse_price(tag_value(soup.find(attrs={'itemprop': 'price'})), 'price'),
        availability=availability,
        image_url=meta_content(soup, 'og:image'),
        release_date=strip_label(tag_value(soup.find(class_='release-date')), 'Release Date'),
    )
    logger.debug(f"Parsed CoolStuffInc page {csi_id}: {title} @ {price.cur_price}")
    return price
