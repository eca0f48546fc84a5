"""
Value coercion helpers shared by the markup parsers.

Missing values become ``None``. Values that are present but cannot be coerced
raise ``MalformedDocumentError`` instead of defaulting to zero.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..error_handling import MalformedDocumentError

_NON_NUMERIC = re.compile(r"[^\d.\-]")
_DIGIT = re.compile(r"\d")


def clean_text(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace; empty strings become None."""
    if value is None:
        return None
    value = " ".join(value.split())
    return value or None


def parse_int(value: Optional[str], field_name: str) -> Optional[int]:
    value = clean_text(value)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise MalformedDocumentError(f"Field '{field_name}' is not an integer: {value!r}")


def parse_float(value: Optional[str], field_name: str) -> Optional[float]:
    value = clean_text(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise MalformedDocumentError(f"Field '{field_name}' is not a number: {value!r}")


def parse_price(value: Optional[str], field_name: str) -> Optional[float]:
    """
    Normalize a currency string such as ``"$1,299.99"`` to a float.

    Text without any digits ("Contact Us", "Call for price") is treated as an
    absent price.
    """
    value = clean_text(value)
    if value is None or not _DIGIT.search(value):
        return None
    normalized = _NON_NUMERIC.sub("", value.replace(",", ""))
    try:
        return float(normalized)
    except ValueError:
        raise MalformedDocumentError(f"Field '{field_name}' is not a price: {value!r}")


def make_soup(html_text: str) -> BeautifulSoup:
    if not html_text or not html_text.strip():
        raise MalformedDocumentError("Empty HTML document")
    return BeautifulSoup(html_text, 'html.parser')


def tag_value(tag: Optional[Tag]) -> Optional[str]:
    """Visible text of a tag, falling back to its ``content`` attribute."""
    if tag is None:
        return None
    text = clean_text(tag.get_text(" ", strip=True))
    if text:
        return text
    return clean_text(tag.get('content'))


def meta_content(soup: BeautifulSoup, prop: str) -> Optional[str]:
    """Content of an Open Graph style ``<meta property=...>`` tag."""
    tag = soup.find('meta', attrs={'property': prop})
    if tag is None:
        return None
    return clean_text(tag.get('content'))


def strip_label(value: Optional[str], label: str) -> Optional[str]:
    """Drop a leading ``"Label:"`` prefix from scraped text."""
    if value is None:
        return None
    return clean_text(re.sub(rf"^\s*{re.escape(label)}\s*:?", "", value, flags=re.IGNORECASE))
