"""
Markup parsers, one per external source.

This module handles:
- BoardGameGeek XML API game data
- CoolStuffInc product page pricing
- Miniature Market product page pricing
"""

from .bgg import parse_game_xml, parse_game_batch_xml
from .coolstuffinc import parse_csi_html
from .miniaturemarket import parse_mm_html

__all__ = [
    "parse_game_xml",
    "parse_game_batch_xml",
    "parse_csi_html",
    "parse_mm_html",
]
