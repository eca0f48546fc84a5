"""
Parser for the BoardGameGeek XML API v2 ``thing`` endpoint.

A response looks like::

    <items termsofuse="...">
      <item type="boardgame" id="224517">
        <thumbnail>...</thumbnail>
        <name type="primary" sortindex="1" value="Brass: Birmingham"/>
        <yearpublished value="2018"/>
        <link type="boardgamedesigner" id="..." value="Gavan Brown"/>
        <statistics><ratings>...</ratings></statistics>
      </item>
    </items>

An ``<items>`` container without any ``<item>`` children is how BGG answers
an unknown identifier.
"""

import html
import logging
import xml.etree.ElementTree as ET
from typing import List, Optional, Union

from ..error_handling import GameNotFoundError, MalformedDocumentError
from ..models import GameRecord
from .common import clean_text, parse_float, parse_int

logger = logging.getLogger(__name__)

NOT_RANKED = "not ranked"

# Simple integer fields: XML tag -> record attribute
_INT_FIELDS = {
    'yearpublished': 'year_published',
    'minplayers': 'min_players',
    'maxplayers': 'max_players',
    'minplaytime': 'min_playing_time',
    'maxplaytime': 'max_playing_time',
    'playingtime': 'playing_time',
    'minage': 'min_age',
}

# Tag-style link lists: link type -> record attribute
_LINK_FIELDS = {
    'boardgamepublisher': 'publishers',
    'boardgamedesigner': 'designers',
    'boardgamecategory': 'categories',
    'boardgamemechanic': 'mechanisms',
}


def parse_game_batch_xml(xml_text: Union[str, bytes]) -> List[GameRecord]:
    """
    Parse every ``<item>`` of a BGG ``thing`` response, preserving document order.

    Raises:
        GameNotFoundError: the response contains no items at all
        MalformedDocumentError: the document or any single item is invalid
    """
    root = _parse_root(xml_text)
    items = root.findall('item')
    if not items:
        raise GameNotFoundError("BGG returned no items for the requested identifier(s)")
    return [_parse_item(item) for item in items]


def parse_game_xml(xml_text: Union[str, bytes]) -> GameRecord:
    """Parse a BGG ``thing`` response that should describe exactly one game."""
    games = parse_game_batch_xml(xml_text)
    if len(games) > 1:
        raise MalformedDocumentError(f"Expected a single item, found {len(games)}")
    return games[0]


def _parse_root(xml_text: Union[str, bytes]) -> ET.Element:
    if not xml_text or not xml_text.strip():
        raise MalformedDocumentError("Empty XML document")
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedDocumentError(f"Invalid XML: {e}")
    if root.tag != 'items':
        raise MalformedDocumentError(f"Unexpected root element <{root.tag}>")
    return root


def _value(item: ET.Element, path: str) -> Optional[str]:
    element = item.find(path)
    if element is None:
        return None
    return element.get('value')


def _text(item: ET.Element, path: str) -> Optional[str]:
    element = item.find(path)
    if element is None or element.text is None:
        return None
    return clean_text(element.text)


def _parse_item(item: ET.Element) -> GameRecord:
    bgg_id = parse_int(item.get('id'), 'id')
    if bgg_id is None:
        raise MalformedDocumentError("Item without an id attribute")

    name = clean_text(_value(item, 'name[@type="primary"]'))
    if name is None:
        raise MalformedDocumentError(f"Item {bgg_id} has no primary name", identifier=bgg_id)

    values = {attr: parse_int(_value(item, tag), tag) for tag, attr in _INT_FIELDS.items()}

    description = item.find('description')
    if description is not None and description.text:
        # BGG escapes entities twice, so one level survives the XML parser
        values['description'] = html.unescape(description.text).strip() or None

    for link_type, attr in _LINK_FIELDS.items():
        values[attr] = [
            link.get('value') for link in item.findall(f'link[@type="{link_type}"]')
            if link.get('value')
        ]

    parent_game_id = None
    expansion_ids = []
    for link in item.findall('link[@type="boardgameexpansion"]'):
        link_id = parse_int(link.get('id'), 'boardgameexpansion')
        if link_id is None:
            continue
        if link.get('inbound') == 'true':
            # On an expansion, the inbound link names its base game
            if parent_game_id is None:
                parent_game_id = link_id
        else:
            expansion_ids.append(link_id)

    ratings = item.find('statistics/ratings')
    if ratings is not None:
        values['bgg_rating'] = parse_float(_value(ratings, 'average'), 'average')
        values['bgg_rating_users'] = parse_int(_value(ratings, 'usersrated'), 'usersrated')
        values['complexity_weight'] = parse_float(_value(ratings, 'averageweight'), 'averageweight')
        rank = clean_text(_value(ratings, 'ranks/rank[@name="boardgame"]'))
        if rank is not None and rank.lower() != NOT_RANKED:
            values['bgg_rank'] = parse_int(rank, 'rank')

    game = GameRecord(
        bgg_id=bgg_id,
        name=name,
        game_type=item.get('type'),
        parent_game_id=parent_game_id,
        expansion_ids=expansion_ids,
        image_url=_text(item, 'image'),
        image_thumbnail_url=_text(item, 'thumbnail'),
        **values,
    )
    logger.debug(f"Parsed BGG item {bgg_id}: {name}")
    return game
