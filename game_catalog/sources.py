"""
Descriptors for the three external sources.

Each source knows its URL template, whether it can resolve several
identifiers in one round trip, which parser reads its markup and which record
type (and therefore which cache table) it produces.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Type, Union

from . import config
from .error_handling import MalformedDocumentError
from .models import CatalogRecord, CoolStuffIncPrice, GameRecord, MiniatureMarketPrice
from .parsers import parse_csi_html, parse_game_batch_xml, parse_game_xml, parse_mm_html


@dataclass(frozen=True)
class Source:
    name: str
    label: str
    url_template: str
    id_marker: str
    accept: str
    record_type: Type[CatalogRecord]
    parse_one: Callable[[str, int], CatalogRecord]
    parse_many: Optional[Callable[[str], List[CatalogRecord]]] = None
    # Hand the parser raw bytes so an XML encoding declaration is honoured
    binary_body: bool = False

    @property
    def supports_batch(self) -> bool:
        return self.parse_many is not None

    def build_url(self, identifiers: Sequence[int]) -> str:
        if not identifiers:
            raise ValueError("At least one identifier is required")
        if len(identifiers) > 1 and not self.supports_batch:
            raise ValueError(f"{self.label} cannot fetch more than one identifier per request")
        return self.url_template.replace(self.id_marker, ",".join(str(i) for i in identifiers))


def _parse_bgg(xml_text: Union[str, bytes], bgg_id: int) -> GameRecord:
    game = parse_game_xml(xml_text)
    if game.bgg_id != bgg_id:
        raise MalformedDocumentError(f"Requested BGG id {bgg_id} but received {game.bgg_id}", identifier=bgg_id)
    return game


BGG = Source(
    name="bgg",
    label="BoardGameGeek",
    url_template=config.BGG_URL_TEMPLATE,
    id_marker=config.BGG_ID_MARKER,
    accept=config.XML_ACCEPT,
    record_type=GameRecord,
    parse_one=_parse_bgg,
    parse_many=parse_game_batch_xml,
    binary_body=True,
)

COOLSTUFFINC = Source(
    name="csi",
    label="CoolStuffInc",
    url_template=config.CSI_URL_TEMPLATE,
    id_marker=config.CSI_ID_MARKER,
    accept=config.HTML_ACCEPT,
    record_type=CoolStuffIncPrice,
    parse_one=parse_csi_html,
)

MINIATURE_MARKET = Source(
    name="mm",
    label="Miniature Market",
    url_template=config.MM_URL_TEMPLATE,
    id_marker=config.MM_ID_MARKER,
    accept=config.HTML_ACCEPT,
    record_type=MiniatureMarketPrice,
    parse_one=parse_mm_html,
)

SOURCES: Dict[str, Source] = {source.name: source for source in (BGG, COOLSTUFFINC, MINIATURE_MARKET)}


def get_source(name: str) -> Source:
    try:
        return SOURCES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown source '{name}', expected one of {', '.join(SOURCES)}")
