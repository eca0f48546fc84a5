"""Shared fixtures and synthetic documents for the catalog tests."""

from typing import Dict, List, Optional

import pytest

from game_catalog.models import FetchOutcome, FetchStatus, GameRecord


def bgg_item_xml(bgg_id: int, name: str, year: int = 2018, min_players: int = 2, max_players: int = 4,
                 min_time: int = 60, max_time: int = 120, rating: str = "8.61", users: int = 42000,
                 rank: str = "1", weight: str = "3.87", designers: Optional[List[str]] = None,
                 publishers: Optional[List[str]] = None, item_type: str = "boardgame",
                 extra: str = "") -> str:
    designers = designers if designers is not None else ["Gavan Brown", "Matt Tolman"]
    publishers = publishers if publishers is not None else ["Roxley"]
    links = "".join(
        f'<link type="boardgamedesigner" id="{i}" value="{d}"/>' for i, d in enumerate(designers, 1)
    ) + "".join(
        f'<link type="boardgamepublisher" id="{i}" value="{p}"/>' for i, p in enumerate(publishers, 100)
    )
    return f"""
    <item type="{item_type}" id="{bgg_id}">
        <thumbnail>https://cf.geekdo-images.com/{bgg_id}_t.jpg</thumbnail>
        <image>https://cf.geekdo-images.com/{bgg_id}.jpg</image>
        <name type="primary" sortindex="1" value="{name}"/>
        <name type="alternate" sortindex="1" value="{name} (alt)"/>
        <description>Build networks &amp;amp; industries.</description>
        <yearpublished value="{year}"/>
        <minplayers value="{min_players}"/>
        <maxplayers value="{max_players}"/>
        <playingtime value="{max_time}"/>
        <minplaytime value="{min_time}"/>
        <maxplaytime value="{max_time}"/>
        <minage value="14"/>
        <link type="boardgamecategory" id="1021" value="Economic"/>
        <link type="boardgamemechanic" id="2040" value="Hand Management"/>
        <link type="boardgamemechanic" id="2081" value="Network and Route Building"/>
        {links}
        {extra}
        <statistics page="1">
            <ratings>
                <usersrated value="{users}"/>
                <average value="{rating}"/>
                <ranks>
                    <rank type="subtype" id="1" name="boardgame" friendlyname="Board Game Rank" value="{rank}"/>
                    <rank type="family" id="5497" name="strategygames" value="1"/>
                </ranks>
                <averageweight value="{weight}"/>
            </ratings>
        </statistics>
    </item>
    """


def bgg_document(*items: str) -> str:
    return ('<?xml version="1.0" encoding="utf-8"?>'
            '<items termsofuse="https://boardgamegeek.com/xmlapi/termsofuse">'
            + "".join(items) + "</items>")


def csi_page(title: str = "Brass: Birmingham", price: str = "$29.99", msrp: str = "MSRP: $39.99",
             not_found: bool = False) -> str:
    if not_found:
        return """
        <html><head><title>Page Not Found | CoolStuffInc.com</title></head>
        <body><h1>Oops! Page Not Found</h1></body></html>
        """
    return f"""
    <html>
    <head>
        <title>{title} | CoolStuffInc.com</title>
        <meta property="og:title" content="{title}"/>
        <meta property="og:image" content="https://www.coolstuffinc.com/images/brass.jpg"/>
        <script>var dataLayer = [{{"price": "0.00"}}];</script>
        <style>.msrp {{ text-decoration: line-through; }}</style>
    </head>
    <body>
        <div class="header"><a href="/">Home</a><span class="price">$0.00 cart</span></div>
        <div id="product" itemscope itemtype="http://schema.org/Product">
            <h1 itemprop="name">{title}</h1>
            <span itemprop="sku">CSI-ROX601</span>
            <div class="msrp">{msrp}</div>
            <div class="offer" itemprop="offers" itemscope itemtype="http://schema.org/Offer">
                <span itemprop="price">{price}</span>
                <link itemprop="availability" href="http://schema.org/InStock"/>
            </div>
            <div class="release-date">Release Date: 2018-09-01</div>
        </div>
    </body>
    </html>
    """


def mm_page(title: str = "Brass: Birmingham", regular: str = "$47.99", special: Optional[str] = "$34.99",
            msrp: str = "$69.99", not_found: bool = False) -> str:
    if not_found:
        return """
        <html><head><title>404 Not Found 1</title></head>
        <body class="cms-index-noroute cms-no-route"><h1>Whoops, our bad...</h1></body></html>
        """
    special_html = f'<p class="special-price"><span class="price">{special}</span></p>' if special else ""
    return f"""
    <html>
    <head><meta property="og:image" content="https://www.miniaturemarket.com/media/og.jpg"/></head>
    <body class="catalog-product-view">
        <script type="text/javascript">var optionsPrice = new Product.OptionsPrice({{"productPrice": 1}});</script>
        <div class="product-view">
            <div class="product-img-box"><img id="image-main" src="https://www.miniaturemarket.com/media/rox601.jpg"/></div>
            <div class="product-name"><h1>{title}</h1></div>
            <div class="sku">SKU: ROX601</div>
            <p class="availability in-stock"><span>In stock</span></p>
            <div class="price-box">
                <p class="old-price"><span class="price">{msrp}</span></p>
                <span class="regular-price"><span class="price">{regular}</span></span>
                {special_html}
            </div>
            <div class="short-description"><div class="std">An economic strategy game.</div></div>
        </div>
    </body>
    </html>
    """


def make_game(bgg_id: int = 224517, **overrides) -> GameRecord:
    values = dict(
        bgg_id=bgg_id,
        name="Brass: Birmingham",
        year_published=2018,
        min_players=2,
        max_players=4,
        min_playing_time=60,
        max_playing_time=120,
        bgg_rating=8.61,
        bgg_rating_users=42000,
        bgg_rank=1,
        game_type="boardgame",
        image_url="https://cf.geekdo-images.com/brass.jpg",
        description="Build networks & industries.",
        publishers=["Roxley"],
        designers=["Gavan Brown", "Matt Tolman", "Martin Wallace"],
        categories=["Economic"],
        mechanisms=["Hand Management"],
    )
    values.update(overrides)
    return GameRecord(**values)


class StubFetchClient:
    """Fetch client returning canned outcomes keyed by identifier tuple."""

    def __init__(self, outcomes: Optional[Dict[tuple, FetchOutcome]] = None,
                 default: Optional[FetchOutcome] = None):
        self.outcomes = outcomes or {}
        self.default = default or FetchOutcome.failure(FetchStatus.NOT_FOUND, "HTTP 404", status_code=404)
        self.calls: List[tuple] = []

    def fetch(self, identifiers) -> FetchOutcome:
        key = (identifiers,) if isinstance(identifiers, int) else tuple(identifiers)
        self.calls.append(key)
        return self.outcomes.get(key, self.default)


class InMemoryRepository:
    """Repository double recording every write."""

    def __init__(self, records=None, fail_reads: bool = False, fail_writes: bool = False):
        self.records = {r.identifier: r for r in (records or [])}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = []

    def read_by_id(self, identifier):
        if self.fail_reads:
            raise ConnectionError("cache offline")
        return self.records.get(identifier)

    def write(self, record):
        if self.fail_writes:
            raise ConnectionError("cache is read-only")
        self.writes.append(record)
        self.records[record.identifier] = record


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "catalog.db"
