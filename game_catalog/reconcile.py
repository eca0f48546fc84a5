"""
Field-level reconciliation of a freshly parsed record against its cached copy.

Each record type has a precedence table mapping field names to a ``FieldRule``.
Fields missing from a table are treated as locally curated and are never
touched by a remote copy. ``merge`` is pure: inputs are never mutated.
"""

import copy
import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Type

from .models import CatalogRecord, CoolStuffIncPrice, GameRecord, MergeResult, MiniatureMarketPrice

logger = logging.getLogger(__name__)


class Precedence(Enum):
    REMOTE = "remote-authoritative"
    FILL_IF_EMPTY = "fill-if-empty"
    LOCAL = "locally-curated"


class Comparison(Enum):
    EXACT = "exact"
    CASE_INSENSITIVE = "case-insensitive"
    CARDINALITY = "cardinality"


@dataclass(frozen=True)
class FieldRule:
    precedence: Precedence
    comparison: Comparison = Comparison.EXACT


REMOTE = FieldRule(Precedence.REMOTE)
REMOTE_NAME = FieldRule(Precedence.REMOTE, Comparison.CASE_INSENSITIVE)
REMOTE_TAGS = FieldRule(Precedence.REMOTE, Comparison.CARDINALITY)
FILL_TEXT = FieldRule(Precedence.FILL_IF_EMPTY, Comparison.CASE_INSENSITIVE)
LOCAL = FieldRule(Precedence.LOCAL)

GAME_RULES: Dict[str, FieldRule] = {
    'name': REMOTE_NAME,
    'year_published': REMOTE,
    'min_players': REMOTE,
    'max_players': REMOTE,
    'min_playing_time': REMOTE,
    'max_playing_time': REMOTE,
    'playing_time': REMOTE,
    'min_age': REMOTE,
    'bgg_rating': REMOTE,
    'bgg_rating_users': REMOTE,
    'bgg_rank': REMOTE,
    'complexity_weight': REMOTE,
    'parent_game_id': REMOTE,
    'game_type': REMOTE,
    'publishers': REMOTE_TAGS,
    'designers': REMOTE_TAGS,
    'categories': REMOTE_TAGS,
    'mechanisms': REMOTE_TAGS,
    'expansion_ids': REMOTE_TAGS,
    'image_url': FILL_TEXT,
    'image_thumbnail_url': FILL_TEXT,
    'description': FILL_TEXT,
    'review_state': LOCAL,
}

_PRICE_RULES: Dict[str, FieldRule] = {
    'title': REMOTE_NAME,
    'sku': REMOTE_NAME,
    'msrp': REMOTE,
    'cur_price': REMOTE,
    'availability': REMOTE_NAME,
    'image_url': FILL_TEXT,
}

CSI_RULES: Dict[str, FieldRule] = dict(_PRICE_RULES, release_date=FILL_TEXT)
MM_RULES: Dict[str, FieldRule] = dict(_PRICE_RULES, description=FILL_TEXT)

PRECEDENCE_TABLES: Dict[Type[CatalogRecord], Dict[str, FieldRule]] = {
    GameRecord: GAME_RULES,
    CoolStuffIncPrice: CSI_RULES,
    MiniatureMarketPrice: MM_RULES,
}


def _same(rule: FieldRule, cached: Any, remote: Any) -> bool:
    if rule.comparison is Comparison.CASE_INSENSITIVE:
        return str(cached).lower() == str(remote).lower()
    if rule.comparison is Comparison.CARDINALITY:
        # Tag lists are unordered; only a size change counts as a change
        return len(cached) == len(remote)
    return cached == remote


def _should_override(rule: FieldRule, cached: Any, remote: Any) -> bool:
    if rule.precedence is Precedence.LOCAL:
        return False
    if remote is None:
        # Absent on the remote side means no opinion
        return False
    if rule.comparison is Comparison.CARDINALITY and not remote:
        return False
    if cached is None:
        return True
    return not _same(rule, cached, remote)


def merge(remote: Optional[CatalogRecord], cached: Optional[CatalogRecord],
          rules: Optional[Dict[str, FieldRule]] = None) -> MergeResult:
    """
    Merge a remote record into its cached copy.

    Args:
        remote: Record freshly parsed from the external source, if any
        cached: Record read from the repository, if any
        rules: Precedence table; defaults to the table for the record type

    Returns:
        MergeResult with the merged record, whether anything changed and which
        fields were overridden as ``field -> (cached, remote)``

    Raises:
        ValueError: if both records are absent, their types differ, or their
            identifiers disagree
    """
    if remote is None and cached is None:
        raise ValueError("Nothing to merge: both remote and cached records are absent")

    if cached is None:
        overridden = {
            f.name: (None, getattr(remote, f.name)) for f in fields(remote)
            if f.name != remote.ID_FIELD and getattr(remote, f.name) not in (None, [])
        }
        return MergeResult(copy.deepcopy(remote), True, overridden)

    if remote is None:
        return MergeResult(copy.deepcopy(cached), False, {})

    if type(remote) is not type(cached):
        raise ValueError(f"Cannot merge {type(remote).__name__} into {type(cached).__name__}")
    if remote.identifier != cached.identifier:
        raise ValueError(f"Identifier mismatch: remote {remote.identifier} vs cached {cached.identifier}")

    if rules is None:
        rules = PRECEDENCE_TABLES.get(type(cached), {})

    updates = {}
    overridden = {}
    for name, rule in rules.items():
        if name == cached.ID_FIELD:
            continue
        cached_value = getattr(cached, name)
        remote_value = getattr(remote, name)
        if _should_override(rule, cached_value, remote_value):
            updates[name] = copy.deepcopy(remote_value)
            overridden[name] = (cached_value, remote_value)

    merged = replace(copy.deepcopy(cached), **updates)
    if overridden:
        logger.debug(f"Record {cached.identifier}: remote overrode {', '.join(sorted(overridden))}")
    return MergeResult(merged, bool(overridden), overridden)
