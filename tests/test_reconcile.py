"""Property-based tests for the reconciliation engine."""

import string

import pytest
from hypothesis import assume, given, strategies as st

from game_catalog.models import CoolStuffIncPrice, GameRecord
from game_catalog.reconcile import GAME_RULES, Precedence, merge

from conftest import make_game


# Remote-authoritative numeric fields compared by plain equality
numeric_fields = st.sampled_from([
    'year_published', 'min_players', 'max_players', 'min_playing_time',
    'max_playing_time', 'bgg_rating_users', 'bgg_rank',
])
values = st.integers(min_value=0, max_value=100000)
names = st.text(min_size=1, max_size=40, alphabet=string.ascii_letters + string.digits + " :&-")
tag_lists = st.lists(st.text(min_size=1, max_size=12), max_size=6)

games = st.builds(
    GameRecord,
    bgg_id=st.just(13),
    name=names,
    year_published=st.one_of(st.none(), values),
    min_players=st.one_of(st.none(), st.integers(1, 10)),
    max_players=st.one_of(st.none(), st.integers(1, 20)),
    bgg_rating=st.one_of(st.none(), st.floats(0, 10, allow_nan=False)),
    bgg_rank=st.one_of(st.none(), values),
    description=st.one_of(st.none(), names),
    image_url=st.one_of(st.none(), names),
    publishers=tag_lists,
    designers=tag_lists,
    mechanisms=tag_lists,
    review_state=st.one_of(st.none(), st.sampled_from(["reviewed", "pending"])),
)


@given(numeric_fields, values, values)
def test_remote_authoritative_difference_overrides(field_name: str, v1: int, v2: int) -> None:
    assume(v1 != v2)
    remote = make_game(**{field_name: v1})
    cached = make_game(**{field_name: v2})

    result = merge(remote, cached)

    assert result.changed
    assert getattr(result.record, field_name) == v1
    assert result.overridden[field_name] == (v2, v1)


@given(games)
def test_merge_without_cache_is_remote_verbatim(record: GameRecord) -> None:
    result = merge(record, None)
    assert result.record == record
    assert result.changed


@given(games)
def test_merge_without_remote_is_cached_verbatim(record: GameRecord) -> None:
    result = merge(None, record)
    assert result.record == record
    assert not result.changed
    assert result.overridden == {}


@given(games, games)
def test_merge_is_idempotent(remote: GameRecord, cached: GameRecord) -> None:
    first = merge(remote, cached)
    second = merge(remote, first.record)
    assert not second.changed


@given(games, games)
def test_merge_does_not_mutate_inputs(remote: GameRecord, cached: GameRecord) -> None:
    remote_before = GameRecord(**remote.to_dict())
    cached_before = GameRecord(**cached.to_dict())

    merge(remote, cached)

    assert remote == remote_before
    assert cached == cached_before


def test_name_comparison_ignores_case() -> None:
    result = merge(make_game(name="BRASS: BIRMINGHAM"), make_game(name="Brass: Birmingham"))
    assert not result.changed
    assert result.record.name == "Brass: Birmingham"


def test_tag_list_replaced_only_when_cardinality_differs() -> None:
    same_size = merge(make_game(designers=["A", "B", "C"]), make_game())
    assert not same_size.changed

    resized = merge(make_game(designers=["Martin Wallace"]), make_game())
    assert resized.changed
    assert resized.record.designers == ["Martin Wallace"]


def test_absent_remote_value_has_no_opinion() -> None:
    result = merge(make_game(bgg_rank=None, description=None, designers=[]), make_game(bgg_rank=5))
    assert result.record.bgg_rank == 5
    assert result.record.description == "Build networks & industries."
    assert len(result.record.designers) == 3
    assert not result.changed


def test_text_fields_fill_if_empty_else_take_remote_on_mismatch() -> None:
    filled = merge(make_game(image_url="https://img/a.jpg"), make_game(image_url=None))
    assert filled.record.image_url == "https://img/a.jpg"

    matching = merge(make_game(image_url="HTTPS://IMG/A.JPG"), make_game(image_url="https://img/a.jpg"))
    assert not matching.changed
    assert matching.record.image_url == "https://img/a.jpg"

    replaced = merge(make_game(description="New text"), make_game(description="Old text"))
    assert replaced.record.description == "New text"


def test_locally_curated_field_is_never_overwritten() -> None:
    assert GAME_RULES['review_state'].precedence is Precedence.LOCAL
    result = merge(make_game(review_state="pending"), make_game(review_state="reviewed"))
    assert result.record.review_state == "reviewed"
    assert not result.changed


def test_identifier_mismatch_is_rejected() -> None:
    with pytest.raises(ValueError):
        merge(make_game(bgg_id=1), make_game(bgg_id=2))


def test_type_mismatch_is_rejected() -> None:
    with pytest.raises(ValueError):
        merge(CoolStuffIncPrice(csi_id=224517, title="Brass"), make_game())


def test_both_absent_is_rejected() -> None:
    with pytest.raises(ValueError):
        merge(None, None)


def test_price_change_is_detected() -> None:
    cached = CoolStuffIncPrice(csi_id=9, title="Brass", cur_price=34.99, msrp=69.99)
    remote = CoolStuffIncPrice(csi_id=9, title="Brass", cur_price=29.99, msrp=69.99, image_url="https://i/b.jpg")

    result = merge(remote, cached)

    assert result.changed
    assert result.record.cur_price == 29.99
    assert set(result.overridden) == {'cur_price', 'image_url'}
