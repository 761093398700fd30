"""
Tests for the in-memory TTL trend store.
"""

from trend_search.storage import TrendCache, TrendStore
from trend_search.types import SourceType
from tests.fixtures import create_item, create_trend, create_unrelated_items


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_store(ttl: float = 60.0):
    clock = FakeClock()
    return TrendStore(ttl_seconds=ttl, clock=clock), clock


def test_store_satisfies_cache_protocol():
    store, _ = make_store()
    assert isinstance(store, TrendCache)


# ============================================================================
# Raw items
# ============================================================================


def test_add_and_get_items():
    store, _ = make_store()
    items = create_unrelated_items(3)

    store.add_items(items)

    assert [i.id for i in store.get_all()] == [i.id for i in items]
    assert store.item_count == 3
    assert store.get_item(items[1].id) == items[1]


def test_get_item_unknown_id():
    store, _ = make_store()
    assert store.get_item("missing") is None


def test_add_items_replaces_by_id():
    store, _ = make_store()
    item = create_item(title="Original")
    store.add_items([item])

    updated = item.model_copy(update={"title": "Updated"})
    store.add_items([updated])

    assert store.item_count == 1
    assert store.get_item(item.id).title == "Updated"


def test_get_by_source():
    store, _ = make_store()
    rss = create_item(title="From feed", source=SourceType.RSS)
    tweet = create_item(title="From timeline", source=SourceType.TWITTER)
    store.add_items([rss, tweet])

    assert store.get_by_source(SourceType.TWITTER) == [tweet]
    assert store.get_by_source(SourceType.NEWSAPI) == []


def test_items_expire_after_ttl():
    store, clock = make_store(ttl=0.1)
    item = create_item()
    store.add_items([item])

    clock.advance(0.05)
    assert store.get_item(item.id) == item
    assert len(store.get_all()) == 1

    clock.advance(0.15)
    assert store.get_item(item.id) is None
    assert store.get_all() == []
    assert store.item_count == 0


def test_item_live_exactly_at_expiry():
    store, clock = make_store(ttl=10.0)
    item = create_item()
    store.add_items([item])

    clock.advance(10.0)

    assert store.get_item(item.id) == item


def test_readding_item_renews_ttl():
    store, clock = make_store(ttl=1.0)
    item = create_item()
    store.add_items([item])

    clock.advance(0.8)
    store.add_items([item])
    clock.advance(0.8)

    assert store.get_item(item.id) == item


# ============================================================================
# Aggregated trends
# ============================================================================


def test_set_aggregated_keeps_rank_order():
    store, _ = make_store()
    trends = [create_trend(topic=f"Topic {n}", score=10.0 - n) for n in range(3)]

    store.set_aggregated(trends)

    assert [t.id for t in store.get_aggregated()] == [t.id for t in trends]
    assert store.aggregated_count == 3


def test_set_aggregated_replaces_previous_set():
    store, _ = make_store()
    old = [create_trend(topic="Old A"), create_trend(topic="Old B")]
    new = [create_trend(topic="New")]

    store.set_aggregated(old)
    store.set_aggregated(new)

    assert [t.topic for t in store.get_aggregated()] == ["New"]
    assert store.get_aggregated_by_id(old[0].id) is None
    assert store.get_aggregated_by_id(new[0].id) == new[0]


def test_set_aggregated_empty_clears_trends():
    store, _ = make_store()
    store.set_aggregated([create_trend()])

    store.set_aggregated([])

    assert store.get_aggregated() == []


def test_aggregated_trends_expire():
    store, clock = make_store(ttl=0.1)
    trend = create_trend()
    store.set_aggregated([trend])

    clock.advance(0.05)
    assert store.get_aggregated_by_id(trend.id) == trend

    clock.advance(0.15)
    assert store.get_aggregated_by_id(trend.id) is None
    assert store.get_aggregated() == []
    assert store.aggregated_count == 0


def test_clear_drops_everything():
    store, _ = make_store()
    store.add_items(create_unrelated_items(2))
    store.set_aggregated([create_trend()])

    store.clear()

    assert store.get_all() == []
    assert store.get_aggregated() == []
