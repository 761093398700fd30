"""
Tests for application wiring and the update pipeline.
"""

import pytest
from fastapi.testclient import TestClient

from trend_search.collectors import (
    NewsAPICollector,
    RSSCollector,
    TwitterCollector,
    XTrendsScraper,
)
from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.config import load_config
from trend_search.main import UpdatePipeline, build_application, build_collectors
from trend_search.processing.pipeline import TrendAggregator
from trend_search.storage.memory import TrendStore
from trend_search.types import SourceType
from tests.fixtures import create_item, create_trend
from tests.mocks import FailingCollector, MockCollector


def test_build_collectors_defaults_to_scraper_only():
    collectors = build_collectors(load_config(env={}))

    assert len(collectors) == 1
    assert isinstance(collectors[0], XTrendsScraper)
    assert collectors[0].country == "japan"


def test_build_collectors_enabled_by_settings():
    config = load_config(
        env={
            "RSS_FEED_URLS": "https://a.example.com/rss,https://b.example.com/rss",
            "NEWS_API_KEY": "key",
            "TWITTER_BEARER_TOKEN": "token",
            "X_TRENDS_COUNTRY": "united-states",
        }
    )

    collectors = build_collectors(config)

    assert [type(c) for c in collectors] == [
        RSSCollector,
        NewsAPICollector,
        TwitterCollector,
        XTrendsScraper,
    ]
    assert collectors[0].feed_urls == [
        "https://a.example.com/rss",
        "https://b.example.com/rss",
    ]
    assert collectors[3].url == "https://trends24.in/united-states/"
    assert collectors[2].auth_mode == "bearer"


def test_build_collectors_twitter_oauth1_only():
    config = load_config(
        env={
            "TWITTER_CONSUMER_KEY": "ck",
            "TWITTER_CONSUMER_SECRET": "cs",
            "TWITTER_ACCESS_TOKEN": "at",
            "TWITTER_ACCESS_TOKEN_SECRET": "ats",
        }
    )

    collectors = build_collectors(config)

    assert [type(c) for c in collectors] == [TwitterCollector, XTrendsScraper]
    assert collectors[0].auth_mode == "oauth1"


def test_build_collectors_skips_twitter_with_partial_oauth_keys():
    config = load_config(env={"TWITTER_CONSUMER_KEY": "ck", "TWITTER_ACCESS_TOKEN": "at"})

    collectors = build_collectors(config)

    assert [type(c) for c in collectors] == [XTrendsScraper]


@pytest.mark.asyncio
async def test_update_pipeline_replaces_cached_trends():
    store = TrendStore()
    store.set_aggregated([create_trend(topic="Stale trend")])

    orchestrator = CollectorOrchestrator()
    orchestrator.register(
        MockCollector(
            name="Feeds",
            items=[create_item(title="Volcano erupts"), create_item(title="Bakery opens")],
        )
    )
    orchestrator.register(FailingCollector(RuntimeError("offline"), name="Broken"))

    await UpdatePipeline(orchestrator, TrendAggregator(), store).run()

    topics = [t.topic for t in store.get_aggregated()]
    assert sorted(topics) == ["Bakery opens", "Volcano erupts"]
    assert store.item_count == 2


@pytest.mark.asyncio
async def test_update_pipeline_with_no_items_clears_trends():
    store = TrendStore()
    store.set_aggregated([create_trend()])
    orchestrator = CollectorOrchestrator()
    orchestrator.register(MockCollector(name="Empty"))

    await UpdatePipeline(orchestrator, TrendAggregator(), store).run()

    assert store.get_aggregated() == []


def test_application_lifespan_runs_initial_update():
    collector = MockCollector(
        name="Tweets",
        source=SourceType.TWITTER,
        items=[create_item(title="Baseball final tonight", source=SourceType.TWITTER)],
    )
    application = build_application(load_config(env={}), collectors=[collector])

    with TestClient(application.app) as client:
        assert collector.collect_calls == 1
        assert application.scheduler.is_scheduled is True

        data = client.get("/api/trends").json()
        assert data["count"] == 1
        assert data["trends"][0]["category"] == "sports"

    assert application.scheduler.is_scheduled is False
    assert application.store.get_aggregated() == []


def test_application_starts_when_initial_update_fails(monkeypatch):
    application = build_application(load_config(env={}), collectors=[MockCollector()])

    async def broken_run():
        raise RuntimeError("aggregation failed")

    monkeypatch.setattr(application.scheduler, "_update_fn", broken_run)

    with TestClient(application.app) as client:
        assert client.get("/api/health").status_code == 200
        assert application.scheduler.is_scheduled is True
