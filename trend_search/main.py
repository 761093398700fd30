"""
Application entry point.

Wires the cache, collectors, aggregator, scheduler and HTTP API together,
runs a first update and serves the API with uvicorn.
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from api.main import create_app
from trend_search.collectors import (
    Collector,
    CollectorOrchestrator,
    NewsAPICollector,
    RSSCollector,
    TwitterCollector,
    XTrendsScraper,
)
from trend_search.config import AppConfig, ConfigurationError, load_config
from trend_search.observability.logging import log_context, setup_logging
from trend_search.observability.metrics import update_cache_gauges
from trend_search.processing.pipeline import TrendAggregator
from trend_search.scheduler import UpdateScheduler
from trend_search.storage.memory import TrendStore
from trend_search.utils import generate_id

logger = logging.getLogger(__name__)


class UpdatePipeline:
    """One full update: collect from every source, aggregate, cache."""

    def __init__(
        self,
        orchestrator: CollectorOrchestrator,
        aggregator: TrendAggregator,
        store: TrendStore,
    ):
        self.orchestrator = orchestrator
        self.aggregator = aggregator
        self.store = store

    async def run(self) -> None:
        """
        Collect, aggregate and replace the cached trend set.

        Collector failures are isolated by the orchestrator; anything else
        propagates to the caller.
        """
        with log_context(run_id=generate_id()[:8]):
            logger.info("Running update")

            collected = await self.orchestrator.collect_all()
            success_count = sum(1 for r in collected.results if r.success)
            logger.info(
                f"Collected {len(collected.items)} items from "
                f"{success_count}/{len(collected.results)} sources"
            )

            trends = self.aggregator.aggregate(collected.items)
            self.store.add_items(collected.items)
            self.store.set_aggregated(trends)

            update_cache_gauges(self.store.aggregated_count, self.store.item_count)
            logger.info(f"Aggregated into {len(trends)} trends")


@dataclass
class Application:
    """Components owned by one running instance."""

    config: AppConfig
    store: TrendStore
    orchestrator: CollectorOrchestrator
    aggregator: TrendAggregator
    pipeline: UpdatePipeline
    scheduler: UpdateScheduler
    app: FastAPI


def build_collectors(config: AppConfig) -> List[Collector]:
    """
    Build the collectors enabled by the configuration.

    RSS, NewsAPI and the Twitter API collector are enabled by their settings;
    the trends24.in scraper is always registered as the X source that needs
    no credentials.
    """
    collectors: List[Collector] = []

    if config.rss_feed_urls:
        collectors.append(RSSCollector(config.rss_feed_urls))
        logger.info(f"RSS Collector: {len(config.rss_feed_urls)} feeds")

    if config.news_api_key:
        collectors.append(
            NewsAPICollector(config.news_api_key, country=config.news_api_country)
        )
        logger.info("News API Collector: enabled")

    if config.twitter_oauth_configured or config.twitter_bearer_token:
        collector = TwitterCollector(
            config.twitter_bearer_token,
            woeid=config.twitter_woeid,
            consumer_key=config.twitter_consumer_key,
            consumer_secret=config.twitter_consumer_secret,
            access_token=config.twitter_access_token,
            access_token_secret=config.twitter_access_token_secret,
        )
        collectors.append(collector)
        logger.info(f"Twitter API Collector: enabled ({collector.auth_mode})")

    collectors.append(XTrendsScraper(config.x_trends_country))
    logger.info(f"X Trends Scraper (trends24.in): enabled ({config.x_trends_country})")

    return collectors


def build_application(
    config: AppConfig, collectors: Optional[List[Collector]] = None
) -> Application:
    """
    Construct every component once and wire them together.

    Args:
        config: Validated configuration
        collectors: Collectors to register (default: from configuration)

    Returns:
        The assembled application; nothing is started yet
    """
    store = TrendStore(ttl_seconds=config.storage_ttl_seconds)
    orchestrator = CollectorOrchestrator(collector_timeout=config.collector_timeout_seconds)
    aggregator = TrendAggregator()

    for collector in build_collectors(config) if collectors is None else collectors:
        orchestrator.register(collector)

    if orchestrator.get_collector_count() == 0:
        logger.warning("No collectors configured. Set API keys in .env file.")

    pipeline = UpdatePipeline(orchestrator, aggregator, store)
    scheduler = UpdateScheduler(pipeline.run, interval_seconds=config.update_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        try:
            await scheduler.trigger_now()
        except Exception as e:
            logger.error(f"Initial update failed: {e}", exc_info=True)
        scheduler.start()
        logger.info(
            f"Scheduler started. Auto-update every "
            f"{config.update_interval_seconds / 60:g} minutes"
        )

        yield

        # Shutdown
        scheduler.stop()
        store.clear()
        logger.info("Shutdown complete")

    app = create_app(store, scheduler, orchestrator, lifespan=lifespan)

    return Application(
        config=config,
        store=store,
        orchestrator=orchestrator,
        aggregator=aggregator,
        pipeline=pipeline,
        scheduler=scheduler,
        app=app,
    )


async def main(config: Optional[AppConfig] = None) -> None:
    """Load configuration, build the application and serve it until stopped."""
    config = config or load_config()

    setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    logger.info("Starting Trend Search System...")

    application = build_application(config)

    server = uvicorn.Server(
        uvicorn.Config(
            application.app,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
            log_config=None,
        )
    )

    logger.info(f"Server running on http://{config.host}:{config.port}")
    await server.serve()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
