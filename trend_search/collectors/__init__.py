"""
Data collectors.

Every source implements the Collector contract; the orchestrator fans out
over whichever collectors are registered at startup.
"""

from trend_search.collectors.base import CollectionError, Collector
from trend_search.collectors.newsapi import NewsAPICollector
from trend_search.collectors.orchestrator import CollectorOrchestrator
from trend_search.collectors.rss import RSSCollector
from trend_search.collectors.twitter import TwitterCollector
from trend_search.collectors.web_scraping import (
    ScrapingSelectors,
    ScrapingTarget,
    WebScrapingCollector,
)
from trend_search.collectors.x_trends import XTrendsScraper

__all__ = [
    "Collector",
    "CollectionError",
    "CollectorOrchestrator",
    "RSSCollector",
    "NewsAPICollector",
    "TwitterCollector",
    "XTrendsScraper",
    "WebScrapingCollector",
    "ScrapingTarget",
    "ScrapingSelectors",
]
