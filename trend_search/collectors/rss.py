"""
RSS/Atom feed collector.

Fetches every configured feed concurrently with aiohttp and parses it with
feedparser. The run succeeds when at least one feed could be read.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, List

import aiohttp
import feedparser
from bs4 import BeautifulSoup

from trend_search.collectors.base import CollectionError, Collector
from trend_search.types import CollectionResult, SourceType, TrendItem
from trend_search.utils import utc_now

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=10)


def clean_html(html_content: str) -> str:
    """
    Remove HTML tags and clean text content.

    Args:
        html_content: HTML string

    Returns:
        Plain text with HTML removed
    """
    if not html_content:
        return ""

    soup = BeautifulSoup(html_content, "html.parser")
    return soup.get_text(separator=" ", strip=True)


def _parse_timestamp(entry: Any, default: datetime) -> datetime:
    # feedparser normalizes parsed dates to UTC struct_time
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    return default


class RSSCollector(Collector):
    """Collector for RSS 2.0 and Atom feeds."""

    name = "RSS Feed Collector"
    source = SourceType.RSS

    def __init__(self, feed_urls: List[str]):
        """
        Initialize RSS collector.

        Args:
            feed_urls: Feed URLs to collect from
        """
        self.feed_urls = list(feed_urls)

    async def collect(self) -> CollectionResult:
        started = time.monotonic()

        if not self.feed_urls:
            return self._result(started)

        async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
            outcomes = await asyncio.gather(
                *(self._collect_from_feed(session, url) for url in self.feed_urls),
                return_exceptions=True,
            )

        items: List[TrendItem] = []
        errors: List[str] = []

        for feed_url, outcome in zip(self.feed_urls, outcomes):
            if isinstance(outcome, Exception):
                message = str(outcome) or outcome.__class__.__name__
                logger.warning(f"Failed to fetch RSS feed {feed_url}: {message}")
                errors.append(f"{feed_url}: {message}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                items.extend(outcome)

        logger.info(f"Collected {len(items)} items from {len(self.feed_urls)} RSS feeds")

        return self._result(
            started,
            items=items,
            success=len(errors) < len(self.feed_urls),
            error="; ".join(errors) if errors else None,
        )

    async def health_check(self) -> bool:
        if not self.feed_urls:
            return False

        try:
            async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
                await self._fetch_text(session, self.feed_urls[0])
            return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"RSS health check failed: {e}")
            return False

    async def _fetch_text(self, session: aiohttp.ClientSession, url: str) -> str:
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.text()

    async def _collect_from_feed(
        self, session: aiohttp.ClientSession, feed_url: str
    ) -> List[TrendItem]:
        """Fetch and parse a single feed."""
        content = await self._fetch_text(session, feed_url)
        items = self.parse_feed(content, feed_url)
        logger.debug(f"Fetched {len(items)} items from RSS feed: {feed_url}")
        return items

    def parse_feed(self, content: str, feed_url: str) -> List[TrendItem]:
        """
        Parse feed content into items.

        Args:
            content: Raw RSS/Atom document
            feed_url: URL the document was fetched from

        Returns:
            One item per entry

        Raises:
            CollectionError: If the document is not a feed at all
        """
        feed = feedparser.parse(content)

        if feed.get("bozo") and not feed.entries:
            raise CollectionError(f"Invalid feed: {feed.get('bozo_exception', 'parse error')}")

        now = utc_now()
        feed_title = feed.feed.get("title") or feed_url

        items = []
        for entry in feed.entries:
            description = clean_html(
                entry.get("summary") or entry.get("description") or ""
            )
            items.append(
                TrendItem(
                    title=(entry.get("title") or "").strip() or "Untitled",
                    description=description,
                    url=entry.get("link") or feed_url,
                    source=self.source,
                    source_name=feed_title,
                    published_at=_parse_timestamp(entry, now),
                    collected_at=now,
                    metadata={
                        "feed_url": feed_url,
                        "categories": [tag.get("term", "") for tag in entry.get("tags", [])],
                        "creator": entry.get("author"),
                    },
                )
            )

        return items
