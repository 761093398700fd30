"""
Generic HTML scraping collector.

Scrapes article lists from configured pages using CSS selectors. Targets are
fetched one after another with a polite delay between them.
"""

import asyncio
import logging
import time
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import List, Optional
from urllib.parse import urljoin

import aiohttp
from bs4 import BeautifulSoup
from pydantic import BaseModel

from trend_search.collectors.base import CollectionError, Collector
from trend_search.types import CollectionResult, SourceType, TrendItem
from trend_search.utils import as_utc, utc_now

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)
HEADERS = {"User-Agent": "TrendSearchBot/1.0"}


class ScrapingSelectors(BaseModel):
    """CSS selectors locating articles and their fields on a page."""

    article_container: str
    title: str
    link: str
    summary: Optional[str] = None
    date: Optional[str] = None


class ScrapingTarget(BaseModel):
    """A page to scrape."""

    url: str
    name: str
    selectors: ScrapingSelectors


def parse_date(text: str) -> Optional[datetime]:
    """
    Parse a scraped date string (ISO 8601 or RFC 2822).

    Returns:
        UTC datetime, or None when the text is not a recognizable date
    """
    if not text:
        return None

    try:
        return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    try:
        return as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError):
        return None


class WebScrapingCollector(Collector):
    """Collector scraping article listings from arbitrary web pages."""

    name = "Web Scraping Collector"
    source = SourceType.WEB_SCRAPING

    def __init__(self, targets: List[ScrapingTarget], delay_seconds: float = 1.0):
        """
        Initialize the scraping collector.

        Args:
            targets: Pages to scrape, in order
            delay_seconds: Pause between consecutive targets
        """
        self.targets = list(targets)
        self.delay_seconds = delay_seconds

    async def collect(self) -> CollectionResult:
        started = time.monotonic()

        if not self.targets:
            return self._result(started)

        items: List[TrendItem] = []
        errors: List[str] = []

        async with aiohttp.ClientSession(headers=HEADERS, timeout=REQUEST_TIMEOUT) as session:
            for index, target in enumerate(self.targets):
                try:
                    html = await self._fetch_html(session, target.url)
                    items.extend(self.parse_html(html, target))
                except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                    message = str(e) or e.__class__.__name__
                    logger.warning(f"Failed to scrape {target.name}: {message}")
                    errors.append(f"{target.name}: {message}")

                if index < len(self.targets) - 1 and self.delay_seconds > 0:
                    await asyncio.sleep(self.delay_seconds)

        logger.info(f"Scraped {len(items)} items from {len(self.targets)} targets")

        return self._result(
            started,
            items=items,
            success=len(errors) < len(self.targets),
            error="; ".join(errors) if errors else None,
        )

    async def health_check(self) -> bool:
        if not self.targets:
            return False

        try:
            async with aiohttp.ClientSession(headers=HEADERS, timeout=REQUEST_TIMEOUT) as session:
                await self._fetch_html(session, self.targets[0].url)
            return True
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Scraping health check failed: {e}")
            return False

    async def _fetch_html(self, session: aiohttp.ClientSession, url: str) -> str:
        async with session.get(url) as response:
            if response.status >= 400:
                raise CollectionError(f"HTTP {response.status} {response.reason}")
            return await response.text()

    def parse_html(self, html: str, target: ScrapingTarget) -> List[TrendItem]:
        """
        Extract articles from a page.

        Args:
            html: Page HTML
            target: Target the page belongs to

        Returns:
            One item per container with a non-empty title
        """
        soup = BeautifulSoup(html, "html.parser")
        selectors = target.selectors
        now = utc_now()
        items = []

        for container in soup.select(selectors.article_container):
            title_el = container.select_one(selectors.title)
            title = title_el.get_text().strip() if title_el is not None else ""
            if not title:
                continue

            link_el = container.select_one(selectors.link)
            link = (link_el.get("href") or "") if link_el is not None else ""
            if link and not link.startswith("http"):
                link = urljoin(target.url, link)

            summary = ""
            if selectors.summary:
                summary_el = container.select_one(selectors.summary)
                if summary_el is not None:
                    summary = summary_el.get_text().strip()

            published_at = None
            if selectors.date:
                date_el = container.select_one(selectors.date)
                if date_el is not None:
                    published_at = parse_date(
                        date_el.get("datetime") or date_el.get_text().strip()
                    )

            items.append(
                TrendItem(
                    title=title,
                    description=summary,
                    url=link or target.url,
                    source=self.source,
                    source_name=target.name,
                    published_at=published_at or now,
                    collected_at=now,
                    metadata={"scraped_from": target.url},
                )
            )

        return items
