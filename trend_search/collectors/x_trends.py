"""
X (Twitter) trends scraper.

Scrapes trending topics from trends24.in, which works without API access and
is registered as the always-on X source.
"""

import asyncio
import logging
import re
import time
from typing import List, Optional
from urllib.parse import quote

import aiohttp
from bs4 import BeautifulSoup

from trend_search.collectors.base import CollectionError, Collector
from trend_search.collectors.twitter import describe_volume
from trend_search.types import CollectionResult, SourceType, TrendItem
from trend_search.utils import utc_now

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "ja,en;q=0.9",
}

_COUNT_RE = re.compile(r"([\d.]+)([KM])?")
_MULTIPLIERS = {"K": 1_000, "M": 1_000_000}


def parse_tweet_count(text: str) -> Optional[int]:
    """
    Parse a tweet count such as ``123K``, ``1.2M`` or ``1,234``.

    Args:
        text: Count text or ``data-count`` attribute value

    Returns:
        Count as an integer, or None when the text holds no number
    """
    if not text:
        return None

    cleaned = re.sub(r"[,\s]", "", text).upper()
    match = _COUNT_RE.search(cleaned)
    if not match:
        return None

    try:
        number = float(match.group(1))
    except ValueError:
        return None

    number *= _MULTIPLIERS.get(match.group(2), 1)
    return round(number)


def search_url(name: str) -> str:
    """X search URL for a trend name."""
    return f"https://x.com/search?q={quote(name, safe='')}&src=trend_click"


class XTrendsScraper(Collector):
    """Collector scraping X trending topics of one country from trends24.in."""

    name = "X Trends Scraper (trends24.in)"
    source = SourceType.TWITTER

    def __init__(self, country: str = "japan"):
        """
        Initialize the scraper.

        Args:
            country: trends24.in country slug
        """
        self.country = country
        self.url = f"https://trends24.in/{country}/"

    async def collect(self) -> CollectionResult:
        started = time.monotonic()

        try:
            html = await self._fetch_html()
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Failed to scrape {self.url}: {message}")
            return self._result(started, success=False, error=message)

        items = self.parse_html(html)
        logger.info(f"Scraped {len(items)} X trends from {self.url}")
        return self._result(started, items=items)

    async def health_check(self) -> bool:
        try:
            async with aiohttp.ClientSession(headers=HEADERS, timeout=REQUEST_TIMEOUT) as session:
                async with session.head(self.url) as response:
                    return response.status < 400
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"X trends health check failed: {e}")
            return False

    async def _fetch_html(self) -> str:
        async with aiohttp.ClientSession(headers=HEADERS, timeout=REQUEST_TIMEOUT) as session:
            async with session.get(self.url) as response:
                if response.status >= 400:
                    raise CollectionError(f"HTTP {response.status} {response.reason}")
                return await response.text()

    def parse_html(self, html: str) -> List[TrendItem]:
        """
        Extract trends from a trends24.in page.

        Trend names are deduplicated case-insensitively across all time-slot
        cards on the page; the first occurrence wins.

        Args:
            html: Page HTML

        Returns:
            One item per distinct trend name
        """
        soup = BeautifulSoup(html, "html.parser")
        now = utc_now()
        seen = set()
        items = []

        for li in soup.select(".trend-card__list li"):
            link = li.select_one("a.trend-link")
            if link is None:
                continue

            name = link.get_text().strip()
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())

            href = link.get("href") or ""
            url = href if href.startswith("http") else search_url(name)

            count = li.select_one(".tweet-count")
            count_text = ""
            if count is not None:
                count_text = count.get("data-count") or count.get_text().strip()
            tweet_volume = parse_tweet_count(count_text)

            items.append(
                TrendItem(
                    title=name,
                    description=describe_volume(tweet_volume),
                    url=url,
                    source=self.source,
                    source_name="X (Twitter)",
                    published_at=now,
                    collected_at=now,
                    metadata={
                        "tweet_volume": tweet_volume,
                        "query": name,
                        "scraped_from": "trends24.in",
                    },
                )
            )

        return items
