"""
NewsAPI top-headlines collector.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Dict, List

import aiohttp

from trend_search.collectors.base import CollectionError, Collector
from trend_search.types import CollectionResult, SourceType, TrendItem
from trend_search.utils import as_utc, utc_now

logger = logging.getLogger(__name__)

BASE_URL = "https://newsapi.org/v2"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)


def _parse_published_at(value: Any, default: datetime) -> datetime:
    if not value:
        return default
    try:
        return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        return default


class NewsAPICollector(Collector):
    """
    Collector for NewsAPI top headlines of one country.

    HTTP and API-level errors are reported as a failed result; a 429 response
    is reported as a rate-limit error.
    """

    name = "News API Collector"
    source = SourceType.NEWSAPI

    def __init__(self, api_key: str, country: str = "jp", page_size: int = 30):
        """
        Initialize NewsAPI collector.

        Args:
            api_key: NewsAPI key
            country: ISO 3166 country code for top headlines
            page_size: Number of headlines per run
        """
        self._api_key = api_key
        self.country = country
        self.page_size = page_size

    async def collect(self) -> CollectionResult:
        started = time.monotonic()

        try:
            articles = await self._fetch_top_headlines(self.page_size)
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Failed to fetch NewsAPI headlines: {message}")
            return self._result(started, success=False, error=message)

        items = self.parse_articles(articles)
        logger.info(f"Collected {len(items)} items from NewsAPI ({self.country})")
        return self._result(started, items=items)

    async def health_check(self) -> bool:
        try:
            await self._fetch_top_headlines(1)
            return True
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug(f"NewsAPI health check failed: {e}")
            return False

    async def _fetch_top_headlines(self, page_size: int) -> List[Dict[str, Any]]:
        params = {
            "country": self.country,
            "pageSize": str(page_size),
            "apiKey": self._api_key,
        }

        async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
            async with session.get(f"{BASE_URL}/top-headlines", params=params) as response:
                if response.status == 429:
                    raise CollectionError("NewsAPI rate limit exceeded")
                if response.status >= 400:
                    raise CollectionError(
                        f"NewsAPI error: {response.status} {response.reason}"
                    )
                data = await response.json()

        if data.get("status") != "ok":
            raise CollectionError(f"NewsAPI returned status: {data.get('status')}")

        return data.get("articles") or []

    def parse_articles(self, articles: List[Dict[str, Any]]) -> List[TrendItem]:
        """
        Convert NewsAPI articles into items.

        Args:
            articles: ``articles`` array of a top-headlines response

        Returns:
            One item per article that has a URL
        """
        now = utc_now()
        items = []

        for article in articles:
            url = article.get("url")
            if not url:
                continue

            source_info = article.get("source") or {}
            items.append(
                TrendItem(
                    title=article.get("title") or "Untitled",
                    description=article.get("description") or article.get("content") or "",
                    url=url,
                    source=self.source,
                    source_name=source_info.get("name") or "NewsAPI",
                    published_at=_parse_published_at(article.get("publishedAt"), now),
                    collected_at=now,
                    metadata={
                        "author": article.get("author"),
                        "image_url": article.get("urlToImage"),
                        "original_source": source_info,
                    },
                )
            )

        return items
