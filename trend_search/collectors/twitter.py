"""
Twitter/X trending topics collector.

Fetches the trending topics of one location (WOEID) from the v1.1
``trends/place`` endpoint. Requests are signed with OAuth 1.0a user context
when all four user keys are configured, otherwise they carry an app-only
bearer token.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import aiohttp
from oauthlib.oauth1 import Client as OAuth1Client

from trend_search.collectors.base import CollectionError, Collector
from trend_search.types import CollectionResult, SourceType, TrendItem
from trend_search.utils import utc_now

logger = logging.getLogger(__name__)

BASE_URL = "https://api.twitter.com"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)

JAPAN_WOEID = 23424856

AUTH_OAUTH1 = "oauth1"
AUTH_BEARER = "bearer"


def describe_volume(tweet_volume: Optional[int]) -> str:
    """Human-readable description of a trend's tweet volume."""
    if tweet_volume:
        return f"Trending with {tweet_volume:,} tweets"
    return "Trending on X"


class TwitterCollector(Collector):
    """Collector for Twitter/X trending topics by location."""

    name = "X (Twitter) Collector"
    source = SourceType.TWITTER

    def __init__(
        self,
        bearer_token: Optional[str] = None,
        woeid: int = JAPAN_WOEID,
        consumer_key: Optional[str] = None,
        consumer_secret: Optional[str] = None,
        access_token: Optional[str] = None,
        access_token_secret: Optional[str] = None,
    ):
        """
        Initialize Twitter collector.

        OAuth 1.0a keys take precedence over the bearer token when all four
        are given.

        Args:
            bearer_token: App-only bearer token
            woeid: Where On Earth ID of the location (default: Japan)
            consumer_key: OAuth 1.0a consumer (API) key
            consumer_secret: OAuth 1.0a consumer secret
            access_token: OAuth 1.0a user access token
            access_token_secret: OAuth 1.0a user access token secret

        Raises:
            ValueError: If neither a full OAuth 1.0a key set nor a bearer
                token is given
        """
        self._oauth: Optional[OAuth1Client] = None
        self._bearer_token: Optional[str] = None

        if consumer_key and consumer_secret and access_token and access_token_secret:
            self._oauth = OAuth1Client(
                consumer_key,
                client_secret=consumer_secret,
                resource_owner_key=access_token,
                resource_owner_secret=access_token_secret,
            )
            self.auth_mode = AUTH_OAUTH1
        elif bearer_token:
            self._bearer_token = bearer_token
            self.auth_mode = AUTH_BEARER
        else:
            raise ValueError(
                "Twitter credentials required: provide OAuth 1.0a keys or a bearer token"
            )

        self.woeid = woeid

    def _auth_headers(self, url: str) -> Dict[str, str]:
        """Authorization header for a GET of ``url`` (signed per request for OAuth 1.0a)."""
        if self._oauth is not None:
            _, headers, _ = self._oauth.sign(url, http_method="GET")
            return dict(headers)
        return {"Authorization": f"Bearer {self._bearer_token}"}

    async def collect(self) -> CollectionResult:
        started = time.monotonic()

        try:
            trends = await self._fetch_trends()
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Failed to fetch Twitter/X trends: {message}")
            return self._result(started, success=False, error=message)

        items = self.parse_trends(trends)
        logger.info(f"Collected {len(items)} trends from Twitter/X (woeid={self.woeid})")
        return self._result(started, items=items)

    async def health_check(self) -> bool:
        try:
            await self._fetch_trends()
            return True
        except (CollectionError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug(f"Twitter/X health check failed: {e}")
            return False

    async def _fetch_trends(self) -> List[Dict[str, Any]]:
        # The query is part of the OAuth 1.0a signature base string
        url = f"{BASE_URL}/1.1/trends/place.json?{urlencode({'id': self.woeid})}"

        async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
            async with session.get(url, headers=self._auth_headers(url)) as response:
                if response.status == 401:
                    raise CollectionError(
                        f"Twitter API authentication failed - check {self.auth_mode} credentials"
                    )
                if response.status == 429:
                    raise CollectionError("Twitter API rate limit exceeded")
                if response.status >= 400:
                    raise CollectionError(
                        f"Twitter API error: {response.status} {response.reason}"
                    )
                data = await response.json()

        if not data:
            return []

        return data[0].get("trends") or []

    def parse_trends(self, trends: List[Dict[str, Any]]) -> List[TrendItem]:
        """
        Convert ``trends/place`` entries into items.

        Args:
            trends: ``trends`` array of the first location in the response

        Returns:
            One item per named trend
        """
        now = utc_now()
        items = []

        for trend in trends:
            name = trend.get("name")
            if not name:
                continue

            tweet_volume = trend.get("tweet_volume")
            items.append(
                TrendItem(
                    title=name,
                    description=describe_volume(tweet_volume),
                    url=trend.get("url") or "",
                    source=self.source,
                    source_name="X (Twitter)",
                    published_at=now,
                    collected_at=now,
                    metadata={
                        "tweet_volume": tweet_volume,
                        "query": trend.get("query"),
                    },
                )
            )

        return items
