"""
Trend Search System.

Collects trending items from news feeds, news APIs, social trend endpoints and
scraped pages, merges duplicate reports, clusters related items into ranked
trends and serves them from an expiring in-memory cache.
"""

__version__ = "1.0.0"
