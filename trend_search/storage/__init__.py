"""
Storage layer for the Trend Search System.

A volatile, TTL-bounded in-memory cache; there is no durable storage.
"""

from trend_search.storage.interfaces import TrendCache
from trend_search.storage.memory import TrendStore

__all__ = ["TrendCache", "TrendStore"]
