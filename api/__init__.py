"""
HTTP API for the Trend Search System.
"""

from trend_search import __version__

__all__ = ["__version__"]
