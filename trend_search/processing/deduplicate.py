"""
Deduplication module for the aggregation pipeline.

This module removes duplicate reports of the same story across sources using
URL normalization and token-based title similarity (Jaccard index).
"""

import logging
import re
from typing import Dict, List, Set
from urllib.parse import parse_qsl, urlencode, urlsplit

from trend_search.types import TrendItem

logger = logging.getLogger(__name__)

TRACKING_PARAMS = frozenset(
    {"utm_source", "utm_medium", "utm_campaign", "utm_content", "utm_term"}
)

DEFAULT_PORTS = {"http": 80, "https": 443}

DEFAULT_TITLE_THRESHOLD = 0.7

# Anything that is not a letter, digit or whitespace. \w also matches "_",
# which is not a letter or digit, so it is excluded explicitly.
_NON_WORD_RE = re.compile(r"[^\w\s]|_", re.UNICODE)


def tokenize(text: str) -> Set[str]:
    """
    Split text into a set of comparable tokens.

    Lowercases, strips punctuation (unicode-aware), splits on whitespace and
    drops single-character tokens.

    Args:
        text: Text to tokenize

    Returns:
        Set of tokens
    """
    cleaned = _NON_WORD_RE.sub("", text.lower())
    return {token for token in cleaned.split() if len(token) > 1}


def title_similarity(a: str, b: str) -> float:
    """
    Jaccard similarity between the token sets of two titles.

    Args:
        a: First title
        b: Second title

    Returns:
        Similarity in [0, 1]; 1 when both titles have no tokens,
        0 when exactly one has none
    """
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)

    if not tokens_a and not tokens_b:
        return 1.0
    if not tokens_a or not tokens_b:
        return 0.0

    intersection = len(tokens_a & tokens_b)
    union = len(tokens_a | tokens_b)
    return intersection / union


def normalize_url(url: str) -> str:
    """
    Normalize a URL into a deduplication key.

    The host is taken from the parsed URL, so userinfo and the scheme's
    default port are dropped, and an empty http(s) path counts as ``/``.
    Drops the fragment and utm_* tracking parameters, strips a single
    trailing slash from the path and lowercases the result. Strings that do
    not parse as absolute URLs fall back to the raw string lowercased.

    Args:
        url: URL to normalize

    Returns:
        Normalized key (host + path + remaining query)
    """
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return url.lower()

    scheme = parts.scheme.lower()
    if not scheme or not hostname:
        return url.lower()

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        host += f":{port}"

    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in TRACKING_PARAMS
    ]

    path = parts.path
    if not path and scheme in DEFAULT_PORTS:
        path = "/"
    elif len(path) > 1 and path.endswith("/"):
        path = path[:-1]

    key = host + path
    if query:
        key += "?" + urlencode(query)
    return key.lower()


def deduplicate_items(
    items: List[TrendItem], threshold: float = DEFAULT_TITLE_THRESHOLD
) -> List[TrendItem]:
    """
    Remove duplicate items across sources.

    Items are scanned in input order. An item whose normalized URL was
    already seen, or whose title is more similar than ``threshold`` to a
    retained title, is merged with that entry; of the two, the one with the
    longer description survives (ties keep the retained item). The first
    similar title found wins; there is no best-match search.

    Args:
        items: Items to deduplicate
        threshold: Title similarity above which items are duplicates

    Returns:
        Unique items in retention order
    """
    seen: Dict[str, TrendItem] = {}

    for item in items:
        key = normalize_url(item.url)
        existing = seen.get(key)

        if existing is not None:
            if len(item.description) > len(existing.description):
                seen[key] = item
            continue

        duplicate_of = None
        for retained_key, retained in seen.items():
            if title_similarity(item.title, retained.title) > threshold:
                duplicate_of = retained_key
                break

        if duplicate_of is None:
            seen[key] = item
            continue

        if len(item.description) > len(seen[duplicate_of].description):
            del seen[duplicate_of]
            seen[key] = item

    unique_items = list(seen.values())

    logger.debug(
        f"Deduplication: {len(items)} items -> {len(unique_items)} unique "
        f"({len(items) - len(unique_items)} duplicates removed, threshold={threshold})"
    )

    return unique_items
