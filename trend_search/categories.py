"""
Keyword-based category detection for topic clusters.
"""

from typing import Dict, List, Sequence

from trend_search.types import TrendItem

GENERAL_CATEGORY = "general"

# Checked in this order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "technology": [
        "ai", "tech", "software", "google", "apple", "microsoft", "api",
        "programming", "developer",
    ],
    "business": [
        "business", "market", "stock", "economy", "company", "finance",
        "investment",
    ],
    "politics": [
        "politics", "government", "election", "president", "minister",
        "policy", "law",
    ],
    "entertainment": [
        "movie", "music", "game", "anime", "drama", "celebrity",
        "entertainment",
    ],
    "sports": [
        "sports", "football", "baseball", "soccer", "basketball", "olympic",
        "match",
    ],
    "science": [
        "science", "research", "study", "space", "nasa", "climate", "health",
        "medical",
    ],
}


def detect_category(topic: str, items: Sequence[TrendItem]) -> str:
    """
    Detect the category of a topic cluster.

    Keywords are matched as plain substrings of the lowercased topic and item
    titles, so short keywords such as "ai" or "law" also match inside longer
    words.

    Args:
        topic: Topic of the cluster
        items: Members of the cluster

    Returns:
        Category name, or "general" when no keyword matches
    """
    text = " ".join([topic, *(item.title for item in items)]).lower()

    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return category

    return GENERAL_CATEGORY
