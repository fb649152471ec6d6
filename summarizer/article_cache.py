"""Extracted chapter text, keyed by URL.

A page is downloaded once even when it is summarized at several granularities.
Only the fields the summarizer reads are stored.
"""

from typing import Any, Dict, Optional

from common.cache import get_cache, remove_cache, set_cache

CACHE_TYPE = "article"
CACHE_TTL_DAYS = 180

STORED_FIELDS = ("url", "title", "text_content", "metadata", "fetch_method")


def get_cached(url: str) -> Optional[Dict[str, Any]]:
    """Cached content for a URL, or None when missing, expired or without text."""
    entry = get_cache(url, CACHE_TYPE, max_age_days=CACHE_TTL_DAYS)
    if not isinstance(entry, dict) or not entry.get("text_content"):
        return None
    return entry


def set_cached(url: str, data: Dict[str, Any]) -> None:
    set_cache(url, {k: data[k] for k in STORED_FIELDS if k in data}, CACHE_TYPE, ttl_days=CACHE_TTL_DAYS)


def remove_cached(url: str) -> None:
    remove_cache(url, CACHE_TYPE)
