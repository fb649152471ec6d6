"""Persistence for finished summaries.

Entries are keyed by source URL and summary type and hold the summary text plus
the metadata needed to show where it came from.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from common.cache import get_cache, remove_cache, set_cache
from .prompts import SummaryType

CACHE_TYPE = "summary"
CACHE_TTL_DAYS = 30


def cache_key(url: str, summary_type: str | SummaryType) -> str:
    return f"{SummaryType.parse(summary_type).value}:{url}"


def get_cached(url: str, summary_type: str | SummaryType) -> Optional[Dict[str, Any]]:
    """Get the cached summary record for a URL, or None."""
    return get_cache(cache_key(url, summary_type), CACHE_TYPE, max_age_days=CACHE_TTL_DAYS)


def set_cached(url: str, summary_type: str | SummaryType, summary: str, metadata: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Persist a summary with its metadata and return the stored record."""
    record = {
        "url": url,
        "summary_type": SummaryType.parse(summary_type).value,
        "summary": summary,
        "created_at": datetime.now().isoformat(timespec="seconds"),
    }
    if metadata:
        record.update({k: v for k, v in metadata.items() if k not in record})
    set_cache(cache_key(url, summary_type), record, CACHE_TYPE, ttl_days=CACHE_TTL_DAYS)
    return record


def remove_cached(url: str, summary_type: str | SummaryType) -> None:
    """Remove a cached summary so the next run regenerates it."""
    remove_cache(cache_key(url, summary_type), CACHE_TYPE)
