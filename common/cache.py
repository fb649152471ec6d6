"""JSON file store for fetched chapters and generated summaries.

Each cache type lives in its own file under the cache directory
(``cache/article.json``, ``cache/summary.json``). Entries written with a TTL are
stored as ``{"timestamp": ..., "value": ...}`` and dropped on read once expired.
"""

import json
import os
import tempfile
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

DEFAULT_CACHE_DIR = "cache"

# Read-modify-write of a cache file must not interleave between threads
_lock = threading.RLock()


def get_cache_dir() -> Path:
    """Cache directory, overridable with SUMMARY_CACHE_DIR."""
    return Path(os.environ.get("SUMMARY_CACHE_DIR", DEFAULT_CACHE_DIR))


def _cache_path(cache_type: str) -> Path:
    return get_cache_dir() / f"{cache_type}.json"


def _read(cache_type: str) -> dict:
    """Whole cache file as a dict; a missing or corrupt file reads as empty."""
    path = _cache_path(cache_type)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def _write(cache_type: str, data: dict) -> None:
    """Replace the cache file atomically (temp file + rename)."""
    path = _cache_path(cache_type)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{cache_type}-", suffix=".json", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _is_expired(entry: Any, max_age_days: int) -> bool:
    if not isinstance(entry, dict) or "timestamp" not in entry:
        return False
    try:
        stored_at = datetime.fromisoformat(entry["timestamp"])
    except (TypeError, ValueError):
        return False
    return datetime.now() - stored_at > timedelta(days=max_age_days)


def get_cache(key: str, cache_type: str, max_age_days: Optional[int] = None) -> Optional[Any]:
    """Get a cached value.

    Args:
        key: Entry key (a URL, or "<summary type>:<url>")
        cache_type: Cache file name without extension
        max_age_days: Drop and ignore timestamped entries older than this

    Returns:
        The stored value, or None if missing or expired
    """
    with _lock:
        data = _read(cache_type)
        if key not in data:
            return None

        entry = data[key]
        if max_age_days is not None and _is_expired(entry, max_age_days):
            del data[key]
            _write(cache_type, data)
            return None

    if isinstance(entry, dict) and "timestamp" in entry and "value" in entry:
        return entry["value"]
    return entry


def set_cache(key: str, value: Any, cache_type: str, ttl_days: Optional[int] = None) -> None:
    """Store a value. With ttl_days it is wrapped with the current timestamp."""
    entry = {"timestamp": datetime.now().isoformat(), "value": value} if ttl_days is not None else value
    with _lock:
        data = _read(cache_type)
        data[key] = entry
        _write(cache_type, data)


def remove_cache(key: str, cache_type: str) -> None:
    with _lock:
        data = _read(cache_type)
        if key in data:
            del data[key]
            _write(cache_type, data)
