"""
Chapter/article text extraction using trafilatura.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import trafilatura
from trafilatura.downloads import DEFAULT_HEADERS

from common.display import console
from common.fetcher_utils import ContentFetchError, check_url_head, truncate_content
from . import article_cache

# Large chapters are handled by chunking; this only guards against runaway pages
ARTICLE_MAX_CHARS = 1_000_000

# Trafilatura advertises zstd but urllib3 can't decompress it, causing binary garbage.
DEFAULT_HEADERS["accept-encoding"] = "gzip,deflate,br"


def extract_article_from_html(html: str, fallback_title: str = "", verbose: int = 0) -> Optional[Dict[str, Any]]:
    """Extract readable text and metadata from downloaded HTML.

    Returns:
        Dict with "title", "text_content" and "metadata" (author, date, sitename),
        or None if no readable text was found
    """
    metadata = trafilatura.extract_metadata(html)
    text = trafilatura.extract(html, include_comments=False, favor_recall=True)

    if not text:
        if verbose:
            console.print("[dim]  ⚠ Text extraction failed (no readable content)[/dim]")
        return None

    original_length = len(text)
    text, was_truncated = truncate_content(text, ARTICLE_MAX_CHARS)
    if was_truncated:
        console.print(f"[dim]  ℹ Content truncated: {original_length:,} → {len(text):,} chars[/dim]")

    if verbose:
        console.print(f"[dim]  Extracted {len(text):,} chars of text[/dim]")

    return {
        "title": (metadata.title if metadata else None) or fallback_title or None,
        "text_content": text,
        "metadata": {
            "author": metadata.author if metadata else None,
            "date": metadata.date if metadata else None,
            "sitename": metadata.sitename if metadata else None,
        },
    }


def fetch_article_content(url: str, verbose: int = 0, force: bool = False) -> Optional[Dict[str, Any]]:
    """
    Download a page and extract its text, using the article cache.

    Args:
        url: Page URL
        verbose: Verbosity level
        force: Evict the cached copy and re-download

    Returns:
        Content dict (see extract_article_from_html) with "url" and "fetch_method",
        or None if the page could not be downloaded or had no readable text

    Raises:
        RateLimitError: The host answered with HTTP 429
    """
    if force:
        article_cache.remove_cached(url)
    else:
        cached = article_cache.get_cached(url)
        if cached:
            if verbose:
                console.print("[dim]  Using cached article content[/dim]")
            return cached

    head = check_url_head(url)
    if not head.fetchable:
        if verbose:
            console.print(f"[dim]  URL unreachable (HTTP {head.status})[/dim]")
        return None
    if not head.is_html:
        if verbose:
            console.print(f"[dim]  Non-HTML content ({head.content_type})[/dim]")
        return None

    downloaded = trafilatura.fetch_url(url)
    if not downloaded:
        return None

    if verbose:
        console.print(f"[dim]  Page downloaded ({len(downloaded):,} chars)[/dim]")

    result = extract_article_from_html(downloaded, verbose=verbose)
    if result:
        result["url"] = url
        result["fetch_method"] = "trafilatura"
        article_cache.set_cached(url, result)
    return result


def load_text_file(path: str) -> Dict[str, Any]:
    """Read a local text file into the same content dict shape as fetched pages.

    Raises:
        ContentFetchError: If the file does not exist or cannot be decoded
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ContentFetchError(f"File not found: {path}")
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentFetchError(f"Cannot read {path}: {e}") from e

    return {
        "url": file_path.resolve().as_uri(),
        "title": file_path.stem,
        "text_content": text,
        "metadata": {},
        "fetch_method": "file",
    }
