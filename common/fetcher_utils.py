"""
Helpers and exceptions shared by the page and file loaders.
"""

from dataclasses import dataclass
from typing import Tuple
from urllib.parse import urlparse

import requests

TRUNCATION_SUFFIX = " ..."

# Paragraph and sentence ends, Latin and CJK; the cut keeps the punctuation
_BOUNDARIES = ("\n\n", ". ", "! ", "? ", ".\n", "!\n", "?\n", "。", "！", "？")

_HTML_TYPES = ("text/html", "application/xhtml+xml")


class ContentFetchError(Exception):
    """Base exception for content fetching errors that should be raised to caller."""
    pass


class RateLimitError(ContentFetchError):
    """Raised when the page host answers with HTTP 429."""
    pass


@dataclass(frozen=True)
class HeadCheck:
    """Outcome of a HEAD request. status is 0 when the request itself failed."""

    status: int
    content_type: str = ""

    @property
    def fetchable(self) -> bool:
        return self.status < 400

    @property
    def is_html(self) -> bool:
        # Hosts that omit Content-Type usually serve HTML
        return not self.content_type or any(t in self.content_type for t in _HTML_TYPES)


def is_http_url(value: str) -> bool:
    """True if value looks like an http(s) URL rather than a local path."""
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def truncate_content(text: str, max_chars: int) -> Tuple[str, bool]:
    """
    Cut text to about max_chars, ending on a paragraph or sentence where possible.

    Returns:
        (text, was_truncated); truncated text ends with " ..."
    """
    if len(text) <= max_chars:
        return text, False

    head = text[:max_chars]
    cut = max((head.rfind(b) + len(b.rstrip()) for b in _BOUNDARIES if b in head), default=0)
    if cut <= max_chars // 2:
        cut = head.rfind(" ")
    if cut <= 0:
        cut = max_chars
    return head[:cut].rstrip() + TRUNCATION_SUFFIX, True


def check_url_head(url: str, timeout: int = 5) -> HeadCheck:
    """Probe a URL with HEAD before downloading it.

    Network errors give HeadCheck(status=0), which still counts as fetchable HTML.

    Raises:
        RateLimitError: The host answered with HTTP 429
    """
    try:
        resp = requests.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException:
        return HeadCheck(status=0)

    if resp.status_code == 429:
        raise RateLimitError(f"HTTP 429 from {urlparse(url).netloc}")
    return HeadCheck(resp.status_code, resp.headers.get("content-type", "").lower())
