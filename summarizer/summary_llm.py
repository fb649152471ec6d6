"""Caller-side summary entry points: validate, check cache, generate, persist."""

import threading
from typing import Any, Dict

from common.display import console
from common.fetcher_utils import ContentFetchError
from . import summary_cache
from .article_fetcher import fetch_article_content
from .config import get_provider_catalog, get_request_timeout
from .errors import ContentTooShortError, PayloadTooLargeError
from .llm import CompletionClient
from .orchestrator import SummaryOrchestrator, SummaryResult
from .prompts import SummaryType, describe

# Pages with less text than this are navigation stubs, paywalls or errors
MIN_CONTENT_CHARS = 100


def build_orchestrator(verbose: int = 0) -> SummaryOrchestrator:
    """Orchestrator over the providers configured in the environment."""
    client = CompletionClient(timeout=get_request_timeout(), verbose=verbose)
    return SummaryOrchestrator(get_provider_catalog(), client=client, verbose=verbose)


def summarize_text(
    text: str,
    summary_type: str | SummaryType = SummaryType.DETAILED,
    orchestrator: SummaryOrchestrator | None = None,
    verbose: int = 0,
    cancel_event: threading.Event | None = None,
    downgrade: bool = True,
) -> SummaryResult:
    """Summarize extracted text.

    With downgrade enabled, a request that ends in HTTP 413 is retried once as a
    short summary.

    Raises:
        ContentTooShortError: Text has fewer than MIN_CONTENT_CHARS characters
        SummaryError: Generation failed
    """
    text = (text or "").strip()
    if len(text) < MIN_CONTENT_CHARS:
        raise ContentTooShortError(len(text), MIN_CONTENT_CHARS)

    summary_type = SummaryType.parse(summary_type)
    orchestrator = orchestrator or build_orchestrator(verbose)

    try:
        return orchestrator.generate(text, summary_type, cancel_event=cancel_event)
    except PayloadTooLargeError:
        if not downgrade or summary_type is SummaryType.SHORT:
            raise
        console.print("[yellow]Content too long! Switching to SHORT summary to handle large content...[/yellow]")
        return orchestrator.generate(text, SummaryType.SHORT, cancel_event=cancel_event)


def summarize_content(
    content_data: dict,
    summary_type: str | SummaryType = SummaryType.DETAILED,
    verbose: int = 0,
    force: bool = False,
    orchestrator: SummaryOrchestrator | None = None,
    downgrade: bool = True,
) -> Dict[str, Any]:
    """Summarize pre-fetched content and persist the result.

    Args:
        content_data: Dict with at least "text_content"; "url" and "title" are stored
            alongside the summary
        summary_type: Requested granularity
        verbose: Verbosity level
        force: Drop any cached summary and regenerate
        orchestrator: Custom orchestrator (default: providers from the environment)
        downgrade: Retry as a short summary after HTTP 413

    Returns:
        Stored summary record: url, summary_type, summary, provider, chunks,
        reduced, title, content_chars, created_at. "_cached" is True for cache hits.
    """
    summary_type = SummaryType.parse(summary_type)
    url = content_data.get("url") or ""

    if url and force:
        summary_cache.remove_cached(url, summary_type)
    elif url:
        cached = summary_cache.get_cached(url, summary_type)
        if cached:
            if verbose:
                console.print("[dim]Using cached summary[/dim]")
            return {**cached, "_cached": True}

    text = content_data.get("text_content") or ""
    if verbose >= 1:
        console.print(f"\n[dim]Generating {describe(summary_type).lower()}...[/dim]")

    result = summarize_text(
        text, summary_type, orchestrator=orchestrator, verbose=verbose, downgrade=downgrade,
    )

    metadata = {
        "provider": result.provider,
        "chunks": result.chunks,
        "reduced": result.reduced,
        "title": content_data.get("title"),
        "content_chars": len(text.strip()),
    }
    if not url:
        return {"url": "", "summary_type": result.summary_type.value, "summary": result.text, **metadata}

    # Stored under the granularity actually produced (a 413 downgrade yields "short")
    return summary_cache.set_cached(url, result.summary_type, result.text, metadata)


def summarize_url(
    url: str,
    summary_type: str | SummaryType = SummaryType.DETAILED,
    verbose: int = 0,
    force: bool = False,
    orchestrator: SummaryOrchestrator | None = None,
    downgrade: bool = True,
) -> Dict[str, Any]:
    """Fetch a page and summarize it (standalone entry point).

    Raises:
        ContentFetchError: The page could not be fetched or had no readable text
        SummaryError: Validation or generation failed
    """
    summary_type = SummaryType.parse(summary_type)
    if not force:
        cached = summary_cache.get_cached(url, summary_type)
        if cached:
            if verbose:
                console.print("[dim]Using cached summary[/dim]")
            return {**cached, "_cached": True}

    content_data = fetch_article_content(url, verbose=verbose, force=force)
    if not content_data:
        raise ContentFetchError(f"Failed to fetch content from {url}")

    return summarize_content(
        content_data, summary_type, verbose=verbose, force=force,
        orchestrator=orchestrator, downgrade=downgrade,
    )
