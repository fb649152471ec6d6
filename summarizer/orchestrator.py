"""Summary generation across providers with chunking, retries and fallback.

Providers are tried one after another in catalog order. A document that fits a
provider's ceiling goes out in a single call; a larger one is split into chunks,
each chunk is summarized with the detailed prompt, and the chunk summaries are
combined with the prompt the caller asked for. Calls within one document are
spaced by the provider's inter-chunk delay.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from common.display import console
from .chunker import Chunk, split_into_chunks
from .errors import (
    AllProvidersFailedError,
    EmptyContentError,
    NoProviderConfiguredError,
    RateLimitedError,
    RetriesExhaustedError,
    ServerError,
    SummaryCancelledError,
    SummaryError,
    is_provider_specific,
)
from .llm import CompletionClient
from .prompts import SYSTEM_PROMPT, SummaryType, build_prompt, estimate_tokens, max_output_tokens
from .providers import ProviderCatalog, ProviderDescriptor
from .reducer import REDUCTION_MARKER, reduce_content

MAX_ATTEMPTS = 3
RATE_LIMIT_BACKOFF_S = 2.0
SERVER_ERROR_BACKOFF_S = 1.0
# Share of max_content_chars left for the prompt template around a chunk
CHUNK_SIZE_RATIO = 0.85
CHUNK_SEPARATOR = "\n\n---\n\n"
COMBINE_LABEL = "Final combined summary"


@dataclass(frozen=True)
class SummaryResult:
    """A finished summary and where it came from."""

    text: str
    provider: str
    summary_type: SummaryType
    chunks: int = 0
    reduced: bool = False


class SummaryOrchestrator:
    """Generate one summary per call, walking the provider catalog until one succeeds.

    Args:
        catalog: Providers in trial priority
        client: Completion client (a default CompletionClient if omitted)
        sleep: Blocking sleep used for backoff and chunk spacing when no
            cancel_event is given; tests inject a recorder
        verbose: Verbosity level (0=quiet, 1=progress, 2=request details)
    """

    def __init__(
        self,
        catalog: ProviderCatalog,
        client: CompletionClient | None = None,
        sleep: Callable[[float], None] | None = None,
        verbose: int = 0,
    ):
        self.catalog = catalog
        self.client = client or CompletionClient(verbose=verbose)
        self._sleep = sleep or time.sleep
        self.verbose = verbose

    def generate(
        self,
        content: str,
        summary_type: str | SummaryType = SummaryType.DETAILED,
        cancel_event: threading.Event | None = None,
    ) -> SummaryResult:
        """Summarize content with the first provider that succeeds.

        Args:
            content: Extracted plain text
            summary_type: Requested granularity
            cancel_event: Set it from another thread to abort at the next wait or call

        Returns:
            SummaryResult with non-empty text

        Raises:
            EmptyContentError: content is empty or whitespace only
            NoProviderConfiguredError: the catalog is empty
            SummaryCancelledError: cancel_event was set
            SummaryError: the last provider's failure, with every provider's failure
                listed in `attempts`
        """
        summary_type = SummaryType.parse(summary_type)
        if not content or not content.strip():
            raise EmptyContentError()

        providers = self.catalog.active_providers()
        if not providers:
            raise NoProviderConfiguredError()

        if self.verbose >= 1:
            console.print(
                f"[dim]Generating {summary_type.value} summary with {len(providers)} provider(s), "
                f"{len(content):,} chars (~{estimate_tokens(content):,} tokens)[/dim]"
            )

        attempts: list[tuple[str, Exception]] = []
        for index, provider in enumerate(providers):
            is_last = index == len(providers) - 1
            if self.verbose >= 1:
                console.print(f"[dim]Provider {index + 1}/{len(providers)}: {provider.name}[/dim]")

            try:
                if len(content) <= provider.max_content_chars:
                    if self.verbose >= 1:
                        console.print(
                            f"[dim]  Content fits in a single request "
                            f"({len(content):,} <= {provider.max_content_chars:,})[/dim]"
                        )
                    result = self._single_summary(provider, content, summary_type, cancel_event)
                else:
                    if self.verbose >= 1:
                        console.print("[dim]  Content too large, using chunking strategy[/dim]")
                    result = self._chunked_summary(provider, content, summary_type, cancel_event)
            except SummaryCancelledError:
                raise
            except SummaryError as e:
                attempts.append((provider.name, e))
                if is_last:
                    e.attempts = list(attempts)
                    raise
                if is_provider_specific(e):
                    console.print(f"[yellow]{provider.name} failed: {e}, trying next provider[/yellow]")
                else:
                    console.print(f"[yellow]{provider.name} failed: {e}, falling back to next provider[/yellow]")
                continue

            if self.verbose >= 1:
                console.print(f"[green]✓ Success with {provider.name}[/green]")
            return result

        error = AllProvidersFailedError()
        error.attempts = attempts
        raise error

    def _single_summary(
        self,
        provider: ProviderDescriptor,
        content: str,
        summary_type: SummaryType,
        cancel_event: threading.Event | None,
    ) -> SummaryResult:
        text = self._complete_with_retry(provider, content, summary_type, None, cancel_event)
        return SummaryResult(text=text, provider=provider.name, summary_type=summary_type)

    def _chunked_summary(
        self,
        provider: ProviderDescriptor,
        content: str,
        summary_type: SummaryType,
        cancel_event: threading.Event | None,
    ) -> SummaryResult:
        """Split, summarize every chunk, then combine. Reduces the document once if needed."""
        chunk_size = max(math.floor(provider.max_content_chars * CHUNK_SIZE_RATIO), 1)
        chunks = split_into_chunks(content, chunk_size)
        reduced = False

        if self.verbose >= 1:
            console.print(f"[dim]  Split into {len(chunks)} chunks (max {provider.max_chunks} allowed)[/dim]")

        if len(chunks) > provider.max_chunks:
            budget = chunk_size * provider.max_chunks
            console.print(
                f"[yellow]  Too many chunks ({len(chunks)}), reducing content "
                f"from {len(content):,} to ~{budget:,} chars[/yellow]"
            )
            if budget > len(REDUCTION_MARKER):
                reduced_content = reduce_content(content, budget - len(REDUCTION_MARKER))
            else:
                # No room for the marker
                reduced_content = content.strip()[:budget]
            chunks = split_into_chunks(reduced_content, chunk_size)
            if len(chunks) > provider.max_chunks:
                chunks = split_into_chunks(reduced_content, chunk_size, boundaries=False)
            reduced = True

        summaries = self._summarize_chunks(provider, chunks, cancel_event)

        if self.verbose >= 1:
            console.print(f"[dim]  Combining {len(summaries)} chunk summaries[/dim]")
        combined = CHUNK_SEPARATOR.join(summaries)

        self._wait(provider.inter_chunk_delay, cancel_event)
        text = self._complete_with_retry(provider, combined, summary_type, COMBINE_LABEL, cancel_event)
        return SummaryResult(
            text=text,
            provider=provider.name,
            summary_type=summary_type,
            chunks=len(chunks),
            reduced=reduced,
        )

    def _summarize_chunks(
        self,
        provider: ProviderDescriptor,
        chunks: list[Chunk],
        cancel_event: threading.Event | None,
    ) -> list[str]:
        """Summarize chunks in order with the detailed prompt. The first failure aborts."""
        summaries = []
        for chunk in chunks:
            if self.verbose >= 1:
                console.print(f"[dim]  Processing chunk {chunk.index}/{chunk.total} ({len(chunk):,} chars)[/dim]")
            try:
                summary = self._complete_with_retry(
                    provider, chunk.text, SummaryType.DETAILED, chunk.label, cancel_event
                )
            except SummaryError as e:
                if not isinstance(e, SummaryCancelledError):
                    console.print(f"[red]  Failed to summarize chunk {chunk.index}: {e}[/red]")
                raise
            summaries.append(summary)

            if chunk.index < chunk.total:
                if self.verbose >= 2:
                    console.print(f"[dim]  Waiting {provider.inter_chunk_delay_ms}ms before next chunk...[/dim]")
                self._wait(provider.inter_chunk_delay, cancel_event)
        return summaries

    def _complete_with_retry(
        self,
        provider: ProviderDescriptor,
        content: str,
        summary_type: SummaryType,
        chunk_info: str | None,
        cancel_event: threading.Event | None,
    ) -> str:
        """One completion with up to MAX_ATTEMPTS tries.

        429 backs off 2s * attempt, 5xx backs off 1s * attempt. Every other failure
        is raised on the spot.
        """
        if not provider.api_key or not provider.api_key.strip():
            raise ValueError("API key is blank")
        if not content:
            raise ValueError("Content is empty")

        prompt = build_prompt(summary_type, content, chunk_info)
        max_tokens = max_output_tokens(summary_type, len(content))

        for attempt in range(1, MAX_ATTEMPTS + 1):
            self._check_cancelled(cancel_event)
            try:
                return self.client.complete(provider, SYSTEM_PROMPT, prompt, max_tokens)
            except RateLimitedError as e:
                if attempt >= MAX_ATTEMPTS:
                    raise RateLimitedError(provider.name, exhausted=True, attempts=MAX_ATTEMPTS) from e
                wait = RATE_LIMIT_BACKOFF_S * attempt
                if self.verbose >= 1:
                    console.print(
                        f"[yellow]  Rate limited, waiting {wait:.0f}s (attempt {attempt}/{MAX_ATTEMPTS})[/yellow]"
                    )
                self._wait(wait, cancel_event)
            except ServerError as e:
                if attempt >= MAX_ATTEMPTS:
                    raise RetriesExhaustedError(provider.name, MAX_ATTEMPTS, e.status_code) from e
                wait = SERVER_ERROR_BACKOFF_S * attempt
                if self.verbose >= 1:
                    console.print(
                        f"[yellow]  Server error (HTTP {e.status_code}), waiting {wait:.0f}s "
                        f"(attempt {attempt}/{MAX_ATTEMPTS})[/yellow]"
                    )
                self._wait(wait, cancel_event)

        raise AssertionError("unreachable: retry loop always returns or raises")

    def _wait(self, seconds: float, cancel_event: threading.Event | None) -> None:
        """Sleep, waking early and raising if the cancel event is set."""
        self._check_cancelled(cancel_event)
        if seconds <= 0:
            return
        if cancel_event is None:
            self._sleep(seconds)
            return
        if cancel_event.wait(seconds):
            raise SummaryCancelledError()

    @staticmethod
    def _check_cancelled(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise SummaryCancelledError()
