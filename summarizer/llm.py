"""Chat-completion client for OpenAI-compatible providers.

One call, one network round trip. Failures are classified into the exceptions in
errors.py; retrying is left to the orchestrator, so the SDK's own retries are off.
"""

import logging
import threading

import httpx
import openai
from openai import OpenAI
from openai.types.chat import ChatCompletionSystemMessageParam, ChatCompletionUserMessageParam

from common.display import console
from .errors import (
    AuthFailureError,
    EmptyResponseError,
    HttpStatusError,
    PayloadTooLargeError,
    RateLimitedError,
    ServerError,
    TransportError,
)
from .providers import ProviderDescriptor

# Request logging from the SDK's transport is too chatty for the console
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)

TEMPERATURE = 0.7
TOP_P = 1.0
CONNECT_TIMEOUT_S = 30.0
WRITE_TIMEOUT_S = 60.0


def classify_status(provider_name: str, status_code: int):
    """Map an HTTP error status to the matching completion error."""
    if status_code in (401, 403):
        return AuthFailureError(provider_name, status_code)
    if status_code == 413:
        return PayloadTooLargeError(provider_name)
    if status_code == 429:
        return RateLimitedError(provider_name)
    if 500 <= status_code <= 599:
        return ServerError(provider_name, status_code)
    return HttpStatusError(provider_name, status_code)


class CompletionClient:
    """Performs single chat-completion calls against a provider.

    SDK clients are created lazily and reused per (base_url, api_key); the openai
    client is safe to share between threads.
    """

    def __init__(self, timeout: float = 90.0, verbose: int = 0):
        self.timeout = httpx.Timeout(timeout, connect=CONNECT_TIMEOUT_S, write=WRITE_TIMEOUT_S)
        self.verbose = verbose
        self._clients: dict[tuple[str, str], OpenAI] = {}
        self._lock = threading.Lock()

    def _client_for(self, provider: ProviderDescriptor) -> OpenAI:
        key = (provider.base_url, provider.api_key)
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                client = OpenAI(
                    api_key=provider.api_key,
                    base_url=provider.base_url,
                    timeout=self.timeout,
                    max_retries=0,
                )
                self._clients[key] = client
            return client

    def complete(
        self,
        provider: ProviderDescriptor,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
    ) -> str:
        """Send one chat-completion request and return the stripped reply text.

        Args:
            provider: Backend to call
            system_prompt: System message content
            user_prompt: User message content (the rendered summary prompt)
            max_tokens: Output token budget

        Returns:
            Reply text, never blank

        Raises:
            ValueError: If the API key is blank or the prompt is empty
            CompletionError: Classified failure (auth, 413, 429, 5xx, transport, empty reply)
        """
        if not provider.api_key or not provider.api_key.strip():
            raise ValueError("API key is blank")
        if not user_prompt:
            raise ValueError("Content is empty")

        system_message: ChatCompletionSystemMessageParam = {"role": "system", "content": system_prompt}
        user_message: ChatCompletionUserMessageParam = {"role": "user", "content": user_prompt}

        if self.verbose >= 2:
            console.print(
                f"[dim]    → {provider.name} ({provider.model}): {len(user_prompt):,} chars, "
                f"max_tokens={max_tokens}[/dim]"
            )

        client = self._client_for(provider)
        try:
            response = client.chat.completions.create(
                model=provider.model,
                messages=[system_message, user_message],
                temperature=TEMPERATURE,
                max_tokens=max_tokens,
                top_p=TOP_P,
            )
        except openai.APIStatusError as e:
            if self.verbose >= 2:
                console.print(f"[dim]    ✗ {provider.name} HTTP {e.status_code}: {e.message}[/dim]")
            raise classify_status(provider.name, e.status_code) from e
        except openai.APITimeoutError as e:
            raise TransportError(provider.name, "request timed out") from e
        except openai.APIConnectionError as e:
            raise TransportError(provider.name, str(e) or "connection failed") from e
        except (openai.APIError, ValueError) as e:
            # Malformed replies, e.g. a gateway answering 200 with an HTML page
            raise TransportError(provider.name, str(e) or type(e).__name__) from e

        summary = None
        if response.choices:
            summary = response.choices[0].message.content

        if not summary or not summary.strip():
            if self.verbose >= 1:
                console.print(f"[yellow]  Empty response from {provider.name} (id={getattr(response, 'id', None)})[/yellow]")
            raise EmptyResponseError(provider.name)

        if self.verbose >= 2:
            usage = getattr(response, "usage", None)
            tokens = f", {usage.total_tokens:,} tokens" if usage else ""
            console.print(f"[dim]    ✓ {provider.name}: {len(summary):,} chars{tokens}[/dim]")

        return summary.strip()
