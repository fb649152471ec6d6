"""Failure taxonomy for summary generation.

Everything raised by the engine derives from SummaryError, so callers can catch a
single class. Per-call failures from the completion client derive from
CompletionError and carry the name of the provider that produced them.
"""


class SummaryError(Exception):
    """Base exception for summary generation failures.

    Attributes:
        message: Human-readable error description
        provider: Name of the provider the failure belongs to, if any
        attempts: (provider_name, error) pairs for every provider that failed
            before this error was surfaced
    """

    def __init__(self, message: str, *, provider: str | None = None):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.attempts: list[tuple[str, Exception]] = []

    def __str__(self) -> str:
        return self.message


class NoProviderConfiguredError(SummaryError):
    """Raised when no provider has an API key configured."""

    def __init__(self, message: str = "No API keys configured"):
        super().__init__(message)


class EmptyContentError(SummaryError, ValueError):
    """Raised when there is nothing to summarize."""

    def __init__(self, message: str = "Content is empty"):
        super().__init__(message)


class ContentTooShortError(SummaryError, ValueError):
    """Raised by caller-side entry points when extracted text is below the minimum length."""

    def __init__(self, length: int, minimum: int):
        super().__init__(f"No content to summarize ({length} chars, need at least {minimum})")
        self.length = length
        self.minimum = minimum


class AllProvidersFailedError(SummaryError):
    """Raised when every configured provider failed."""

    def __init__(self, message: str = "All providers failed"):
        super().__init__(message)


class SummaryCancelledError(SummaryError):
    """Raised at the next suspension point after cancellation was requested."""

    def __init__(self, message: str = "Summary generation cancelled"):
        super().__init__(message)


class RetriesExhaustedError(SummaryError):
    """Raised when a provider kept answering with 5xx after every allowed attempt."""

    def __init__(self, provider: str, attempts: int, status_code: int | None = None):
        super().__init__(f"{provider} server error after {attempts} retries", provider=provider)
        self.status_code = status_code


class CompletionError(SummaryError):
    """Base exception for a single classified chat-completion failure."""
    pass


class AuthFailureError(CompletionError):
    """HTTP 401/403: the provider rejected the credentials."""

    def __init__(self, provider: str, status_code: int):
        super().__init__(f"{provider} auth failed ({status_code})", provider=provider)
        self.status_code = status_code


class PayloadTooLargeError(CompletionError):
    """HTTP 413: the request body exceeds what the provider accepts."""

    def __init__(self, provider: str):
        super().__init__(f"413: payload too large for {provider}", provider=provider)
        self.status_code = 413


class RateLimitedError(CompletionError):
    """HTTP 429. `exhausted` is set once the retry policy gave up on it."""

    def __init__(self, provider: str, *, exhausted: bool = False, attempts: int | None = None):
        if exhausted:
            message = f"{provider} rate limited after {attempts} retries"
        else:
            message = f"{provider} rate limited (429)"
        super().__init__(message, provider=provider)
        self.status_code = 429
        self.exhausted = exhausted


class ServerError(CompletionError):
    """HTTP 5xx from the provider."""

    def __init__(self, provider: str, status_code: int):
        super().__init__(f"{provider} server error (HTTP {status_code})", provider=provider)
        self.status_code = status_code


class HttpStatusError(CompletionError):
    """Any other non-success HTTP status."""

    def __init__(self, provider: str, status_code: int):
        super().__init__(f"{provider} HTTP {status_code}", provider=provider)
        self.status_code = status_code


class TransportError(CompletionError):
    """Connection failure or timeout before a response arrived."""

    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider} network error: {reason}", provider=provider)


class EmptyResponseError(CompletionError):
    """The provider answered but choices[0].message.content was missing or blank."""

    def __init__(self, provider: str):
        super().__init__(f"Empty response from {provider}", provider=provider)


def is_provider_specific(error: BaseException | None) -> bool:
    """True for failures tied to the provider account (auth, rate limit), not the document."""
    return isinstance(error, (AuthFailureError, RateLimitedError))
