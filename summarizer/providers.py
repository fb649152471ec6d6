"""Provider descriptors and the ordered catalog of configured backends."""

from dataclasses import dataclass
from typing import Iterable, Iterator

DEFAULT_MAX_CHUNKS = 5
DEFAULT_CHUNK_DELAY_MS = 1000


@dataclass(frozen=True)
class ProviderDescriptor:
    """One OpenAI-compatible chat-completion backend and its limits.

    Attributes:
        name: Display name, used in logs and error messages
        api_key: Bearer token; blank keys never make it into a catalog
        model: Model identifier sent with every request
        base_url: API root, e.g. https://api.groq.com/openai/v1/
        max_content_chars: Largest input sent in a single call
        max_chunks: Largest number of chunks processed for one document
        inter_chunk_delay_ms: Pause between successive calls within one document
    """

    name: str
    api_key: str
    model: str
    base_url: str
    max_content_chars: int
    max_chunks: int = DEFAULT_MAX_CHUNKS
    inter_chunk_delay_ms: int = DEFAULT_CHUNK_DELAY_MS

    def __post_init__(self):
        if self.max_content_chars < 1:
            raise ValueError(f"{self.name}: max_content_chars must be positive")
        if self.max_chunks < 1:
            raise ValueError(f"{self.name}: max_chunks must be positive")
        if self.inter_chunk_delay_ms < 0:
            raise ValueError(f"{self.name}: inter_chunk_delay_ms cannot be negative")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def inter_chunk_delay(self) -> float:
        """Delay between chunk calls, in seconds."""
        return self.inter_chunk_delay_ms / 1000

    def __repr__(self) -> str:
        # Keep keys out of tracebacks and logs
        return (
            f"ProviderDescriptor(name={self.name!r}, model={self.model!r}, base_url={self.base_url!r}, "
            f"max_content_chars={self.max_content_chars}, max_chunks={self.max_chunks}, "
            f"inter_chunk_delay_ms={self.inter_chunk_delay_ms})"
        )


class ProviderCatalog:
    """Ordered, read-only list of providers that have credentials.

    Order is trial priority: the first provider is attempted first.
    """

    def __init__(self, descriptors: Iterable[ProviderDescriptor] = ()):
        self._providers = tuple(d for d in descriptors if d.is_configured)

    def active_providers(self) -> tuple[ProviderDescriptor, ...]:
        return self._providers

    def __iter__(self) -> Iterator[ProviderDescriptor]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __bool__(self) -> bool:
        return bool(self._providers)

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._providers)
        return f"ProviderCatalog([{names}])"
