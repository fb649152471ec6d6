"""Provider configuration from environment variables.

Keys and limits are read from the process environment; the CLI loads a local .env
first. Providers are listed in trial priority and any provider without a key is
left out of the catalog.
"""

import os

from .providers import ProviderCatalog, ProviderDescriptor

GROQ_BASE_URL = "https://api.groq.com/openai/v1/"
CEREBRAS_BASE_URL = "https://api.cerebras.ai/v1/"
OPENAI_BASE_URL = "https://api.openai.com/v1/"

DEFAULT_TIMEOUT_S = 90.0


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable.

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip().replace("_", ""))
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    return value or default


def load_provider_descriptors() -> list[ProviderDescriptor]:
    """Build provider descriptors from the environment, in trial priority.

    Descriptors are returned even when their key is blank; ProviderCatalog drops them.
    """
    groq_base_url = _env_str("GROQ_BASE_URL", GROQ_BASE_URL)

    return [
        ProviderDescriptor(
            name="Groq Primary (70B)",
            api_key=os.environ.get("GROQ_API_KEY_PRIMARY", ""),
            model=_env_str("GROQ_MODEL_PRIMARY", "llama-3.3-70b-versatile"),
            base_url=groq_base_url,
            max_content_chars=_env_int("MAX_CONTENT_PRIMARY", 450_000),
            max_chunks=_env_int("MAX_CHUNKS_PRIMARY", 3),
            inter_chunk_delay_ms=_env_int("CHUNK_DELAY_MS_PRIMARY", 3000),
        ),
        ProviderDescriptor(
            name="Cerebras",
            api_key=os.environ.get("CEREBRAS_API_KEY", ""),
            model=_env_str("CEREBRAS_MODEL", "llama-3.3-70b"),
            base_url=_env_str("CEREBRAS_BASE_URL", CEREBRAS_BASE_URL),
            max_content_chars=_env_int("MAX_CONTENT_CEREBRAS", 240_000),
            max_chunks=_env_int("MAX_CHUNKS_CEREBRAS", 6),
            inter_chunk_delay_ms=_env_int("CHUNK_DELAY_MS_CEREBRAS", 500),
        ),
        ProviderDescriptor(
            name="Groq Fallback (8B)",
            api_key=os.environ.get("GROQ_API_KEY_FALLBACK", ""),
            model=_env_str("GROQ_MODEL_FALLBACK", "llama-3.1-8b-instant"),
            base_url=groq_base_url,
            max_content_chars=_env_int("MAX_CONTENT_FALLBACK", 450_000),
            max_chunks=_env_int("MAX_CHUNKS_FALLBACK", 4),
            inter_chunk_delay_ms=_env_int("CHUNK_DELAY_MS_FALLBACK", 3000),
        ),
        ProviderDescriptor(
            name="OpenAI-compatible",
            api_key=os.environ.get("OPENAI_API_KEY", ""),
            model=_env_str("OPENAI_MODEL", "gpt-4o-mini"),
            base_url=_env_str("OPENAI_BASE_URL", OPENAI_BASE_URL),
            max_content_chars=_env_int("MAX_CONTENT_OPENAI", 100_000),
            max_chunks=_env_int("MAX_CHUNKS_OPENAI", 5),
            inter_chunk_delay_ms=_env_int("CHUNK_DELAY_MS_OPENAI", 1000),
        ),
    ]


def get_provider_catalog() -> ProviderCatalog:
    """Catalog of providers that have an API key set."""
    return ProviderCatalog(load_provider_descriptors())


def get_request_timeout() -> float:
    """Read timeout for completion calls, in seconds (SUMMARY_TIMEOUT_S)."""
    raw = os.environ.get("SUMMARY_TIMEOUT_S")
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"SUMMARY_TIMEOUT_S must be a number, got {raw!r}") from None
