import pytest

from fakes import SleepRecorder


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Keep every test's cache files under its own tmp directory."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setenv("SUMMARY_CACHE_DIR", str(cache_dir))
    return cache_dir


@pytest.fixture
def clean_provider_env(monkeypatch):
    """Remove provider variables the developer's shell may have set."""
    for name in (
        "GROQ_API_KEY_PRIMARY", "GROQ_API_KEY_FALLBACK", "CEREBRAS_API_KEY", "OPENAI_API_KEY",
        "GROQ_BASE_URL", "GROQ_MODEL_PRIMARY", "GROQ_MODEL_FALLBACK", "CEREBRAS_MODEL",
        "CEREBRAS_BASE_URL", "OPENAI_MODEL", "OPENAI_BASE_URL",
        "MAX_CONTENT_PRIMARY", "MAX_CONTENT_CEREBRAS", "MAX_CONTENT_FALLBACK", "MAX_CONTENT_OPENAI",
        "MAX_CHUNKS_PRIMARY", "MAX_CHUNKS_CEREBRAS", "MAX_CHUNKS_FALLBACK", "MAX_CHUNKS_OPENAI",
        "CHUNK_DELAY_MS_PRIMARY", "CHUNK_DELAY_MS_CEREBRAS", "CHUNK_DELAY_MS_FALLBACK", "CHUNK_DELAY_MS_OPENAI",
        "SUMMARY_TIMEOUT_S",
    ):
        monkeypatch.delenv(name, raising=False)
