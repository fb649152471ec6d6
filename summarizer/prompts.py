"""Summary granularities, prompt templates and output token budgets."""

from enum import Enum
from functools import lru_cache
from pathlib import Path

PROMPT_DIR = Path(__file__).parent / "prompts"

SYSTEM_PROMPT = "You are a helpful assistant that summarizes webnovel chapters concisely and accurately."

LARGE_SOURCE_CHARS = 100_000
LARGE_SOURCE_TOKEN_BOOST = 1.5
MAX_OUTPUT_TOKENS_CEILING = 4096


class SummaryType(str, Enum):
    SHORT = "short"
    DETAILED = "detailed"
    VERY_DETAILED = "very_detailed"

    @classmethod
    def parse(cls, value: "str | SummaryType") -> "SummaryType":
        """Parse a summary type name, accepting 'very-detailed' as well."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace("-", "_"))
        except ValueError:
            choices = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown summary type {value!r} (expected one of: {choices})") from None


BASE_OUTPUT_TOKENS = {
    SummaryType.SHORT: 800,
    SummaryType.DETAILED: 2000,
    SummaryType.VERY_DETAILED: 4000,
}

DESCRIPTIONS = {
    SummaryType.SHORT: "Short Summary (Key events only)",
    SummaryType.DETAILED: "Detailed Summary (Full narrative)",
    SummaryType.VERY_DETAILED: "Very Detailed Summary (Complete reading experience)",
}


@lru_cache(maxsize=None)
def load_prompt(summary_type: SummaryType) -> str:
    """Load the prompt template for a summary type from the prompts directory."""
    path = PROMPT_DIR / f"{summary_type.value}.md"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return path.read_text(encoding="utf-8").strip()


def _coerce(summary_type: "str | SummaryType") -> SummaryType:
    # Unrecognized names fall back to the detailed prompt
    try:
        return SummaryType.parse(summary_type)
    except ValueError:
        return SummaryType.DETAILED


def build_prompt(summary_type: "str | SummaryType", content: str, chunk_info: str | None = None) -> str:
    """Render the user prompt, optionally tagged with positional info like 'Part 2 of 3'."""
    template = load_prompt(_coerce(summary_type))
    prompt = template.replace("{content}", content)
    if chunk_info:
        return f"[{chunk_info}]\n\n{prompt}"
    return prompt


def max_output_tokens(summary_type: "str | SummaryType", source_chars: int) -> int:
    """Output token budget; long sources get 50% more, capped at 4096."""
    base = BASE_OUTPUT_TOKENS[_coerce(summary_type)]
    if source_chars > LARGE_SOURCE_CHARS:
        return min(int(base * LARGE_SOURCE_TOKEN_BOOST), MAX_OUTPUT_TOKENS_CEILING)
    return base


def describe(summary_type: "str | SummaryType") -> str:
    try:
        return DESCRIPTIONS[SummaryType.parse(summary_type)]
    except ValueError:
        return "Summary"


def estimate_tokens(text: str) -> int:
    """Rough token estimate: 1 token ≈ 4 characters of English text."""
    return round(len(text) / 4)
