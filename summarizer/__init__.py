"""Resilient chapter summarization over OpenAI-compatible LLM providers."""

from .orchestrator import SummaryOrchestrator, SummaryResult
from .prompts import SummaryType
from .providers import ProviderCatalog, ProviderDescriptor
from .summary_llm import summarize_content, summarize_text, summarize_url

__all__ = [
    "ProviderCatalog",
    "ProviderDescriptor",
    "SummaryOrchestrator",
    "SummaryResult",
    "SummaryType",
    "summarize_content",
    "summarize_text",
    "summarize_url",
]
