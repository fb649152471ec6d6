"""Display and formatting utilities."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

console = Console(highlight=False)


def mask_key(api_key: str) -> str:
    """Mask an API key for display, keeping only the last 4 characters."""
    if not api_key:
        return ""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{'*' * 8}{api_key[-4:]}"


def render_summary(summary: str | None, title: str = "Summary", subtitle: str | None = None) -> None:
    """Render a summary string as a Rich panel."""
    if summary:
        console.print()
        console.print(Panel(Markdown(summary), title=title, subtitle=subtitle, border_style="green"))
    else:
        console.print("[red]Failed to generate summary[/red]")


def render_providers(providers) -> None:
    """Render the active provider catalog as a table (keys masked)."""
    if not providers:
        console.print("[yellow]No providers configured (set GROQ_API_KEY_PRIMARY, CEREBRAS_API_KEY, ...)[/yellow]")
        return

    table = Table(title="Active providers", title_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Model")
    table.add_column("Base URL", style="dim")
    table.add_column("Max chars", justify="right")
    table.add_column("Max chunks", justify="right")
    table.add_column("Delay", justify="right")
    table.add_column("Key", style="dim")

    for i, provider in enumerate(providers, 1):
        table.add_row(
            str(i),
            provider.name,
            provider.model,
            provider.base_url,
            f"{provider.max_content_chars:,}",
            str(provider.max_chunks),
            f"{provider.inter_chunk_delay_ms}ms",
            mask_key(provider.api_key),
        )
    console.print(table)
