"""Command-line front end: fetch a chapter and print its summary."""

import argparse
import json
import sys

from common.display import console, render_providers, render_summary
from common.fetcher_utils import ContentFetchError, is_http_url
from .article_fetcher import load_text_file
from .config import get_provider_catalog
from .errors import SummaryError
from .prompts import SummaryType, describe
from .summary_llm import summarize_content, summarize_url


def summarize_and_display(
    source: str,
    summary_type: str = SummaryType.DETAILED.value,
    verbose: int = 0,
    force: bool = False,
    json_output: bool = False,
    downgrade: bool = True,
) -> int:
    """Summarize a URL, a local file, or stdin ("-") and display the result.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    try:
        if source == "-":
            content_data = {"url": "", "title": None, "text_content": sys.stdin.read(), "fetch_method": "stdin"}
            record = summarize_content(content_data, summary_type, verbose=verbose, force=force, downgrade=downgrade)
        elif is_http_url(source):
            record = summarize_url(source, summary_type, verbose=verbose, force=force, downgrade=downgrade)
        else:
            content_data = load_text_file(source)
            record = summarize_content(content_data, summary_type, verbose=verbose, force=force, downgrade=downgrade)
    except ContentFetchError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except SummaryError as e:
        console.print(f"[red]Failed to generate summary: {e}[/red]")
        if verbose >= 1:
            for provider_name, error in e.attempts:
                console.print(f"[dim]  {provider_name}: {error}[/dim]")
        return 1

    if json_output:
        data = {key: record.get(key) for key in ("url", "title", "summary_type", "provider", "chunks", "reduced", "summary")}
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return 0

    subtitle_parts = [record.get("provider") or "?"]
    if record.get("chunks"):
        subtitle_parts.append(f"{record['chunks']} chunks")
    if record.get("reduced"):
        subtitle_parts.append("reduced")
    if record.get("_cached"):
        subtitle_parts.append("cached")
    render_summary(
        record.get("summary"),
        title=record.get("title") or describe(record.get("summary_type", summary_type)),
        subtitle=" · ".join(subtitle_parts),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser for the summarizer CLI."""
    parser = argparse.ArgumentParser(
        description="Summarize web novel chapters with OpenAI-compatible LLM providers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Providers are read from the environment (.env is loaded):\n"
            "  GROQ_API_KEY_PRIMARY, CEREBRAS_API_KEY, GROQ_API_KEY_FALLBACK, OPENAI_API_KEY"
        ),
    )
    parser.add_argument("source", nargs="?", help="URL, path to a text file, or - for stdin")
    parser.add_argument(
        "--type", "-t",
        dest="summary_type",
        choices=[t.value for t in SummaryType],
        default=SummaryType.DETAILED.value,
        help="Summary granularity (default: detailed)",
    )
    parser.add_argument("--force", "-f", action="store_true", help="Bypass caches")
    parser.add_argument("--json", dest="json_output", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--no-downgrade",
        dest="downgrade",
        action="store_false",
        help="Don't retry as a short summary when the provider rejects the payload size",
    )
    parser.add_argument("--providers", action="store_true", help="List configured providers and exit")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the summarizer CLI."""
    from dotenv import load_dotenv
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.providers:
            render_providers(get_provider_catalog().active_providers())
            return 0
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 1

    if not args.source:
        parser.error("a URL, file path, or - is required")

    try:
        return summarize_and_display(
            args.source,
            summary_type=args.summary_type,
            verbose=args.verbose,
            force=args.force,
            json_output=args.json_output,
            downgrade=args.downgrade,
        )
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        return 130
