#!/usr/bin/env python3
"""
Summarize web novel chapters with LLM providers (Groq, Cerebras, OpenAI-compatible).

Usage:
    python summarize.py https://example.com/novel/chapter-12            # detailed summary
    python summarize.py https://example.com/novel/chapter-12 -t short   # 3-5 bullet points
    python summarize.py chapter.txt -t very_detailed                    # local text file
    cat chapter.txt | python summarize.py - --json                      # stdin, JSON output
    python summarize.py --providers                                     # list configured providers

Configure provider keys in .env (GROQ_API_KEY_PRIMARY, CEREBRAS_API_KEY,
GROQ_API_KEY_FALLBACK, OPENAI_API_KEY). Providers are tried in that order.
"""

import sys

from summarizer.cli import main

if __name__ == "__main__":
    sys.exit(main())
