"""
Split oversized text into ordered chunks at natural language boundaries.
"""

import math
from dataclasses import dataclass

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAKS = (". ", "! ", "? ", "。", "！", "？")
# A natural break is only used if it falls in the last 40% of the window
NATURAL_BREAK_MIN_RATIO = 0.6


@dataclass(frozen=True)
class Chunk:
    """A 1-indexed slice of the source text."""

    index: int
    total: int
    text: str

    def __len__(self) -> int:
        return len(self.text)

    @property
    def label(self) -> str:
        return f"Part {self.index} of {self.total}"


def _find_natural_break(window: str, chunk_size: int) -> int | None:
    """Return the position right after the best paragraph or sentence break in window.

    Paragraph breaks win over sentence breaks. None if neither lies beyond 60% of
    chunk_size.
    """
    min_pos = chunk_size * NATURAL_BREAK_MIN_RATIO

    pos = window.rfind(PARAGRAPH_BREAK)
    if pos > min_pos:
        return pos + len(PARAGRAPH_BREAK)

    best_pos, best_end = -1, None
    for sep in SENTENCE_BREAKS:
        pos = window.rfind(sep)
        if pos > best_pos:
            best_pos, best_end = pos, pos + len(sep)

    if best_pos > min_pos:
        return best_end
    return None


def split_into_chunks(text: str, chunk_size: int, boundaries: bool = True) -> list[Chunk]:
    """
    Split text into chunks of at most chunk_size characters.

    Breaks at the nearest paragraph break, then sentence end, inside the last 40% of
    each window, falling back to a hard cut at chunk_size. Natural breaks are skipped
    when taking them would push the total past ceil(len(text) / chunk_size) + 1.

    Args:
        text: Text to split
        chunk_size: Target (maximum) chunk length in characters
        boundaries: If False, always hard-cut at chunk_size

    Returns:
        Ordered list of non-blank chunks. Text that fits is returned as one chunk, unchanged.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    if not text.strip():
        return []

    if len(text) <= chunk_size:
        return [Chunk(index=1, total=1, text=text)]

    budget = math.ceil(len(text) / chunk_size) + 1
    pieces: list[str] = []
    remaining = text

    while remaining:
        if len(remaining) <= chunk_size:
            pieces.append(remaining)
            break

        break_point = chunk_size
        if boundaries:
            natural = _find_natural_break(remaining[:chunk_size], chunk_size)
            if natural is not None:
                needed_after = math.ceil((len(remaining) - natural) / chunk_size)
                if len(pieces) + 1 + needed_after <= budget:
                    break_point = natural

        pieces.append(remaining[:break_point].strip())
        remaining = remaining[break_point:].strip()

    pieces = [p for p in pieces if p.strip()]
    return [Chunk(index=i, total=len(pieces), text=p) for i, p in enumerate(pieces, 1)]
