"""Shrink a document that would need too many chunks, keeping its head and tail."""

REDUCTION_MARKER = "\n\n... [content reduced] ...\n\n"
HEAD_RATIO = 0.7


def reduce_content(text: str, target_size: int) -> str:
    """Keep the first 70% and last 30% of target_size characters, dropping the middle.

    Setup and context tend to sit at the start of a chapter, resolution and
    cliffhangers at the end. The result is target_size plus the marker length.
    """
    if len(text) <= target_size:
        return text

    target_size = max(target_size, 0)
    head_size = int(target_size * HEAD_RATIO)
    tail_size = target_size - head_size

    head = text[:head_size]
    tail = text[len(text) - tail_size:] if tail_size else ""
    return f"{head}{REDUCTION_MARKER}{tail}"
