"""Coarse token estimation for chat text."""

from __future__ import annotations


def estimate_tokens(text: str | None) -> int:
    """Estimate token count as the number of whitespace-separated chunks.

    This is not a real subword tokenizer: real API counts will differ, but
    the relative growth of a replayed history is preserved. Missing text
    counts as empty.
    """
    if not text:
        return 0
    # str.split() with no separator trims and splits on runs of whitespace
    return len(text.split())
