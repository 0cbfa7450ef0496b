"""Keep long interview transcripts inside the model's context budget."""

from __future__ import annotations

import math

from gemini_hiring.constants import (
    CHARS_PER_TOKEN,
    TRANSCRIPT_HEAD_RATIO,
    TRANSCRIPT_TAIL_RATIO,
    TRANSCRIPT_TOKEN_LIMIT,
)


def estimate_tokens(text: str) -> int:
    """Rough token estimate (one token per four characters, rounded up)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def truncate_transcript(transcript: str, max_tokens: int = TRANSCRIPT_TOKEN_LIMIT) -> str:
    """Shorten ``transcript`` to roughly ``max_tokens``.

    The opening (context) and closing (conclusion) of the interview are kept:
    the first 60% and last 30% of the character budget, joined by a marker
    saying how many tokens were dropped.

    Args:
        transcript: Full transcript text.
        max_tokens: Token budget for the transcript.

    Returns:
        The transcript unchanged when it fits, otherwise the shortened text.
    """
    estimated = estimate_tokens(transcript)
    if estimated <= max_tokens:
        return transcript

    max_chars = max_tokens * CHARS_PER_TOKEN
    head = transcript[: math.floor(max_chars * TRANSCRIPT_HEAD_RATIO)]
    tail_size = math.floor(max_chars * TRANSCRIPT_TAIL_RATIO)
    tail = transcript[-tail_size:] if tail_size else ""
    omitted = estimated - max_tokens
    return (
        f"{head}\n\n[... transcript truncated for length: "
        f"{omitted} tokens omitted ...]\n\n{tail}"
    )
