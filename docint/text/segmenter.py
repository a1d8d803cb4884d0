"""Punctuation-based sentence segmentation.

This is a best-effort heuristic, not a linguistic sentence boundary detector:
abbreviations such as "e.g. this" are split like any other sentence end.
"""

import re

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.?!]) ")


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace, line breaks included, with one space."""
    return " ".join(text.split())


def split_into_sentences(text: str) -> list[str]:
    """Split text into sentences ending in '.', '?' or '!'.

    Terminal punctuation stays attached to its sentence, and runs such as
    "?!" end a single sentence. Text after the last terminal mark is kept as
    a final sentence.

    Returns:
        Sentences in order; empty for empty or whitespace-only input.
    """
    normalized = collapse_whitespace(text or "")
    if not normalized:
        return []
    return _SENTENCE_BOUNDARY.split(normalized)
