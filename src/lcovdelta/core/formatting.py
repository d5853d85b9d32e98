"""Formatting helpers shared by the renderer and CLI output.

Design principles:
- Deterministic: identical inputs always produce identical strings
- Grammatically correct (1 file vs 2 files)
"""

from __future__ import annotations


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Examples:
        pluralize(1, "file") -> "1 file"
        pluralize(3, "file") -> "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def format_percentage(value: float | None, *, no_data: str = "-") -> str:
    """Format a percentage with two decimals, or the no-data marker.

    Examples:
        66.666 -> "66.67%"
        None -> "-"
    """
    if value is None:
        return no_data
    return f"{value:.2f}%"


def truncate_at_line(text: str, max_chars: int) -> str:
    """Cut text to at most max_chars, preferring the last line boundary.

    A max_chars of 0 (or less) disables truncation.
    """
    if max_chars <= 0 or len(text) <= max_chars:
        return text

    cut = text[:max_chars]
    newline_idx = cut.rfind("\n")
    if newline_idx > 0:
        return cut[:newline_idx]
    return cut
