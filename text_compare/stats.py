"""
Diff Statistics
===============
Character counts and similarity derived from a produced line sequence.
"""

import math
from typing import Iterable

from .models import (
    AddedLine, DiffLine, DiffStats, EqualLine, ModifiedLine, RemovedLine, SpanType
)


def total_chars(reference: str, candidate: str) -> int:
    """Length of the longer text, floored at 1."""
    return max(len(reference), len(candidate), 1)


def similarity_percent(unchanged_chars: int, total: int) -> int:
    """Unchanged share of total as a whole percentage, half rounded up, capped at 100."""
    return min(math.floor(unchanged_chars / total * 100 + 0.5), 100)


def compute_stats(lines: Iterable[DiffLine], reference: str, candidate: str) -> DiffStats:
    """
    Walk a diff line sequence and derive character statistics.

    Equal, added and removed lines count their whole text. Modified lines
    count their word spans instead, so a one-character edit in a long line
    still counts the rest of the line as unchanged.

    Args:
        lines: Diff lines (or clause-lines) from one comparison
        reference: Reference text the lines were produced from
        candidate: Candidate text the lines were produced from

    Returns:
        DiffStats for the comparison
    """
    added = removed = unchanged = 0

    for line in lines:
        if isinstance(line, EqualLine):
            unchanged += len(line.left_line)
        elif isinstance(line, AddedLine):
            added += len(line.right_line)
        elif isinstance(line, RemovedLine):
            removed += len(line.left_line)
        elif isinstance(line, ModifiedLine):
            for span in line.word_spans:
                if span.span_type is SpanType.EQUAL:
                    unchanged += len(span.text)
                elif span.span_type is SpanType.ADDED:
                    added += len(span.text)
                else:
                    removed += len(span.text)

    total = total_chars(reference, candidate)
    return DiffStats(
        total_chars=total,
        added_chars=added,
        removed_chars=removed,
        unchanged_chars=unchanged,
        similarity=similarity_percent(unchanged, total),
    )


def identical_stats(text: str) -> DiffStats:
    """Statistics for two identical texts: everything unchanged, similarity 100."""
    return DiffStats(
        total_chars=total_chars(text, text),
        added_chars=0,
        removed_chars=0,
        unchanged_chars=len(text),
        similarity=100,
    )
