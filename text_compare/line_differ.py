"""
Line-Level Differ v1.0.0
========================
Line alignment with word-level highlighting inside changed lines.

Lines are aligned with diff-match-patch in line mode (an LCS alignment
over whole lines). Each maximal run of removed/added chunks is a
"replace island"; islands are resolved by positional pairing, see
pair_replace_island().
"""

from typing import List, Optional, Tuple

import diff_match_patch as dmp_module

from config_logging import AppConfig, get_config, get_logger
from .models import (
    AddedLine, DiffLine, DiffStats, EqualLine, ModifiedLine, RemovedLine
)
from .stats import compute_stats
from .word_differ import diff_words, new_matcher

logger = get_logger('text_compare.line_differ')

DIFF_EQUAL = dmp_module.diff_match_patch.DIFF_EQUAL
DIFF_DELETE = dmp_module.diff_match_patch.DIFF_DELETE


class LineCounter:
    """Running 1-based line numbers for the reference and candidate sides."""

    def __init__(self):
        self.left = 0
        self.right = 0

    def next_both(self) -> Tuple[int, int]:
        self.left += 1
        self.right += 1
        return self.left, self.right

    def next_left(self) -> int:
        self.left += 1
        return self.left

    def next_right(self) -> int:
        self.right += 1
        return self.right


def split_into_lines(text: str) -> List[str]:
    """
    Split text into lines after stripping one trailing newline.

    A trailing newline never yields a trailing empty line, but a text
    consisting of just a newline is one empty line.

    Args:
        text: Text to split

    Returns:
        List of lines without terminators (empty list for empty text)
    """
    if not text:
        return []
    if text.endswith('\n'):
        text = text[:-1]
    return text.split('\n')


def line_chunks(
    reference: str,
    candidate: str,
    config: Optional[AppConfig] = None
) -> List[Tuple[int, str]]:
    """
    Diff two texts by whole lines.

    Returns:
        List of (op, text) chunks, op being -1 (removed), 0 (equal) or
        1 (added); each chunk text holds one or more lines with their
        newline characters
    """
    dmp = new_matcher(config)
    left_chars, right_chars, line_array = dmp.diff_linesToChars(reference, candidate)
    diffs = dmp.diff_main(left_chars, right_chars, False)
    dmp.diff_charsToLines(diffs, line_array)
    return diffs


def pair_replace_island(
    removed_lines: List[str],
    added_lines: List[str],
    counter: LineCounter,
    config: Optional[AppConfig] = None
) -> List[DiffLine]:
    """
    Resolve one replace island by positional pairing.

    The i-th removed line is paired with the i-th added line and emitted
    as a modified line with word spans. Leftover removed lines follow as
    removed lines, then leftover added lines as added lines.

    Pairing is positional, not an optimal alignment: if lines inside the
    island were reordered rather than edited, unrelated lines get paired.

    Args:
        removed_lines: Reference lines of the island, in order
        added_lines: Candidate lines of the island, in order
        counter: Line numbering shared with the rest of the diff
        config: Configuration for the word differ

    Returns:
        List of DiffLine for the island
    """
    lines: List[DiffLine] = []
    paired = min(len(removed_lines), len(added_lines))

    for left_line, right_line in zip(removed_lines[:paired], added_lines[:paired]):
        left_no, right_no = counter.next_both()
        lines.append(ModifiedLine(
            left_line=left_line,
            right_line=right_line,
            left_line_no=left_no,
            right_line_no=right_no,
            word_spans=tuple(diff_words(left_line, right_line, config)),
        ))

    for left_line in removed_lines[paired:]:
        lines.append(RemovedLine(left_line=left_line, left_line_no=counter.next_left()))

    for right_line in added_lines[paired:]:
        lines.append(AddedLine(right_line=right_line, right_line_no=counter.next_right()))

    return lines


def align_lines(
    reference: str,
    candidate: str,
    config: Optional[AppConfig] = None
) -> List[DiffLine]:
    """
    Produce the line sequence for two texts.

    Args:
        reference: Reference text
        candidate: Candidate text
        config: Configuration for diff settings

    Returns:
        Ordered list of DiffLine
    """
    config = config or get_config()
    chunks = line_chunks(reference, candidate, config)

    lines: List[DiffLine] = []
    counter = LineCounter()
    islands = 0

    i = 0
    while i < len(chunks):
        op, text = chunks[i]

        if op == DIFF_EQUAL:
            for line in split_into_lines(text):
                left_no, right_no = counter.next_both()
                lines.append(EqualLine(
                    left_line=line,
                    right_line=line,
                    left_line_no=left_no,
                    right_line_no=right_no,
                ))
            i += 1
            continue

        # Gather the whole run of removed/added chunks
        removed_text = []
        added_text = []
        while i < len(chunks) and chunks[i][0] != DIFF_EQUAL:
            op, text = chunks[i]
            if op == DIFF_DELETE:
                removed_text.append(text)
            else:
                added_text.append(text)
            i += 1

        islands += 1
        lines.extend(pair_replace_island(
            split_into_lines(''.join(removed_text)),
            split_into_lines(''.join(added_text)),
            counter,
            config
        ))

    logger.debug("Lines aligned", chunks=len(chunks), islands=islands, lines=len(lines))
    return lines


def compute_line_diff(
    reference: str,
    candidate: str,
    config: Optional[AppConfig] = None
) -> Tuple[List[DiffLine], DiffStats]:
    """
    Compare two texts line by line.

    Args:
        reference: Reference text
        candidate: Candidate text
        config: Configuration for diff settings

    Returns:
        Tuple of (lines, stats)
    """
    lines = align_lines(reference, candidate, config)
    return lines, compute_stats(lines, reference, candidate)
