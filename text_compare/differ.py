"""
Text Differ v1.0.0
==================
Top-level comparison of a reference text against a candidate text.

Picks the comparison mode (auto-upgrading line mode to SQL clause mode
when both texts look like SQL), runs the matching differ, and packages
lines and statistics into a DiffResult.
"""

from typing import List, Optional, Tuple, Union

from config_logging import AppConfig, ValidationError, get_config, get_logger, handle_errors
from .line_differ import compute_line_diff
from .models import (
    AddedLine, DiffLine, DiffMode, DiffResult, DiffStats, EqualLine, ModifiedLine, RemovedLine
)
from .sql_differ import compute_sql_diff, is_sql_like
from .stats import compute_stats, identical_stats
from .word_differ import diff_chars, diff_words

logger = get_logger('text_compare.differ')

ModeLike = Union[DiffMode, str, None]


def parse_mode(mode: ModeLike, default: DiffMode = DiffMode.LINE) -> DiffMode:
    """
    Convert a mode name to a DiffMode.

    Raises:
        ValidationError: If the name is not a recognized mode
    """
    if mode is None or mode == '':
        return default
    if isinstance(mode, DiffMode):
        return mode
    try:
        return DiffMode(str(mode).strip().lower())
    except ValueError:
        valid = ', '.join(m.value for m in DiffMode)
        raise ValidationError(f"Unknown comparison mode '{mode}'. Expected one of: {valid}",
                              field='mode') from None


def resolve_mode(
    reference: str,
    candidate: str,
    mode: DiffMode,
    auto_detect: bool = True
) -> DiffMode:
    """
    Decide which differ to run.

    Line mode is upgraded to SQL mode only when auto-detection is on and
    both texts independently look like SQL. Every other request is
    honored as given.
    """
    if mode is DiffMode.LINE and auto_detect and is_sql_like(reference) and is_sql_like(candidate):
        return DiffMode.SQL
    return mode


def compute_inline_diff(
    reference: str,
    candidate: str,
    granularity: DiffMode,
    config: Optional[AppConfig] = None
) -> Tuple[List[DiffLine], DiffStats]:
    """
    Compare two texts as one entry at word or character granularity.

    Args:
        reference: Reference text
        candidate: Candidate text
        granularity: DiffMode.WORD or DiffMode.CHAR
        config: Configuration for diff settings

    Returns:
        Tuple of (lines, stats) with at most one line
    """
    lines: List[DiffLine] = []
    if reference == candidate:
        if reference:
            lines.append(EqualLine(reference, candidate, 1, 1))
    elif not reference:
        lines.append(AddedLine(right_line=candidate, right_line_no=1))
    elif not candidate:
        lines.append(RemovedLine(left_line=reference, left_line_no=1))
    else:
        span_differ = diff_chars if granularity is DiffMode.CHAR else diff_words
        lines.append(ModifiedLine(
            left_line=reference,
            right_line=candidate,
            left_line_no=1,
            right_line_no=1,
            word_spans=tuple(span_differ(reference, candidate, config)),
        ))
    return lines, compute_stats(lines, reference, candidate)


def _coerce_text(value, name: str) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {type(value).__name__}", field=name)
    return value


class TextDiffer:
    """
    Comparison engine for reference/candidate text pairs.

    The differ holds configuration only; every compare() call builds its
    own scanning and matching state, so one instance can serve any number
    of concurrent callers.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize the differ.

        Args:
            config: Configuration to use (global configuration if None)
        """
        self.config = config or get_config()

    @handle_errors(logger)
    def compare(
        self,
        reference: Optional[str],
        candidate: Optional[str],
        mode: ModeLike = None,
        auto_detect: Optional[bool] = None
    ) -> DiffResult:
        """
        Compare a reference text with a candidate text.

        Args:
            reference: Reference (expected) text; None is treated as ''
            candidate: Candidate text; None is treated as ''
            mode: 'line', 'sql', 'word' or 'char' (config default if None)
            auto_detect: Allow line mode to switch to SQL mode
                         (config default if None)

        Returns:
            DiffResult with lines, statistics and the mode actually used

        Raises:
            ValidationError: On non-string input or unknown mode
        """
        reference = _coerce_text(reference, 'reference')
        candidate = _coerce_text(candidate, 'candidate')
        requested = parse_mode(mode, parse_mode(self.config.default_mode))
        if auto_detect is None:
            auto_detect = self.config.sql_auto_detect

        resolved = resolve_mode(reference, candidate, requested, auto_detect)

        with logger.log_operation('compare', mode=resolved.value, requested_mode=requested.value,
                                  reference_chars=len(reference), candidate_chars=len(candidate)):
            if resolved is DiffMode.SQL:
                lines, stats = compute_sql_diff(reference, candidate, self.config)
            elif resolved is DiffMode.LINE:
                lines, stats = compute_line_diff(reference, candidate, self.config)
            else:
                lines, stats = compute_inline_diff(reference, candidate, resolved, self.config)

            identical = reference == candidate
            if identical:
                stats = identical_stats(reference)

        return DiffResult(
            lines=tuple(lines),
            stats=stats,
            mode=resolved,
            requested_mode=requested,
            identical=identical,
        )


# Convenience function
def compare_texts(
    reference: Optional[str],
    candidate: Optional[str],
    mode: ModeLike = None,
    auto_detect: Optional[bool] = None
) -> DiffResult:
    """
    Compare two texts with the global configuration.

    Args:
        reference: Reference text
        candidate: Candidate text
        mode: Comparison mode name or DiffMode
        auto_detect: Allow line mode to switch to SQL mode

    Returns:
        DiffResult
    """
    return TextDiffer().compare(reference, candidate, mode=mode, auto_detect=auto_detect)
