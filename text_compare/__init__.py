"""
Text Comparison Module v1.0.0
=============================
Reference-vs-candidate text comparison with line-level alignment,
word-level highlighting and a similarity score.

Features:
- Line-level alignment with positional pairing of changed regions
- Word-level spans inside modified lines
- Clause-by-clause comparison of SQL-like text
- Automatic SQL detection for line-mode requests
- Character statistics and similarity percentage
"""

from .differ import TextDiffer, compare_texts, compute_inline_diff, parse_mode, resolve_mode
from .line_differ import compute_line_diff, split_into_lines
from .models import (
    AddedLine,
    DiffLine,
    DiffMode,
    DiffResult,
    DiffStats,
    EqualLine,
    LineType,
    ModifiedLine,
    RemovedLine,
    SpanType,
    SqlClause,
    WordSpan
)
from .routes import tc_blueprint
from .sql_differ import compute_sql_diff, is_sql_like, parse_sql_clauses
from .stats import compute_stats
from .word_differ import diff_chars, diff_words

__version__ = "1.0.0"
__all__ = [
    'tc_blueprint',
    'TextDiffer',
    'compare_texts',
    'compute_inline_diff',
    'compute_line_diff',
    'compute_sql_diff',
    'compute_stats',
    'diff_words',
    'diff_chars',
    'is_sql_like',
    'parse_mode',
    'parse_sql_clauses',
    'resolve_mode',
    'split_into_lines',
    'AddedLine',
    'DiffLine',
    'DiffMode',
    'DiffResult',
    'DiffStats',
    'EqualLine',
    'LineType',
    'ModifiedLine',
    'RemovedLine',
    'SpanType',
    'SqlClause',
    'WordSpan'
]
