"""
Text Comparison Models v1.0.0
=============================
Data classes for comparison results.

Every entity here is an immutable value produced by a single comparison
call. A diff line is one of four variants (EqualLine, AddedLine,
RemovedLine, ModifiedLine); each variant carries only the fields that
make sense for it, so a removed line can never hold a right-side number.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple, Union, Any


class DiffMode(str, Enum):
    """Comparison granularity requested by the caller."""
    LINE = 'line'
    SQL = 'sql'
    WORD = 'word'
    CHAR = 'char'


class LineType(str, Enum):
    """Variant tag of a diff line."""
    EQUAL = 'equal'
    ADDED = 'added'
    REMOVED = 'removed'
    MODIFIED = 'modified'


class SpanType(str, Enum):
    """Variant tag of a word span."""
    EQUAL = 'equal'
    ADDED = 'added'
    REMOVED = 'removed'


@dataclass(frozen=True)
class WordSpan:
    """
    A run of text inside a modified line.

    Attributes:
        text: The span text, whitespace included
        span_type: equal (both sides), added (candidate only) or
                   removed (reference only)
    """
    text: str
    span_type: SpanType

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {'text': self.text, 'type': self.span_type.value}


@dataclass(frozen=True)
class EqualLine:
    """A line (or clause) present unchanged on both sides."""
    left_line: str
    right_line: str
    left_line_no: int
    right_line_no: int

    line_type: ClassVar[LineType] = LineType.EQUAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'line_type': self.line_type.value,
            'left_line': self.left_line,
            'right_line': self.right_line,
            'left_line_no': self.left_line_no,
            'right_line_no': self.right_line_no,
        }


@dataclass(frozen=True)
class AddedLine:
    """A line present only in the candidate text."""
    right_line: str
    right_line_no: int

    line_type: ClassVar[LineType] = LineType.ADDED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'line_type': self.line_type.value,
            'right_line': self.right_line,
            'right_line_no': self.right_line_no,
        }


@dataclass(frozen=True)
class RemovedLine:
    """A line present only in the reference text."""
    left_line: str
    left_line_no: int

    line_type: ClassVar[LineType] = LineType.REMOVED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'line_type': self.line_type.value,
            'left_line': self.left_line,
            'left_line_no': self.left_line_no,
        }


@dataclass(frozen=True)
class ModifiedLine:
    """
    A reference line paired with the candidate line it became.

    Attributes:
        left_line: Reference text of the line
        right_line: Candidate text of the line
        left_line_no: 1-based line number in the reference
        right_line_no: 1-based line number in the candidate
        word_spans: Word-level diff of left_line against right_line
    """
    left_line: str
    right_line: str
    left_line_no: int
    right_line_no: int
    word_spans: Tuple[WordSpan, ...]

    line_type: ClassVar[LineType] = LineType.MODIFIED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'line_type': self.line_type.value,
            'left_line': self.left_line,
            'right_line': self.right_line,
            'left_line_no': self.left_line_no,
            'right_line_no': self.right_line_no,
            'word_spans': [s.to_dict() for s in self.word_spans],
        }


DiffLine = Union[EqualLine, AddedLine, RemovedLine, ModifiedLine]


@dataclass(frozen=True)
class SqlClause:
    """
    A keyword-delimited segment of SQL-like text.

    Attributes:
        keyword: Upper-cased keyword with single spaces ('' for preamble)
        body: Text after the keyword up to the next keyword, trimmed
    """
    keyword: str
    body: str

    @property
    def text(self) -> str:
        """Display text: keyword and body joined by one space."""
        if not self.keyword:
            return self.body
        if not self.body:
            return self.keyword
        return f"{self.keyword} {self.body}"


@dataclass(frozen=True)
class DiffStats:
    """
    Character statistics for a comparison.

    Attributes:
        total_chars: max(len(reference), len(candidate), 1)
        added_chars: Characters only in the candidate
        removed_chars: Characters only in the reference
        unchanged_chars: Characters shared by both sides
        similarity: Percentage 0-100 of unchanged over total
    """
    total_chars: int
    added_chars: int
    removed_chars: int
    unchanged_chars: int
    similarity: int

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {
            'total_chars': self.total_chars,
            'added_chars': self.added_chars,
            'removed_chars': self.removed_chars,
            'unchanged_chars': self.unchanged_chars,
            'similarity': self.similarity,
        }


@dataclass(frozen=True)
class DiffResult:
    """
    Complete result of comparing a reference text with a candidate text.

    Attributes:
        lines: Ordered diff lines (clause-lines in SQL mode)
        stats: Character statistics
        mode: Mode actually used, after auto-detection
        requested_mode: Mode the caller asked for
        identical: Whether both texts were exactly equal
    """
    lines: Tuple[DiffLine, ...]
    stats: DiffStats
    mode: DiffMode = DiffMode.LINE
    requested_mode: Optional[DiffMode] = None
    identical: bool = False

    @property
    def similarity(self) -> int:
        return self.stats.similarity

    @property
    def has_changes(self) -> bool:
        return any(line.line_type is not LineType.EQUAL for line in self.lines)

    def line_counts(self) -> Dict[str, int]:
        """Count of entries per line type, every type present."""
        counts = {line_type.value: 0 for line_type in LineType}
        for line in self.lines:
            counts[line.line_type.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        requested = self.requested_mode or self.mode
        return {
            'mode': self.mode.value,
            'requested_mode': requested.value,
            'identical': self.identical,
            'lines': [line.to_dict() for line in self.lines],
            'stats': self.stats.to_dict(),
            'counts': self.line_counts(),
        }
