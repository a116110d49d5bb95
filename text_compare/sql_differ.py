"""
SQL Clause Differ v1.0.0
========================
Syntax-aware comparison of SQL-like text.

Both texts are segmented into clauses at keyword boundaries (this is not
a grammar-based parse), repeated keywords are merged per side, and the
clauses are aligned by keyword in first-seen order. Each clause becomes
one clause-line in the usual DiffLine shape.
"""

import re
from typing import Dict, List, Optional, Tuple

from config_logging import AppConfig, get_logger
from .line_differ import LineCounter
from .models import (
    AddedLine, DiffLine, DiffStats, EqualLine, ModifiedLine, RemovedLine, SqlClause
)
from .stats import compute_stats
from .word_differ import diff_words

logger = get_logger('text_compare.sql_differ')

SQL_KEYWORDS = (
    'SELECT', 'FROM', 'WHERE', 'GROUP BY', 'ORDER BY', 'HAVING', 'LIMIT', 'OFFSET',
    'JOIN', 'LEFT JOIN', 'RIGHT JOIN', 'INNER JOIN', 'OUTER JOIN', 'FULL JOIN', 'CROSS JOIN',
    'ON', 'AND', 'OR', 'INSERT INTO', 'VALUES', 'UPDATE', 'SET', 'DELETE FROM',
    'CREATE TABLE', 'ALTER TABLE', 'DROP TABLE', 'UNION', 'UNION ALL', 'WITH', 'AS',
)

SQL_LEADING_KEYWORDS = ('SELECT', 'INSERT', 'UPDATE', 'DELETE', 'CREATE', 'ALTER', 'DROP', 'WITH')


def _keyword_alternation(keywords) -> str:
    # Multi-word phrases first so UNION ALL wins over UNION
    ordered = sorted(keywords, key=lambda kw: -len(kw.split()))
    return '|'.join(r'\s+'.join(map(re.escape, kw.split())) for kw in ordered)


CLAUSE_PATTERN = re.compile(r'\b(?:' + _keyword_alternation(SQL_KEYWORDS) + r')\b', re.IGNORECASE)
SQL_START_PATTERN = re.compile(r'\s*(?:' + '|'.join(SQL_LEADING_KEYWORDS) + r')\b', re.IGNORECASE)
_WHITESPACE = re.compile(r'\s+')


def normalize_keyword(matched: str) -> str:
    """Upper-case a matched keyword and collapse its inner whitespace."""
    return _WHITESPACE.sub(' ', matched).upper()


def is_sql_like(text: str) -> bool:
    """Whether text starts (after leading whitespace) with a statement keyword."""
    return SQL_START_PATTERN.match(text or '') is not None


def parse_sql_clauses(sql: str) -> List[SqlClause]:
    """
    Segment SQL-like text into clauses at keyword boundaries.

    Args:
        sql: Text to segment

    Returns:
        Clauses in scan order. Text before the first keyword becomes a
        clause with an empty keyword; text with no keyword at all is a
        single clause with an empty keyword. Blank text has no clauses.
    """
    if not sql.strip():
        return []

    matches = list(CLAUSE_PATTERN.finditer(sql))
    if not matches:
        return [SqlClause(keyword='', body=sql.strip())]

    clauses: List[SqlClause] = []

    preamble = sql[:matches[0].start()].strip()
    if preamble:
        clauses.append(SqlClause(keyword='', body=preamble))

    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(sql)
        clauses.append(SqlClause(
            keyword=normalize_keyword(match.group(0)),
            body=sql[match.end():end].strip(),
        ))

    return clauses


def merge_clauses(clauses: List[SqlClause]) -> Dict[str, SqlClause]:
    """
    Merge clauses sharing a keyword into one clause per keyword.

    Bodies are joined with one space in order of appearance, so repeated
    predicates (several AND clauses, several JOINs) collapse into a single
    combined body.
    """
    bodies: Dict[str, List[str]] = {}
    for clause in clauses:
        parts = bodies.setdefault(clause.keyword, [])
        if clause.body:
            parts.append(clause.body)
    return {
        keyword: SqlClause(keyword=keyword, body=' '.join(parts))
        for keyword, parts in bodies.items()
    }


def ordered_keywords(reference_clauses: List[SqlClause], candidate_clauses: List[SqlClause]) -> List[str]:
    """Keywords of the reference then the candidate, first occurrence only."""
    seen = {}
    for clause in reference_clauses + candidate_clauses:
        seen.setdefault(clause.keyword, None)
    return list(seen)


def align_clauses(
    reference: str,
    candidate: str,
    config: Optional[AppConfig] = None
) -> List[DiffLine]:
    """
    Produce one clause-line per keyword present on either side.

    A keyword present on both sides with equal merged bodies is equal.
    An empty or missing reference body makes the clause added, an empty
    or missing candidate body makes it removed, otherwise the clause is
    modified with word spans over the full clause text.

    Args:
        reference: Reference SQL text
        candidate: Candidate SQL text
        config: Configuration for the word differ

    Returns:
        Ordered list of DiffLine, one per clause key
    """
    reference_clauses = parse_sql_clauses(reference)
    candidate_clauses = parse_sql_clauses(candidate)
    reference_merged = merge_clauses(reference_clauses)
    candidate_merged = merge_clauses(candidate_clauses)

    lines: List[DiffLine] = []
    counter = LineCounter()

    for keyword in ordered_keywords(reference_clauses, candidate_clauses):
        in_reference = keyword in reference_merged
        in_candidate = keyword in candidate_merged
        left = reference_merged.get(keyword, SqlClause(keyword, ''))
        right = candidate_merged.get(keyword, SqlClause(keyword, ''))

        if in_reference and in_candidate and left.body == right.body:
            left_no, right_no = counter.next_both()
            lines.append(EqualLine(
                left_line=left.text,
                right_line=right.text,
                left_line_no=left_no,
                right_line_no=right_no,
            ))
        elif not left.body and (right.body or not in_reference):
            lines.append(AddedLine(right_line=right.text, right_line_no=counter.next_right()))
        elif not right.body and (left.body or not in_candidate):
            lines.append(RemovedLine(left_line=left.text, left_line_no=counter.next_left()))
        else:
            left_no, right_no = counter.next_both()
            lines.append(ModifiedLine(
                left_line=left.text,
                right_line=right.text,
                left_line_no=left_no,
                right_line_no=right_no,
                word_spans=tuple(diff_words(left.text, right.text, config)),
            ))

    logger.debug("Clauses aligned", reference_clauses=len(reference_clauses),
                 candidate_clauses=len(candidate_clauses), lines=len(lines))
    return lines


def compute_sql_diff(
    reference: str,
    candidate: str,
    config: Optional[AppConfig] = None
) -> Tuple[List[DiffLine], DiffStats]:
    """
    Compare two SQL-like texts clause by clause.

    Returns:
        Tuple of (clause-lines, stats)
    """
    lines = align_clauses(reference, candidate, config)
    return lines, compute_stats(lines, reference, candidate)
