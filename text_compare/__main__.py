"""
TextCompare Command Line
========================
Compare two text files from the shell.

Usage:
    python -m text_compare <reference> <candidate> [--mode line|sql|word|char]
                           [--no-auto-detect] [--json]

Either path may be '-' to read that side from stdin. Exit status is 0
when the texts are identical, 1 when they differ and 2 on errors.
"""
import argparse
import json
import sys
from typing import List, Optional

from config_logging import TextCompareError
from .differ import TextDiffer
from .models import AddedLine, DiffResult, EqualLine, ModifiedLine, SpanType

EXIT_IDENTICAL = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def read_text(path: str) -> str:
    """Read a whole file as UTF-8, or stdin for '-'."""
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def render_spans(line: ModifiedLine) -> str:
    """Inline rendering of word spans: [-removed-] and {+added+}."""
    parts = []
    for span in line.word_spans:
        if span.span_type is SpanType.REMOVED:
            parts.append(f"[-{span.text}-]")
        elif span.span_type is SpanType.ADDED:
            parts.append(f"{{+{span.text}+}}")
        else:
            parts.append(span.text)
    return ''.join(parts)


def render_text(result: DiffResult) -> str:
    """
    Render a result as unified text rows.

    Each row is a marker (' ' equal, '-' removed, '+' added, '~' modified),
    the left and right line numbers, and the line text.
    """
    rows = []
    for line in result.lines:
        if isinstance(line, EqualLine):
            rows.append(f"  {line.left_line_no:>5} {line.right_line_no:>5}  {line.left_line}")
        elif isinstance(line, ModifiedLine):
            rows.append(f"~ {line.left_line_no:>5} {line.right_line_no:>5}  {render_spans(line)}")
        elif isinstance(line, AddedLine):
            rows.append(f"+ {'':>5} {line.right_line_no:>5}  {line.right_line}")
        else:
            rows.append(f"- {line.left_line_no:>5} {'':>5}  {line.left_line}")

    stats = result.stats
    rows.append(
        f"-- {result.mode.value} mode, similarity {stats.similarity}% "
        f"(+{stats.added_chars} -{stats.removed_chars} ={stats.unchanged_chars} "
        f"of {stats.total_chars} chars)"
    )
    return '\n'.join(rows)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    1. Parses command line arguments.
    2. Reads both texts.
    3. Runs the comparison.
    4. Prints JSON or unified text to stdout.
    """
    parser = argparse.ArgumentParser(
        prog='text_compare',
        description="Compare a reference text with a candidate text"
    )
    parser.add_argument("reference", help="Reference file ('-' for stdin)")
    parser.add_argument("candidate", help="Candidate file ('-' for stdin)")
    parser.add_argument("--mode", choices=['line', 'sql', 'word', 'char'], default=None,
                        help="Comparison mode (default from TC_DEFAULT_MODE)")
    parser.add_argument("--no-auto-detect", action="store_true",
                        help="Never switch line mode to SQL mode automatically")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    if args.reference == '-' and args.candidate == '-':
        parser.error("only one side can be read from stdin")

    try:
        reference = read_text(args.reference)
        candidate = read_text(args.candidate)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    auto_detect = False if args.no_auto_detect else None
    try:
        result = TextDiffer().compare(reference, candidate, mode=args.mode, auto_detect=auto_detect)
    except TextCompareError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(render_text(result))

    return EXIT_IDENTICAL if result.identical else EXIT_DIFFERENT


if __name__ == "__main__":
    sys.exit(main())
