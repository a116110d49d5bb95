"""
Word-Level Differ v1.0.0
========================
Token-level diff of two strings, used for intra-line highlighting.

Text is split into words, whitespace runs and single punctuation
characters. Every distinct token is mapped to one unicode character
(the same munging diff-match-patch applies in line mode) so that the
diff-match-patch Myers implementation aligns token sequences rather
than characters.
"""

import re
from typing import Dict, List, Optional, Tuple

import diff_match_patch as dmp_module

from config_logging import AppConfig, get_config, get_logger
from .models import SpanType, WordSpan

logger = get_logger('text_compare.word_differ')

# Words, whitespace runs, and any other single character
TOKEN_PATTERN = re.compile(r'\w+|\s+|[^\w\s]')

# diff-match-patch splits the unicode range 2/3 to 1/3 between the texts
MAX_LEFT_TOKENS = 666666
MAX_TOKENS = 1114111

_SPAN_TYPES = {
    dmp_module.diff_match_patch.DIFF_EQUAL: SpanType.EQUAL,
    dmp_module.diff_match_patch.DIFF_INSERT: SpanType.ADDED,
    dmp_module.diff_match_patch.DIFF_DELETE: SpanType.REMOVED,
}


def new_matcher(config: Optional[AppConfig] = None) -> dmp_module.diff_match_patch:
    """
    Build a diff-match-patch instance for one comparison call.

    Args:
        config: Configuration to read diff settings from (global if None)

    Returns:
        Configured diff_match_patch object
    """
    config = config or get_config()
    dmp = dmp_module.diff_match_patch()
    dmp.Diff_Timeout = config.diff_timeout
    dmp.Diff_EditCost = config.diff_edit_cost
    return dmp


def apply_cleanup(dmp: dmp_module.diff_match_patch, diffs: List[Tuple[int, str]], config: AppConfig):
    """
    Run the configured diff-match-patch cleanup pass on diffs in place.

    With 'efficiency', equalities shorter than Diff_EditCost units that sit
    between edits are folded into those edits. 'none' keeps the exact
    minimal diff.
    """
    if config.word_cleanup == 'semantic':
        dmp.diff_cleanupSemantic(diffs)
    elif config.word_cleanup == 'efficiency':
        dmp.diff_cleanupEfficiency(diffs)


def tokenize(text: str) -> List[str]:
    """Split text into word, whitespace and punctuation tokens."""
    return TOKEN_PATTERN.findall(text)


def tokens_to_chars(left: str, right: str) -> Tuple[str, str, List[str]]:
    """
    Encode both texts as strings with one character per token.

    Args:
        left: Reference text
        right: Candidate text

    Returns:
        Tuple of (encoded left, encoded right, token array) where
        token_array[ord(c)] is the token behind character c
    """
    token_array: List[str] = ['']  # index 0 is never emitted
    token_hash: Dict[str, int] = {}

    def munge(text: str, max_tokens: int) -> str:
        tokens = tokenize(text)
        chars = []
        for index, token in enumerate(tokens):
            if token not in token_hash:
                if len(token_array) == max_tokens:
                    # Out of code points: the rest of the text is one token
                    token = ''.join(tokens[index:])
                    chars.append(chr(len(token_array)))
                    token_array.append(token)
                    break
                token_hash[token] = len(token_array)
                token_array.append(token)
            chars.append(chr(token_hash[token]))
        return ''.join(chars)

    left_chars = munge(left, MAX_LEFT_TOKENS)
    right_chars = munge(right, MAX_TOKENS)
    return left_chars, right_chars, token_array


def to_spans(diffs: List[Tuple[int, str]]) -> List[WordSpan]:
    """
    Convert diff-match-patch tuples to word spans.

    Adjacent tuples of the same kind are coalesced and empty texts dropped.
    """
    spans: List[WordSpan] = []
    for op, text in diffs:
        if not text:
            continue
        span_type = _SPAN_TYPES[op]
        if spans and spans[-1].span_type is span_type:
            spans[-1] = WordSpan(spans[-1].text + text, span_type)
        else:
            spans.append(WordSpan(text, span_type))
    return spans


def diff_words(
    left: str,
    right: str,
    config: Optional[AppConfig] = None
) -> List[WordSpan]:
    """
    Compute word-level spans between two strings.

    Equal runs are emitted verbatim. Each changed run is emitted as the
    removed text (from left) followed by the added text (from right).

    Args:
        left: Reference string
        right: Candidate string
        config: Configuration for diff settings (global if None)

    Returns:
        Ordered list of WordSpan. Joining equal+removed spans gives left,
        joining equal+added spans gives right.
    """
    if left == right:
        return [WordSpan(left, SpanType.EQUAL)] if left else []

    config = config or get_config()
    dmp = new_matcher(config)

    left_chars, right_chars, token_array = tokens_to_chars(left, right)
    diffs = dmp.diff_main(left_chars, right_chars, False)
    apply_cleanup(dmp, diffs, config)
    dmp.diff_charsToLines(diffs, token_array)

    spans = to_spans(diffs)
    logger.debug("Word diff computed", left_tokens=len(left_chars),
                 right_tokens=len(right_chars), spans=len(spans))
    return spans


def diff_chars(
    left: str,
    right: str,
    config: Optional[AppConfig] = None
) -> List[WordSpan]:
    """Character-granularity variant of diff_words with the same span invariants."""
    if left == right:
        return [WordSpan(left, SpanType.EQUAL)] if left else []

    config = config or get_config()
    dmp = new_matcher(config)
    diffs = dmp.diff_main(left, right, False)
    apply_cleanup(dmp, diffs, config)
    return to_spans(diffs)
