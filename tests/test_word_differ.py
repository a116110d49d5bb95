"""
Tests for the Word-Level Differ
===============================
"""

import pytest

from text_compare.models import SpanType, WordSpan
from text_compare.word_differ import diff_chars, diff_words, tokenize, tokens_to_chars


SAMPLE_PAIRS = [
    ("", ""),
    ("", "added only"),
    ("removed only", ""),
    ("the cat sat", "the dog sat"),
    ("SELECT a FROM t", "SELECT a, b FROM t"),
    ("Hello, world!", "Hello there, brave new world."),
    ("  leading space", "leading space  "),
    ("a b c d e f", "f e d c b a"),
    ("数据 对比 工具", "数据 比较 工具"),
]


def _join(spans, *types):
    return ''.join(s.text for s in spans if s.span_type in types)


class TestTokenize:
    """Tests for tokenize()."""

    def test_words_whitespace_punctuation(self):
        """Words, whitespace runs and punctuation are separate tokens."""
        assert tokenize("a, b") == ["a", ",", " ", "b"]

    def test_whitespace_runs_kept_whole(self):
        assert tokenize("x \t\n y") == ["x", " \t\n ", "y"]

    def test_empty(self):
        assert tokenize("") == []

    def test_tokens_cover_text(self):
        text = "WHERE x=1 AND y <> 'two'"
        assert ''.join(tokenize(text)) == text


class TestTokensToChars:
    """Tests for the token munging used to drive diff-match-patch."""

    def test_shared_tokens_share_characters(self):
        left, right, token_array = tokens_to_chars("a b", "b a")
        assert len(left) == 3
        assert len(right) == 3
        assert left[0] == right[2]
        assert left[1] == right[1]
        assert token_array[0] == ''

    def test_characters_map_back_to_tokens(self):
        left, right, token_array = tokens_to_chars("one two", "two three")
        assert ''.join(token_array[ord(c)] for c in left) == "one two"
        assert ''.join(token_array[ord(c)] for c in right) == "two three"


class TestDiffWords:
    """Tests for diff_words()."""

    def test_both_empty(self):
        """Two empty strings produce no spans."""
        assert diff_words("", "") == []

    def test_identical_is_one_equal_span(self):
        assert diff_words("same text", "same text") == [WordSpan("same text", SpanType.EQUAL)]

    def test_single_token_replacement(self):
        assert diff_words("b", "x") == [
            WordSpan("b", SpanType.REMOVED),
            WordSpan("x", SpanType.ADDED),
        ]

    def test_word_in_middle(self):
        assert diff_words("the cat sat", "the dog sat") == [
            WordSpan("the ", SpanType.EQUAL),
            WordSpan("cat", SpanType.REMOVED),
            WordSpan("dog", SpanType.ADDED),
            WordSpan(" sat", SpanType.EQUAL),
        ]

    def test_pure_insertion(self):
        assert diff_words("SELECT a", "SELECT a, b") == [
            WordSpan("SELECT a", SpanType.EQUAL),
            WordSpan(", b", SpanType.ADDED),
        ]

    def test_empty_left(self):
        assert diff_words("", "new text") == [WordSpan("new text", SpanType.ADDED)]

    def test_empty_right(self):
        assert diff_words("old text", "") == [WordSpan("old text", SpanType.REMOVED)]

    def test_whole_words_not_characters(self):
        """A changed word is reported whole even when it shares letters."""
        spans = diff_words("color", "colour")
        assert spans == [
            WordSpan("color", SpanType.REMOVED),
            WordSpan("colour", SpanType.ADDED),
        ]

    @pytest.mark.parametrize("left,right", SAMPLE_PAIRS)
    def test_sides_reconstruct(self, left, right):
        """equal+removed gives the left text; equal+added gives the right text."""
        spans = diff_words(left, right)
        assert _join(spans, SpanType.EQUAL, SpanType.REMOVED) == left
        assert _join(spans, SpanType.EQUAL, SpanType.ADDED) == right

    @pytest.mark.parametrize("left,right", SAMPLE_PAIRS)
    def test_spans_coalesced_and_non_empty(self, left, right):
        spans = diff_words(left, right)
        assert all(s.text for s in spans)
        for previous, current in zip(spans, spans[1:]):
            assert previous.span_type is not current.span_type

    @pytest.mark.parametrize("left,right", SAMPLE_PAIRS)
    def test_removed_precedes_added_in_change_runs(self, left, right):
        spans = diff_words(left, right)
        for previous, current in zip(spans, spans[1:]):
            assert not (previous.span_type is SpanType.ADDED and current.span_type is SpanType.REMOVED)

    def test_deterministic(self):
        assert diff_words("a b c d", "a x c y") == diff_words("a b c d", "a x c y")

    @pytest.mark.parametrize("cleanup", ["semantic", "efficiency"])
    def test_cleanup_keeps_invariants(self, config, cleanup):
        config.word_cleanup = cleanup
        left, right = "a b c d e", "a x c y e"
        spans = diff_words(left, right, config)
        assert _join(spans, SpanType.EQUAL, SpanType.REMOVED) == left
        assert _join(spans, SpanType.EQUAL, SpanType.ADDED) == right

    def test_efficiency_cleanup_folds_short_equalities(self, config):
        """' c ' is three tokens, under the edit cost of four, so it joins the edits."""
        config.word_cleanup = 'efficiency'
        assert diff_words("a b c d e", "a x c y e", config) == [
            WordSpan("a ", SpanType.EQUAL),
            WordSpan("b c d", SpanType.REMOVED),
            WordSpan("x c y", SpanType.ADDED),
            WordSpan(" e", SpanType.EQUAL),
        ]

    def test_edit_cost_controls_efficiency_cleanup(self, config):
        """With a low edit cost the same equality is kept."""
        config.word_cleanup = 'efficiency'
        config.diff_edit_cost = 1
        spans = diff_words("a b c d e", "a x c y e", config)
        assert WordSpan(" c ", SpanType.EQUAL) in spans

    def test_no_cleanup_by_default(self, config):
        assert config.word_cleanup == 'none'
        spans = diff_words("a b c d e", "a x c y e", config)
        assert WordSpan(" c ", SpanType.EQUAL) in spans


class TestDiffChars:
    """Tests for diff_chars()."""

    def test_character_granularity(self):
        assert diff_chars("abc", "abd") == [
            WordSpan("ab", SpanType.EQUAL),
            WordSpan("c", SpanType.REMOVED),
            WordSpan("d", SpanType.ADDED),
        ]

    def test_both_empty(self):
        assert diff_chars("", "") == []

    @pytest.mark.parametrize("left,right", SAMPLE_PAIRS)
    def test_sides_reconstruct(self, left, right):
        spans = diff_chars(left, right)
        assert _join(spans, SpanType.EQUAL, SpanType.REMOVED) == left
        assert _join(spans, SpanType.EQUAL, SpanType.ADDED) == right
