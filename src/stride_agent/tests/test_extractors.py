"""
Tests for the substring pickers used by slot extraction.
"""

import pytest

from stride_agent.core.commands.extractors import (
    contains_word,
    extract_after_keywords,
    extract_quoted,
    keyword_pattern,
)


@pytest.mark.unit
class TestExtractQuoted:
    """Test quoted substring extraction."""

    def test_double_quotes(self):
        assert extract_quoted('Create epic "Launch v2"') == "Launch v2"

    def test_single_quotes(self):
        assert extract_quoted("Create epic 'Launch v2'") == "Launch v2"

    def test_first_quoted_wins(self):
        text = 'Create epic "First" in workstream "Second"'
        assert extract_quoted(text) == "First"

    def test_double_quotes_win_regardless_of_position(self):
        assert extract_quoted("'one' then \"two\"") == "two"

    def test_apostrophe_inside_double_quotes(self):
        assert extract_quoted("Comment on I5 saying \"it's done\"") == "it's done"

    def test_no_quotes(self):
        assert extract_quoted("Create epic Launch") is None

    def test_empty_quotes_ignored(self):
        assert extract_quoted('title "" here') is None


@pytest.mark.unit
class TestExtractAfterKeywords:
    """Test keyword-suffix extraction."""

    def test_first_keyword_in_priority_order(self):
        text = "assign I5 to Dana"
        assert extract_after_keywords(text, ["to", "assign"]) == "Dana"

    def test_falls_back_to_later_keyword(self):
        assert extract_after_keywords("assign Dana", ["to", "assign"]) == "Dana"

    def test_strips_separators(self):
        assert extract_after_keywords("epic: - Launch", ["epic"]) == "Launch"

    def test_skips_keyword_with_empty_remainder(self):
        text = "message about release saying"
        assert extract_after_keywords(text, ["saying", "message"]) == "about release saying"

    def test_case_insensitive(self):
        assert extract_after_keywords("Comment SAYING hello", ["saying"]) == "hello"

    def test_keyword_must_be_whole_word(self):
        assert extract_after_keywords("tomorrow", ["to"]) is None

    def test_no_keyword(self):
        assert extract_after_keywords("nothing here", ["saying"]) is None


@pytest.mark.unit
class TestWordMatching:
    """Test word-bounded keyword matching."""

    def test_contains_word(self):
        assert contains_word("Please ASSIGN it", "assign")

    def test_substring_is_not_a_word(self):
        assert not contains_word("reassignment", "assign")

    def test_any_of_several(self):
        assert contains_word("start now", "move", "start")

    def test_keyword_ending_in_punctuation(self):
        pattern = keyword_pattern("epic:")
        assert pattern.search("epic: Launch")
        assert not pattern.search("epics: Launch")
