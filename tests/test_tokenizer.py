"""
Tests for corpus tokenization.
"""
import pytest

from markovbox.services.tokenizer import (
    DELIMITERS,
    split_characters,
    split_punctuation,
    strip_newlines,
    tokenize,
)


class TestSplitPunctuation:
    """Test suite for punctuation-aware splitting."""

    def test_reference_example(self):
        """Test double space collapses and every delimiter is its own token."""
        tokens = split_punctuation("Hello,  world!\n")

        assert tokens == ["Hello", ",", " ", "world", "!", "\n"]

    def test_newline_runs_collapse(self):
        tokens = split_punctuation("one\r\n\r\n\ntwo")

        assert tokens == ["one", "\n", "two"]

    def test_trailing_word_is_flushed(self):
        assert split_punctuation("say hi") == ["say", " ", "hi"]

    def test_consecutive_delimiters(self):
        assert split_punctuation("Wait...?") == ["Wait", ".", ".", ".", "?"]

    def test_leading_delimiter(self):
        assert split_punctuation(" go") == [" ", "go"]

    def test_empty_input(self):
        assert split_punctuation("") == []

    def test_other_punctuation_stays_in_words(self):
        """Test characters outside the delimiter set are part of words."""
        assert split_punctuation("don't-stop;now") == ["don't-stop;now"]

    def test_delimiter_set(self):
        assert DELIMITERS == {".", ",", " ", "?", "!", "\n"}


class TestCharacterMode:

    def test_every_character_is_a_token(self):
        assert split_characters("ab c\n") == ["a", "b", " ", "c", "\n"]

    def test_runs_are_not_collapsed(self):
        assert split_characters("a  b") == ["a", " ", " ", "b"]

    def test_empty_input(self):
        assert split_characters("") == []


class TestTokenize:
    """Test the combined entry point."""

    def test_default_is_character_mode(self):
        assert tokenize("hi!") == ["h", "i", "!"]

    def test_punctuation_mode(self):
        assert tokenize("hi there!", punctuation=True) == ["hi", " ", "there", "!"]

    def test_strip_newlines_helper(self):
        assert strip_newlines("a\r\n\r\nb\nc") == "a b c"

    def test_strip_in_character_mode(self):
        assert tokenize("a\n\nb", strip=True) == ["a", " ", "b"]

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("line one\nline two", ["line", " ", "one", " ", "line", " ", "two"]),
            ("end. \nstart", ["end", ".", " ", "start"]),
        ],
    )
    def test_strip_in_punctuation_mode(self, text, expected):
        """Test stripped newlines become spaces and then collapse with neighbours."""
        assert tokenize(text, punctuation=True, strip=True) == expected
