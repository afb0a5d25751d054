"""Tests for SGML syntax helpers."""

import pytest

from sgml_event_parser.character.syntax import (
    is_blank,
    is_name_char,
    is_name_start_char,
    is_sgml_whitespace,
    skip_whitespace,
    trim_sgml_whitespace,
)


class TestWhitespace:
    """Tests for SGML whitespace handling."""

    @pytest.mark.parametrize("char", [" ", "\t", "\r", "\n"])
    def test_sgml_whitespace(self, char):
        """Test the four whitespace characters."""
        assert is_sgml_whitespace(char)

    @pytest.mark.parametrize("char", ["a", "\x0c", "\xa0", "\u2003", ""])
    def test_not_sgml_whitespace(self, char):
        """Test that other Unicode whitespace is not SGML whitespace."""
        assert not is_sgml_whitespace(char)

    def test_is_blank(self):
        """Test blank detection."""
        assert is_blank("")
        assert is_blank(" \t\r\n")
        assert not is_blank(" \xa0 ")

    def test_trim_keeps_other_whitespace(self):
        """Test that only SGML whitespace is trimmed."""
        assert trim_sgml_whitespace("\n\t hello \r\n") == "hello"
        assert trim_sgml_whitespace("\xa0hello\xa0") == "\xa0hello\xa0"

    def test_skip_whitespace(self):
        """Test skipping whitespace within bounds."""
        assert skip_whitespace("a   b", 1, 5) == 4
        assert skip_whitespace("a   b", 1, 3) == 3
        assert skip_whitespace("ab", 1, 2) == 1


class TestNames:
    """Tests for name character classes."""

    @pytest.mark.parametrize("char", ["a", "Z", "_", ":", "é"])
    def test_name_start(self, char):
        """Test valid name start characters."""
        assert is_name_start_char(char)

    @pytest.mark.parametrize("char", ["1", "-", ".", " ", "&"])
    def test_not_name_start(self, char):
        """Test characters that cannot start a name."""
        assert not is_name_start_char(char)

    @pytest.mark.parametrize("char", ["a", "1", "-", ".", ":", "_"])
    def test_name_char(self, char):
        """Test valid name characters."""
        assert is_name_char(char)

    @pytest.mark.parametrize("char", [" ", ";", "=", ">", "&"])
    def test_not_name_char(self, char):
        """Test characters that end a name."""
        assert not is_name_char(char)
