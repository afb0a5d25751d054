"""Tests for marked section keyword resolution."""

import pytest

from sgml_event_parser.tokenization.marked_sections import (
    MarkedSectionHandling,
    MarkedSectionStatus,
)


class TestMarkedSectionStatus:
    """Tests for MarkedSectionStatus."""

    @pytest.mark.parametrize("keyword, expected", [
        ("CDATA", MarkedSectionStatus.CDATA),
        ("rcdata", MarkedSectionStatus.RCDATA),
        (" Include\n", MarkedSectionStatus.INCLUDE),
        ("IGNORE", MarkedSectionStatus.IGNORE),
    ])
    def test_from_keyword(self, keyword, expected):
        """Test single keywords, case-insensitively."""
        assert MarkedSectionStatus.from_keyword(keyword) is expected

    def test_from_keyword_rejects_unknown(self):
        """Test that unknown keywords raise."""
        with pytest.raises(ValueError, match="Invalid marked section keyword"):
            MarkedSectionStatus.from_keyword("TEMP")

    @pytest.mark.parametrize("keywords, expected", [
        ("", MarkedSectionStatus.INCLUDE),
        ("  ", MarkedSectionStatus.INCLUDE),
        ("TEMP", MarkedSectionStatus.INCLUDE),
        ("INCLUDE RCDATA", MarkedSectionStatus.RCDATA),
        ("RCDATA CDATA", MarkedSectionStatus.CDATA),
        ("CDATA IGNORE INCLUDE", MarkedSectionStatus.IGNORE),
        ("temp\tcdata\n", MarkedSectionStatus.CDATA),
    ])
    def test_from_keywords_precedence(self, keywords, expected):
        """Test that the highest precedence keyword wins."""
        assert MarkedSectionStatus.from_keywords(keywords) is expected

    def test_from_keywords_rejects_unknown(self):
        """Test that one bad keyword invalidates the list."""
        with pytest.raises(ValueError):
            MarkedSectionStatus.from_keywords("CDATA BOGUS")

    def test_precedence_order(self):
        """Test IGNORE > CDATA > RCDATA > INCLUDE."""
        ordered = sorted(MarkedSectionStatus, key=lambda status: status.precedence)
        assert ordered == [
            MarkedSectionStatus.INCLUDE,
            MarkedSectionStatus.RCDATA,
            MarkedSectionStatus.CDATA,
            MarkedSectionStatus.IGNORE,
        ]

    def test_is_character_data(self):
        """Test the character data statuses."""
        assert MarkedSectionStatus.CDATA.is_character_data
        assert MarkedSectionStatus.RCDATA.is_character_data
        assert not MarkedSectionStatus.INCLUDE.is_character_data
        assert not MarkedSectionStatus.IGNORE.is_character_data


class TestMarkedSectionHandling:
    """Tests for MarkedSectionHandling.parse_keywords."""

    def test_default_mode_accepts_single_character_data_keyword(self):
        """Test the default character data only mode."""
        mode = MarkedSectionHandling.ACCEPT_ONLY_CHARACTER_DATA

        assert mode.parse_keywords("CDATA") is MarkedSectionStatus.CDATA
        assert mode.parse_keywords(" RCDATA ") is MarkedSectionStatus.RCDATA

    @pytest.mark.parametrize("keywords", ["INCLUDE", "IGNORE", "", "CDATA CDATA", "TEMP CDATA"])
    def test_default_mode_rejects_everything_else(self, keywords):
        """Test rejected keyword lists in the default mode."""
        assert MarkedSectionHandling.ACCEPT_ONLY_CHARACTER_DATA.parse_keywords(keywords) is None

    @pytest.mark.parametrize("mode", [
        MarkedSectionHandling.KEEP_UNMODIFIED,
        MarkedSectionHandling.EXPAND_ALL,
    ])
    def test_other_modes_resolve_full_lists(self, mode):
        """Test that the other modes resolve any valid keyword list."""
        assert mode.parse_keywords("TEMP IGNORE CDATA") is MarkedSectionStatus.IGNORE
        assert mode.parse_keywords("") is MarkedSectionStatus.INCLUDE
        assert mode.parse_keywords("BOGUS") is None

    def test_values(self):
        """Test the string values used on the command line."""
        assert MarkedSectionHandling("keep") is MarkedSectionHandling.KEEP_UNMODIFIED
        assert MarkedSectionHandling("character-data") is MarkedSectionHandling.ACCEPT_ONLY_CHARACTER_DATA
        assert MarkedSectionHandling("expand") is MarkedSectionHandling.EXPAND_ALL
