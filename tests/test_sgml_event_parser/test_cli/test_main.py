"""Tests for the CLI main module."""

import json
from unittest.mock import patch

import pytest

from sgml_event_parser.cli.main import (
    build_config,
    create_argument_parser,
    event_to_dict,
    format_events,
    load_entities,
    main,
)
from sgml_event_parser.character.data import CData
from sgml_event_parser.shared.config import ConfigError, NameNormalization
from sgml_event_parser.tokenization import (
    Attribute,
    Character,
    CloseStartTag,
    MarkedSection,
    MarkedSectionHandling,
    MarkupDeclaration,
    OpenStartTag,
    SgmlFragment,
)


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "doc.sgml"
    path.write_text('<!DOCTYPE x><P CLASS=intro>Caf&eacute;</P>', encoding="utf-8")
    return path


@pytest.fixture
def entities_file(tmp_path):
    path = tmp_path / "entities.json"
    path.write_text(json.dumps({"eacute": "\xe9"}), encoding="utf-8")
    return path


class TestArgumentParser:
    """Test argument parser creation."""

    def test_parser_creation(self):
        """Test that the argument parser is created correctly."""
        parser = create_argument_parser()
        assert parser.prog == "sgml-events"

    def test_parse_command_defaults(self):
        """Test parse command defaults."""
        args = create_argument_parser().parse_args(["parse", "doc.sgml"])

        assert args.command == "parse"
        assert [str(path) for path in args.paths] == ["doc.sgml"]
        assert args.format == "text"
        assert args.encoding == "utf-8"
        assert args.marked_sections is None
        assert args.lowercase is False
        assert args.no_trim is False

    def test_parse_command_options(self):
        """Test parse command options."""
        args = create_argument_parser().parse_args([
            "--verbose", "parse", "a.sgml", "b.sgml",
            "--format", "json", "--encoding", "latin-1", "--uppercase", "--no-trim",
            "--marked-sections", "expand", "--ignore-declarations", "--ignore-pis",
        ])

        assert args.verbose is True
        assert len(args.paths) == 2
        assert args.format == "json"
        assert args.encoding == "latin-1"
        assert args.uppercase is True
        assert args.no_trim is True
        assert args.marked_sections == "expand"
        assert args.ignore_declarations is True
        assert args.ignore_pis is True

    def test_case_options_are_exclusive(self):
        """Test that --lowercase and --uppercase conflict."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["parse", "a", "--lowercase", "--uppercase"])

    def test_invalid_marked_section_mode(self):
        """Test that unknown modes are rejected."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["parse", "a", "--marked-sections", "all"])


class TestConfiguration:
    """Test building the parser configuration from arguments."""

    def test_build_config(self, entities_file):
        """Test command-line overrides."""
        args = create_argument_parser().parse_args([
            "parse", "a", "--lowercase", "--no-trim", "--marked-sections", "keep",
            "--ignore-pis", "--entities", str(entities_file),
        ])

        config = build_config(args)

        assert config.name_normalization is NameNormalization.TO_LOWERCASE
        assert config.trim_whitespace is False
        assert config.marked_section_handling is MarkedSectionHandling.KEEP_UNMODIFIED
        assert config.ignore_processing_instructions is True
        assert config.ignore_markup_declarations is False
        assert config.entity_lookup == {"eacute": "\xe9"}

    def test_build_config_from_file(self, tmp_path):
        """Test loading a JSON configuration file."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "trim_whitespace": False,
            "marked_section_handling": "EXPAND_ALL",
        }), encoding="utf-8")
        args = create_argument_parser().parse_args(
            ["parse", "a", "--config", str(config_path), "--uppercase"]
        )

        config = build_config(args)

        assert config.trim_whitespace is False
        assert config.marked_section_handling is MarkedSectionHandling.EXPAND_ALL
        assert config.name_normalization is NameNormalization.TO_UPPERCASE

    def test_invalid_config_file(self, tmp_path):
        """Test that a broken configuration file raises ConfigError."""
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json", encoding="utf-8")
        args = create_argument_parser().parse_args(["parse", "a", "--config", str(config_path)])

        with pytest.raises(ConfigError):
            build_config(args)

    def test_load_entities(self, entities_file):
        """Test loading an entity map."""
        assert load_entities(entities_file) == {"eacute": "\xe9"}

    def test_load_entities_rejects_non_strings(self, tmp_path):
        """Test that entity values must be strings."""
        path = tmp_path / "entities.json"
        path.write_text(json.dumps({"a": 1}), encoding="utf-8")

        with pytest.raises(ConfigError, match="JSON object of strings"):
            load_entities(path)

    def test_load_entities_missing_file(self, tmp_path):
        """Test a missing entities file."""
        with pytest.raises(ConfigError, match="Could not load entities"):
            load_entities(tmp_path / "missing.json")


class TestFormatting:
    """Test event output formatting."""

    def test_event_to_dict(self):
        """Test JSON descriptions of events."""
        assert event_to_dict(OpenStartTag("p")) == {"type": "OPEN_START_TAG", "name": "p"}
        assert event_to_dict(Attribute("id", CData("x"))) == {
            "type": "ATTRIBUTE", "name": "id", "value": "x"
        }
        assert event_to_dict(Attribute("ismap")) == {
            "type": "ATTRIBUTE", "name": "ismap", "value": None
        }
        assert event_to_dict(CloseStartTag()) == {"type": "CLOSE_START_TAG"}
        assert event_to_dict(Character(CData("a&b"))) == {"type": "CHARACTER", "text": "a&b"}
        assert event_to_dict(MarkupDeclaration("<!x>")) == {
            "type": "MARKUP_DECLARATION", "text": "<!x>"
        }
        assert event_to_dict(MarkedSection("IGNORE", "y")) == {
            "type": "MARKED_SECTION", "status_keywords": "IGNORE", "section": "y"
        }

    def test_format_text(self):
        """Test the one-event-per-line text format."""
        fragment = SgmlFragment([OpenStartTag("p"), CloseStartTag(), Character(CData("a\nb"))])

        assert format_events(fragment, "text") == (
            'OPEN_START_TAG "<p"\n'
            'CLOSE_START_TAG ">"\n'
            'CHARACTER "a\\nb"'
        )

    def test_format_markup(self):
        """Test the markup format."""
        fragment = SgmlFragment([OpenStartTag("p"), Attribute("id", CData("x")), CloseStartTag()])
        assert format_events(fragment, "markup") == '<p id="x">'


class TestMain:
    """Test main CLI entry point."""

    def test_main_no_command(self, capsys):
        """Test main with no command shows help."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_main_parse_text(self, document, entities_file, capsys):
        """Test the default text output."""
        result = main(["parse", str(document), "--entities", str(entities_file), "--lowercase"])

        assert result == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            'MARKUP_DECLARATION "<!DOCTYPE x>"',
            'OPEN_START_TAG "<p"',
            'ATTRIBUTE "class=\\"intro\\""',
            'CLOSE_START_TAG ">"',
            'CHARACTER "Caf\xe9"',
            'END_TAG "</p>"',
        ]

    def test_main_parse_markup(self, document, entities_file, capsys):
        """Test the markup output."""
        result = main([
            "parse", str(document), "--format", "markup",
            "--entities", str(entities_file), "--ignore-declarations",
        ])

        assert result == 0
        assert capsys.readouterr().out == '<P CLASS="intro">Caf\xe9</P>\n'

    def test_main_parse_json(self, document, entities_file, capsys):
        """Test the JSON output."""
        result = main(["parse", str(document), "--format", "json", "--entities", str(entities_file)])

        assert result == 0
        output = json.loads(capsys.readouterr().out)
        assert output[0]["file"] == str(document)
        assert output[0]["success"] is True
        assert output[0]["events"][1] == {"type": "OPEN_START_TAG", "name": "P"}

    def test_main_parse_error(self, document, capsys):
        """Test that an undefined entity fails with exit code 1."""
        result = main(["parse", str(document)])

        assert result == 1
        captured = capsys.readouterr()
        assert "entity 'eacute' is not defined" in captured.err
        assert captured.out == ""

    def test_main_multiple_files(self, tmp_path, capsys):
        """Test that every file is processed even after a failure."""
        good = tmp_path / "good.sgml"
        good.write_text("<a>", encoding="utf-8")
        bad = tmp_path / "bad.sgml"
        bad.write_text("<a", encoding="utf-8")

        result = main(["parse", str(bad), str(good)])

        assert result == 1
        captured = capsys.readouterr()
        assert f"==> {good} <==" in captured.out
        assert str(bad) in captured.err

    def test_main_missing_file(self, tmp_path, capsys):
        """Test a missing input file."""
        assert main(["parse", str(tmp_path / "missing.sgml")]) == 1
        assert "missing.sgml" in capsys.readouterr().err

    def test_main_quiet(self, tmp_path, capsys):
        """Test that --quiet suppresses per-file error messages."""
        bad = tmp_path / "bad.sgml"
        bad.write_text("<a", encoding="utf-8")

        assert main(["--quiet", "parse", str(bad)]) == 1
        assert capsys.readouterr().err == ""

    def test_main_invalid_entities_file(self, document, tmp_path, capsys):
        """Test that configuration problems are reported."""
        assert main(["parse", str(document), "--entities", str(tmp_path / "none.json")]) == 1
        assert "Could not load entities" in capsys.readouterr().err

    def test_main_keyboard_interrupt(self, document):
        """Test handling of keyboard interrupt."""
        with patch("sgml_event_parser.cli.main.cmd_parse", side_effect=KeyboardInterrupt):
            assert main(["parse", str(document)]) == 130

    @patch("sgml_event_parser.cli.main.cmd_parse")
    def test_main_parse_command(self, mock_cmd_parse, document):
        """Test main routes to the parse command."""
        mock_cmd_parse.return_value = 0

        assert main(["parse", str(document)]) == 0
        mock_cmd_parse.assert_called_once()
