"""Main CLI entry point for the sgml-events command-line tool.

Parses SGML files and prints their event streams as text, JSON, or
re-rendered markup.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from sgml_event_parser import __version__
from sgml_event_parser.api import parse_file
from sgml_event_parser.shared.config import (
    ConfigError,
    ParserBuilder,
    ParserConfig,
)
from sgml_event_parser.shared.errors import SgmlError
from sgml_event_parser.shared.logging import get_logger
from sgml_event_parser.tokenization import (
    Attribute,
    Character,
    MarkedSection,
    MarkedSectionHandling,
    SgmlEvent,
    SgmlFragment,
)

OUTPUT_FORMATS = ("text", "json", "markup")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="sgml-events",
        description="Parse SGML documents into streams of events"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse SGML files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="SGML files to parse"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)"
    )
    parse_parser.add_argument(
        "--encoding", "-e",
        default="utf-8",
        help="Text encoding of the input files (default: utf-8)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON parser configuration file"
    )
    case_group = parse_parser.add_mutually_exclusive_group()
    case_group.add_argument(
        "--lowercase",
        action="store_true",
        help="Convert tag and attribute names to lowercase"
    )
    case_group.add_argument(
        "--uppercase",
        action="store_true",
        help="Convert tag and attribute names to uppercase"
    )
    parse_parser.add_argument(
        "--no-trim",
        action="store_true",
        help="Keep whitespace surrounding text"
    )
    parse_parser.add_argument(
        "--marked-sections",
        choices=[mode.value for mode in MarkedSectionHandling],
        help="Marked section handling (default: character-data)"
    )
    parse_parser.add_argument(
        "--ignore-declarations",
        action="store_true",
        help="Drop markup declarations from the output"
    )
    parse_parser.add_argument(
        "--ignore-pis",
        action="store_true",
        help="Drop processing instructions from the output"
    )
    parse_parser.add_argument(
        "--entities",
        type=Path,
        help="JSON file mapping entity names to replacement text"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_entities(path: Path) -> Dict[str, str]:
    """Load an entity map from a JSON object of name/replacement strings.

    Raises:
        ConfigError: The file is not a JSON object of strings
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not load entities from {path}: {e}") from e

    if not isinstance(data, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in data.items()
    ):
        raise ConfigError(f"Entities file {path} must hold a JSON object of strings")
    return data


def build_config(args: argparse.Namespace) -> ParserConfig:
    """Combine the configuration file and command-line overrides."""
    base = None
    if args.config:
        try:
            base = ParserConfig.from_json(args.config.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not load configuration from {args.config}: {e}") from e

    builder = ParserBuilder(base)
    if args.lowercase:
        builder.lowercase_names()
    elif args.uppercase:
        builder.uppercase_names()
    if args.no_trim:
        builder.trim_whitespace(False)
    if args.marked_sections:
        builder.marked_section_handling(MarkedSectionHandling(args.marked_sections))
    if args.ignore_declarations:
        builder.ignore_markup_declarations()
    if args.ignore_pis:
        builder.ignore_processing_instructions()
    if args.entities:
        builder.expand_entities(load_entities(args.entities))
    return builder.into_config()


def event_to_dict(event: SgmlEvent) -> Dict[str, Any]:
    """Describe an event as a JSON-compatible dictionary."""
    result: Dict[str, Any] = {"type": event.event_type.name}
    if isinstance(event, Attribute):
        result["name"] = event.name
        result["value"] = event.value.as_str() if event.value is not None else None
    elif isinstance(event, Character):
        result["text"] = event.data.as_str()
    elif isinstance(event, MarkedSection):
        result["status_keywords"] = event.status_keywords
        result["section"] = event.section
    elif hasattr(event, "name"):
        result["name"] = event.name
    elif hasattr(event, "text"):
        result["text"] = event.text
    return result


def format_events(fragment: SgmlFragment, format_type: str) -> str:
    """Format one document's events as text or markup."""
    if format_type == "markup":
        return str(fragment)

    return "\n".join(
        f"{event.event_type.name} {json.dumps(str(event), ensure_ascii=False)}"
        for event in fragment
    )


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format the results of several files for output."""
    if format_type == "json":
        return json.dumps(
            [
                {
                    "file": result["file"],
                    "success": result["success"],
                    "events": [event_to_dict(event) for event in result["fragment"]],
                }
                if result["success"] else
                {"file": result["file"], "success": False, "error": result["error"]}
                for result in results
            ],
            indent=2,
            ensure_ascii=False,
        )

    successful = [result for result in results if result["success"]]
    if len(results) == 1:
        return format_events(successful[0]["fragment"], format_type) if successful else ""

    sections = []
    for result in successful:
        sections.append(f"==> {result['file']} <==")
        sections.append(format_events(result["fragment"], format_type))
    return "\n".join(sections)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    logger = get_logger(__name__, None, "cli")
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    results: List[Dict[str, Any]] = []
    for path in args.paths:
        try:
            fragment = parse_file(path, encoding=args.encoding, config=config)
        except (OSError, UnicodeDecodeError, LookupError, SgmlError) as e:
            logger.warning("Failed to process file", extra={"file": str(path), "error": str(e)})
            if not args.quiet:
                print(f"{path}: {e}", file=sys.stderr)
            results.append({"file": str(path), "success": False, "error": str(e)})
        else:
            results.append({"file": str(path), "success": True, "fragment": fragment})

    output = format_results(results, args.format)
    if output:
        print(output)

    return 0 if all(result["success"] for result in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity; failures are reported on stderr by the command itself
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.CRITICAL)

    try:
        if args.command == "parse":
            return cmd_parse(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
