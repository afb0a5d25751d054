"""Core parser API with progressive disclosure for SGML event parsing.

This module provides the parsing API, from simple module-level functions to a
configured, reusable :class:`Parser`. Parsing is all-or-nothing: malformed
input raises a :class:`~sgml_event_parser.shared.errors.ParseError` and no
partial event stream is returned.
"""

import time
from pathlib import Path
from typing import Optional, Union

from sgml_event_parser.shared import get_logger
from sgml_event_parser.shared.config import ParserBuilder, ParserConfig
from sgml_event_parser.shared.errors import SgmlError
from sgml_event_parser.tokenization import SgmlFragment, SgmlTokenizer

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion
DEFAULT_ENCODING = "utf-8"


class Parser:
    """SGML parser bound to a configuration.

    A parser holds no per-parse state, so one instance may be reused, and
    shared between threads, for any number of documents.

    Attributes:
        config: Parsing policy applied to every document
        correlation_id: Correlation ID for request tracking

    Examples:
        Default configuration:
        >>> parser = Parser()
        >>> [str(event) for event in parser.parse("<p>Hello</p>")]
        ['<p', '>', 'Hello', '</p>']

        Configured through the builder:
        >>> parser = Parser.builder().lowercase_names().build()
        >>> str(parser.parse("<P CLASS=x>"))
        '<p class="x">'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            config: Parsing policy (defaults to :class:`ParserConfig` defaults)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "sgml_parser")

    @staticmethod
    def builder() -> ParserBuilder:
        """Start configuring a parser with default settings."""
        return ParserBuilder()

    def parse(self, text: str) -> SgmlFragment:
        """Parse a complete document into a fragment of events.

        Args:
            text: Decoded document text

        Returns:
            SgmlFragment with the events in document order

        Raises:
            TypeError: text is not a string
            ParseError: The document is malformed or references an
                undefined entity
        """
        if not isinstance(text, str):
            raise TypeError(f"expected str, got {type(text).__name__}")

        start_time = time.perf_counter()
        self.logger.info(
            "Starting parse operation",
            extra={
                "content_length": len(text),
                "content_preview": text[:PREVIEW_LENGTH],
            }
        )

        tokenizer = SgmlTokenizer(self.config, correlation_id=self.correlation_id)
        try:
            fragment = tokenizer.tokenize(text)
        except SgmlError:
            self.logger.error(
                "Parse operation failed",
                extra={"processing_time_ms": _elapsed_ms(start_time)}
            )
            raise

        self.logger.info(
            "Parse operation completed",
            extra={
                "event_count": len(fragment),
                "processing_time_ms": _elapsed_ms(start_time),
            }
        )
        return fragment

    def __repr__(self) -> str:
        return f"Parser(config={self.config!r})"


def parse(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> SgmlFragment:
    """Parse SGML text into a fragment of events.

    Args:
        text: Decoded document text
        config: Optional parsing policy (defaults apply otherwise)
        correlation_id: Optional correlation ID for request tracking

    Examples:
        >>> fragment = parse("<!DOCTYPE test><test>text</test>")
        >>> len(fragment)
        5
    """
    return Parser(config, correlation_id).parse(text)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = DEFAULT_ENCODING,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> SgmlFragment:
    """Read a file as text and parse it.

    No encoding detection takes place; the file is decoded with the given
    encoding and decoding errors propagate. Line endings are kept as written.

    Args:
        file_path: Path to the SGML file
        encoding: Text encoding of the file
        config: Optional parsing policy
        correlation_id: Optional correlation ID for request tracking

    Raises:
        OSError: The file cannot be read
        UnicodeDecodeError: The file is not valid in the given encoding
        ParseError: The document is malformed
    """
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": encoding}
    )

    try:
        with path_obj.open(encoding=encoding, newline="") as file:
            content = file.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(
            "Unable to read file",
            extra={"file_path": str(path_obj), "error": str(e)}
        )
        raise

    return Parser(config, correlation_id).parse(content)


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * MS_PER_SECOND
