"""Registry of dump parsers, selected by name or by sniffing the header line."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ir_dump_decoder.models import DumpFile
from .base_parser import BaseParser, PathLike

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Registry for pluggable dump parsers.

    Each parser declares the header line of the format it reads. Files and
    in-memory documents are routed to the first parser whose header matches;
    when none matches, the default parser is used so that its grammar reports
    the mismatch with a position.
    """

    def __init__(self):
        self._parsers: dict[str, BaseParser] = {}
        self._default_parser: Optional[BaseParser] = None

    def register(self, parser: BaseParser, is_default: bool = False) -> None:
        """Register a parser.

        Args:
            parser: The parser instance to register
            is_default: Whether unmatched input goes to this parser

        Raises:
            ValueError: If a different parser already uses the same name.
        """
        existing = self._parsers.get(parser.name)
        if existing is not None and type(existing) is not type(parser):
            raise ValueError(f"Parser name '{parser.name}' is already registered")
        self._parsers[parser.name] = parser
        if is_default:
            self._default_parser = parser

    def get_parser(self, name: str) -> Optional[BaseParser]:
        return self._parsers.get(name)

    def get_default_parser(self) -> Optional[BaseParser]:
        return self._default_parser

    def get_parser_names(self) -> list[str]:
        return list(self._parsers)

    def _detect(self, matches: Callable[[BaseParser], bool], source: str) -> Optional[BaseParser]:
        for parser in self._parsers.values():
            if parser.HEADER is not None and matches(parser):
                logger.debug("Detected %s format for %s", parser.name, source)
                return parser
        if self._default_parser is not None:
            logger.debug(
                "No header matched for %s, using default parser %s",
                source, self._default_parser.name,
            )
        return self._default_parser

    def detect_parser(self, file_path: PathLike) -> Optional[BaseParser]:
        """Parser whose header matches the file's first line, else the default."""
        return self._detect(lambda p: p.can_parse(file_path), str(file_path))

    def detect_text_parser(self, text: str) -> Optional[BaseParser]:
        """Parser whose header matches the document's first line, else the default."""
        return self._detect(lambda p: p.can_parse_text(text), "in-memory document")

    def _select(self, parser_name: Optional[str], detect: Callable[[], Optional[BaseParser]]) -> BaseParser:
        if parser_name:
            parser = self.get_parser(parser_name)
            if not parser:
                raise ValueError(f"Parser '{parser_name}' not found")
            return parser

        parser = detect()
        if not parser:
            raise ValueError("No suitable parser found")
        return parser

    def parse(self, file_path: PathLike, parser_name: Optional[str] = None) -> DumpFile:
        """Parse a file with the named parser or the detected one.

        Raises:
            ValueError: If the named parser is unknown or none is registered.
            DumpFormatError: If the file content is malformed.
            OSError: If the file cannot be read.
        """
        parser = self._select(parser_name, lambda: self.detect_parser(file_path))
        return parser.parse(file_path)

    def parse_text(self, text: str, parser_name: Optional[str] = None) -> DumpFile:
        """Parse an in-memory document; same selection rules as ``parse``."""
        parser = self._select(parser_name, lambda: self.detect_text_parser(text))
        return parser.parse_text(text)


# Singleton instance
parser_registry = ParserRegistry()
