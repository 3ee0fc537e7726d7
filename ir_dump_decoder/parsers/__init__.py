"""Pluggable parser system for IR dump files."""

from .base_parser import BaseParser
from .parser_registry import ParserRegistry, parser_registry
from .ir_dump_parser import IRDumpParser, parse_dump, FILETYPE_HEADER


__all__ = [
    "BaseParser",
    "ParserRegistry",
    "parser_registry",
    "IRDumpParser",
    "parse_dump",
    "FILETYPE_HEADER",
]
