"""Base class for dump file parsers.

Subclasses implement ``parse_text`` as a pure function of the document text;
file handling and format sniffing live here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from ir_dump_decoder.models import DumpFile

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class BaseParser(ABC):
    name: str = "base"

    # Literal first line identifying the format (None accepts anything)
    HEADER: str | None = None

    ENCODING = "utf-8-sig"

    @abstractmethod
    def parse_text(self, text: str) -> DumpFile:
        """Parse a complete in-memory document.

        Raises:
            DumpFormatError: On the first deviation from the grammar.
        """
        raise NotImplementedError

    def parse(self, file_path: PathLike) -> DumpFile:
        """Read ``file_path`` and parse its content."""
        with open(file_path, "r", encoding=self.ENCODING) as f:
            text = f.read()
        logger.debug("Read %d characters from %s", len(text), file_path)
        return self.parse_text(text)

    def matches_header(self, first_line: str) -> bool:
        if self.HEADER is None:
            return True
        return first_line.rstrip("\r\n") == self.HEADER

    def can_parse_text(self, text: str) -> bool:
        """Sniff the first line of an in-memory document."""
        return self.matches_header(text.partition("\n")[0])

    def can_parse(self, file_path: PathLike) -> bool:
        """Sniff the first line of the file. Never raises."""
        if self.HEADER is None:
            return True
        try:
            with open(file_path, "r", encoding=self.ENCODING) as f:
                first_line = f.readline()
        except (OSError, UnicodeDecodeError):
            return False
        return self.matches_header(first_line)
