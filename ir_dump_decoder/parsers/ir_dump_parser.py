"""Parser for raw IR signals files.

Format::

    Filetype: IR signals file
    Version: 1
    #
    name: Power
    type: raw
    frequency: 38000
    duty_cycle: 0.330000
    data: 550 17700 2972 8930 550 550 550 1650 550

The header is followed by zero or more records, each introduced by a ``#``
comment line. Parsing is all-or-nothing: the first deviation from the grammar
raises DumpFormatError and no signals are returned.
"""

from __future__ import annotations

import re

from ir_dump_decoder.models import DumpFile, DumpFormatError, RawSignal, SignalKind
from .base_parser import BaseParser

FILETYPE_HEADER = "Filetype: IR signals file"

U32_MAX = 0xFFFFFFFF
_U32_MAX_DIGITS = len(str(U32_MAX))

_DIGITS_RE = re.compile(r"\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_LINE_END_RE = re.compile(r"\r?\n")
_REST_OF_LINE_RE = re.compile(r"[^\r\n]*")
_TRAILING_WS_RE = re.compile(r"\s*\Z")

_KINDS = {kind.value: kind for kind in SignalKind}


class _DumpReader:
    """Cursor over the document text; every method consumes or raises."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, expected: str, pos: int | None = None) -> DumpFormatError:
        return DumpFormatError.at(self.text, self.pos if pos is None else pos, expected)

    def at_end(self) -> bool:
        return _TRAILING_WS_RE.match(self.text, self.pos) is not None

    def literal(self, tag: str) -> None:
        if not self.text.startswith(tag, self.pos):
            raise self.error(repr(tag))
        self.pos += len(tag)

    def line_ending(self) -> None:
        m = _LINE_END_RE.match(self.text, self.pos)
        if not m:
            raise self.error("line ending")
        self.pos = m.end()

    def rest_of_line(self) -> str:
        m = _REST_OF_LINE_RE.match(self.text, self.pos)
        self.pos = m.end()
        return m.group()

    def u32(self) -> int:
        m = _DIGITS_RE.match(self.text, self.pos)
        if not m:
            raise self.error("decimal digits")
        # length first: int() refuses very long digit strings
        digits = m.group().lstrip("0") or "0"
        if len(digits) > _U32_MAX_DIGITS or int(digits) > U32_MAX:
            raise self.error("unsigned 32-bit integer")
        value = int(digits)
        self.pos = m.end()
        return value

    def decimal_float(self) -> float:
        m = _FLOAT_RE.match(self.text, self.pos)
        if not m:
            raise self.error("float")
        self.pos = m.end()
        return float(m.group())

    def u32_list(self) -> list[int]:
        """Space separated integers; may be empty."""
        values: list[int] = []
        if not _DIGITS_RE.match(self.text, self.pos):
            return values
        values.append(self.u32())
        while self.text.startswith(" ", self.pos) and _DIGITS_RE.match(self.text, self.pos + 1):
            self.pos += 1
            values.append(self.u32())
        return values

    def signal_kind(self) -> SignalKind:
        start = self.pos
        token = self.rest_of_line()
        kind = _KINDS.get(token)
        if kind is None:
            expected = " or ".join(repr(k) for k in _KINDS)
            raise self.error(f"signal type {expected}", pos=start)
        return kind


def _version(reader: _DumpReader) -> int:
    reader.literal("Version: ")
    return reader.u32()


def _saved_signal(reader: _DumpReader) -> RawSignal:
    reader.literal("#")
    reader.rest_of_line()
    reader.line_ending()

    reader.literal("name: ")
    name = reader.rest_of_line()
    reader.line_ending()

    reader.literal("type: ")
    kind = reader.signal_kind()
    reader.line_ending()

    reader.literal("frequency: ")
    frequency = reader.u32()
    reader.line_ending()

    reader.literal("duty_cycle: ")
    duty_cycle = reader.decimal_float()
    reader.line_ending()

    reader.literal("data: ")
    data = reader.u32_list()
    reader.line_ending()

    return RawSignal(
        name=name,
        kind=kind,
        frequency=frequency,
        duty_cycle=duty_cycle,
        data=data,
    )


def parse_dump(text: str) -> DumpFile:
    """Parse a complete IR signals file.

    Raises:
        DumpFormatError: With the position and the expected token of the
            first mismatch.
    """
    reader = _DumpReader(text)

    reader.literal(FILETYPE_HEADER)
    reader.line_ending()

    version = _version(reader)
    reader.line_ending()

    signals = []
    while not reader.at_end():
        signals.append(_saved_signal(reader))

    return DumpFile(version=version, signals=tuple(signals))


class IRDumpParser(BaseParser):
    """Parser for Flipper-style raw IR signals files."""

    name = "ir_raw"
    HEADER = FILETYPE_HEADER

    def parse_text(self, text: str) -> DumpFile:
        return parse_dump(text)


# Register
from .parser_registry import parser_registry
parser_registry.register(IRDumpParser(), is_default=True)
