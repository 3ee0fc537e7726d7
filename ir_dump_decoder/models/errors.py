"""Exceptions raised while parsing dumps and decoding signals."""

from __future__ import annotations

from typing import Any, Sequence


class IRDumpError(ValueError):
    """Base class for all dump parsing and decoding errors."""


class DumpFormatError(IRDumpError):
    """The dump text does not follow the IR signals file grammar.

    The whole document is rejected; no partial result is produced.
    """

    def __init__(
        self,
        position: int,
        expected: str,
        line: int = 1,
        column: int = 1,
        content: str = "",
    ):
        self.position = position
        self.expected = expected
        self.line = line
        self.column = column
        self.content = content
        super().__init__(
            f"line {line}, column {column}: expected {expected}, got {content!r}"
        )

    @classmethod
    def at(cls, text: str, position: int, expected: str) -> DumpFormatError:
        """Build an error for ``position`` within ``text``."""
        line = text.count("\n", 0, position) + 1
        line_start = text.rfind("\n", 0, position) + 1
        line_end = text.find("\n", position)
        if line_end == -1:
            line_end = len(text)
        content = text[line_start:line_end].rstrip("\r")
        return cls(
            position=position,
            expected=expected,
            line=line,
            column=position - line_start + 1,
            content=content,
        )

    def __reduce__(self):
        return (
            self.__class__,
            (self.position, self.expected, self.line, self.column, self.content),
        )


class SignalDecodeError(IRDumpError):
    """A signal's timings don't follow the packet grammar.

    Only the offending signal is affected; other signals of the same dump
    can still be decoded.
    """

    def __init__(
        self,
        rule: str,
        position: int,
        remaining: Sequence[Any] = (),
        signal_name: str | None = None,
    ):
        self.rule = rule
        self.position = position
        self.remaining = tuple(remaining)
        self.signal_name = signal_name
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"signal {self.signal_name!r}: " if self.signal_name else ""
        context = ", ".join(str(slot) for slot in self.remaining) or "end of stream"
        return f"{where}{self.rule} failed at slot {self.position} (next: {context})"

    def with_signal_name(self, signal_name: str) -> SignalDecodeError:
        """Copy of this error tagged with the signal it came from."""
        return SignalDecodeError(self.rule, self.position, self.remaining, signal_name)

    def __reduce__(self):
        return (
            self.__class__,
            (self.rule, self.position, self.remaining, self.signal_name),
        )
