"""Data models for IR signal dumps and decoding results."""

from .data_types import (
    SignalKind,
    RawSignal,
    DumpFile,
    Packet,
    ParsedSignal,
    DecodeIssue,
    DecodeResult,
)
from .errors import (
    IRDumpError,
    DumpFormatError,
    SignalDecodeError,
)

__all__ = [
    "SignalKind",
    "RawSignal",
    "DumpFile",
    "Packet",
    "ParsedSignal",
    "DecodeIssue",
    "DecodeResult",
    "IRDumpError",
    "DumpFormatError",
    "SignalDecodeError",
]
