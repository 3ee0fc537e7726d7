"""Core data types for IR dump parsing and packet decoding."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ir_dump_decoder.decoding.protocol import ProtocolTiming


class SignalKind(Enum):
    """Kinds of signal records in an IR dump."""
    RAW = "raw"


def _single_precision(value: float) -> float:
    """Round a Python float to the nearest IEEE-754 single-precision value."""
    return array("f", [value])[0]


@dataclass(frozen=True)
class RawSignal:
    """A single captured IR transmission.

    ``data`` holds microsecond durations: the first value is the first pulse,
    the second value the pause after it, the third the second pulse, and so on.
    """
    name: str
    kind: SignalKind
    frequency: int
    duty_cycle: float
    data: tuple[int, ...] = field(default=(), repr=False)

    def __post_init__(self):
        object.__setattr__(self, "duty_cycle", _single_precision(self.duty_cycle))
        object.__setattr__(self, "data", tuple(self.data))

    @property
    def duration_count(self) -> int:
        """Number of pulse/pause durations in the capture."""
        return len(self.data)

    @property
    def total_duration(self) -> int:
        """Sum of all durations in microseconds."""
        return sum(self.data)


@dataclass(frozen=True)
class DumpFile:
    """Result of successfully parsing an IR signals file."""
    version: int
    signals: tuple[RawSignal, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "signals", tuple(self.signals))

    def __len__(self) -> int:
        return len(self.signals)

    def __iter__(self) -> Iterator[RawSignal]:
        return iter(self.signals)

    @property
    def signal_names(self) -> list[str]:
        """Names of all signals, in file order."""
        return [signal.name for signal in self.signals]


@dataclass(frozen=True)
class Packet:
    """One demodulated transmission burst.

    Bits are stored LSB-first: the last bit received is at index 0.
    """
    bits: tuple[bool, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "bits", tuple(bool(bit) for bit in self.bits))

    @classmethod
    def from_reception_order(cls, received: list[bool]) -> Packet:
        """Build a packet from bits in the order they were demodulated."""
        return cls(bits=tuple(reversed(received)))

    @classmethod
    def from_bitstring(cls, text: str) -> Packet:
        """Build a packet from a string of '0'/'1' characters (index 0 first)."""
        bits = []
        for char in text:
            if char not in "01":
                raise ValueError(f"Invalid bit character: {char!r}")
            bits.append(char == "1")
        return cls(bits=tuple(bits))

    def __len__(self) -> int:
        return len(self.bits)

    def __str__(self) -> str:
        return "".join("1" if bit else "0" for bit in self.bits)

    def __repr__(self) -> str:
        return f"Packet(bits={str(self)!r})"


@dataclass(frozen=True)
class ParsedSignal:
    """A fully decoded signal."""
    name: str
    kind: SignalKind
    frequency: int
    duty_cycle: float
    packets: tuple[Packet, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "packets", tuple(self.packets))

    @classmethod
    def from_raw(
        cls,
        raw: RawSignal,
        timing: ProtocolTiming | None = None,
    ) -> ParsedSignal:
        """Decode the packets of a raw signal.

        Raises:
            SignalDecodeError: If the timings don't follow the packet grammar.
                The error carries the name of the signal.
        """
        from ir_dump_decoder.decoding.packet_decoder import stream_to_packets
        from .errors import SignalDecodeError

        try:
            packets = stream_to_packets(raw.data, timing)
        except SignalDecodeError as e:
            raise e.with_signal_name(raw.name) from None

        return cls(
            name=raw.name,
            kind=raw.kind,
            frequency=raw.frequency,
            duty_cycle=raw.duty_cycle,
            packets=tuple(packets),
        )

    @property
    def packet_count(self) -> int:
        """Number of decoded packets."""
        return len(self.packets)


@dataclass
class DecodeIssue:
    """A signal that was skipped because it failed to decode."""
    signal_name: str
    rule: str
    position: int
    reason: str

    def __repr__(self) -> str:
        return (
            f"DecodeIssue(signal={self.signal_name}, rule={self.rule}, "
            f"position={self.position})"
        )


@dataclass
class DecodeResult:
    """Complete result of decoding every signal of a dump, including skips."""
    signals: list[ParsedSignal] = field(default_factory=list)
    errors: list[DecodeIssue] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether every signal decoded."""
        return not self.errors

    @property
    def has_errors(self) -> bool:
        """Whether any signal was skipped."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Number of skipped signals."""
        return len(self.errors)
