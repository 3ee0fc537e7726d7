"""Timing classification and packet decoding of raw IR signals."""

from .protocol import ProtocolTiming, DEFAULT_TIMING
from .timing import (
    DurationClass,
    SignalComponent,
    TimeSlot,
    round_to,
    classify_durations,
)
from .packet_decoder import decode_packets, stream_to_packets
from .dump_decoder import decode_dump

__all__ = [
    "ProtocolTiming",
    "DEFAULT_TIMING",
    "DurationClass",
    "SignalComponent",
    "TimeSlot",
    "round_to",
    "classify_durations",
    "decode_packets",
    "stream_to_packets",
    "decode_dump",
]
