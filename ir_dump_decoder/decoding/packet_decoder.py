"""Recursive-descent decoder from time slots to packets.

Grammar, in decode order::

    dump      := dump_start packet+
    dump_start:= +short -pause(> 26 units)
    packet    := packet_start bit+ packet_end
    packet_start := +pulse(4..7 units) -pause(15..20 units)
    bit       := +short -short   (0)
               | +short -long    (1)
    packet_end:= +short <end of stream>
               | +short -pause(4..7 units)

Every rule takes the slot list and a start index and returns the index just
past what it consumed, or raises SignalDecodeError. There is no resync: the
first failure aborts the whole signal.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ir_dump_decoder.models import Packet, SignalDecodeError
from .protocol import DEFAULT_TIMING, ProtocolTiming
from .timing import DurationClass, SignalComponent, TimeSlot, classify_durations

logger = logging.getLogger(__name__)

# Number of unconsumed slots attached to an error
CONTEXT_SLOTS = 6


def _fail(rule: str, slots: Sequence[TimeSlot], pos: int) -> SignalDecodeError:
    return SignalDecodeError(rule, pos, slots[pos:pos + CONTEXT_SLOTS])


def _is(slot: TimeSlot, duration_class: DurationClass, component: SignalComponent) -> bool:
    return slot.duration_class is duration_class and slot.component is component


def _unusual(slot: TimeSlot, component: SignalComponent) -> Optional[int]:
    """Original duration of an UNUSUAL slot of the given component, else None."""
    if _is(slot, DurationClass.UNUSUAL, component):
        return slot.value
    return None


def dump_start(slots: Sequence[TimeSlot], pos: int, timing: ProtocolTiming) -> int:
    """A dump starts with a short pulse followed by a super-long (~17700us) pause."""
    if len(slots) - pos >= 2 and _is(slots[pos], DurationClass.SHORT, SignalComponent.PULSE):
        pause = _unusual(slots[pos + 1], SignalComponent.PAUSE)
        if pause is not None and timing.units(pause) > timing.dump_start_pause_min_units:
            return pos + 2
    raise _fail("dump_start", slots, pos)


def packet_start(slots: Sequence[TimeSlot], pos: int, timing: ProtocolTiming) -> int:
    """Each packet starts with a ~3000us pulse followed by a ~9000us pause."""
    if len(slots) - pos >= 2:
        pulse = _unusual(slots[pos], SignalComponent.PULSE)
        pause = _unusual(slots[pos + 1], SignalComponent.PAUSE)
        if (
            pulse is not None
            and pause is not None
            and timing.in_band(pulse, timing.leader_pulse_units)
            and timing.in_band(pause, timing.leader_pause_units)
        ):
            return pos + 2
    raise _fail("packet_start", slots, pos)


def packet_bit(slots: Sequence[TimeSlot], pos: int) -> tuple[int, bool]:
    """A short pulse followed by a short pause (0) or a long pause (1)."""
    if len(slots) - pos >= 2 and _is(slots[pos], DurationClass.SHORT, SignalComponent.PULSE):
        pause = slots[pos + 1]
        if _is(pause, DurationClass.SHORT, SignalComponent.PAUSE):
            return pos + 2, False
        if _is(pause, DurationClass.LONG, SignalComponent.PAUSE):
            return pos + 2, True
    raise _fail("packet_bit", slots, pos)


def packet_bits(slots: Sequence[TimeSlot], pos: int) -> tuple[int, list[bool]]:
    """One or more bits, in reception order."""
    pos, bit = packet_bit(slots, pos)
    received = [bit]
    while True:
        try:
            pos, bit = packet_bit(slots, pos)
        except SignalDecodeError:
            return pos, received
        received.append(bit)


def packet_end(slots: Sequence[TimeSlot], pos: int, timing: ProtocolTiming) -> int:
    """A short pulse, then either the end of the stream or a ~3000us gap."""
    remaining = len(slots) - pos
    if remaining >= 1 and _is(slots[pos], DurationClass.SHORT, SignalComponent.PULSE):
        if remaining == 1:
            return pos + 1
        pause = _unusual(slots[pos + 1], SignalComponent.PAUSE)
        if pause is not None and timing.in_band(pause, timing.gap_pause_units):
            return pos + 2
    raise _fail("packet_end", slots, pos)


def single_packet(
    slots: Sequence[TimeSlot],
    pos: int,
    timing: ProtocolTiming,
) -> tuple[int, Packet]:
    """Leader, bits and trailer of one transmission."""
    pos = packet_start(slots, pos, timing)
    pos, received = packet_bits(slots, pos)
    pos = packet_end(slots, pos, timing)
    # bits arrive LSB first, so 01 in the stream is 10 in the packet
    return pos, Packet.from_reception_order(received)


def decode_packets(
    slots: Sequence[TimeSlot],
    timing: Optional[ProtocolTiming] = None,
) -> list[Packet]:
    """Decode a full dump stream; every slot must belong to a packet."""
    timing = timing or DEFAULT_TIMING
    pos = dump_start(slots, 0, timing)

    pos, packet = single_packet(slots, pos, timing)
    packets = [packet]
    while pos < len(slots):
        pos, packet = single_packet(slots, pos, timing)
        packets.append(packet)

    logger.debug("Decoded %d packet(s) from %d slots", len(packets), len(slots))
    return packets


def stream_to_packets(
    data: Sequence[int],
    timing: Optional[ProtocolTiming] = None,
) -> list[Packet]:
    """Classify raw durations and decode them into packets."""
    timing = timing or DEFAULT_TIMING
    return decode_packets(classify_durations(data, timing), timing)
