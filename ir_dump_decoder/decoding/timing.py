"""Quantization of raw durations into symbolic time slots.

Real captures jitter by tens of microseconds around the nominal unit, so
durations are rounded to the nearest unit before classification. Values
outside the short/long bands keep their original, unrounded duration so the
packet grammar can run its own range checks on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .protocol import DEFAULT_TIMING, ProtocolTiming


class DurationClass(Enum):
    SHORT = "short"
    LONG = "long"
    UNUSUAL = "unusual"


class SignalComponent(Enum):
    PULSE = "pulse"
    PAUSE = "pause"


@dataclass(frozen=True)
class TimeSlot:
    """One classified duration.

    ``value`` is only set for UNUSUAL slots and holds the original duration.
    """
    duration_class: DurationClass
    component: SignalComponent
    value: Optional[int] = None

    @classmethod
    def short(cls, component: SignalComponent) -> TimeSlot:
        return cls(DurationClass.SHORT, component)

    @classmethod
    def long(cls, component: SignalComponent) -> TimeSlot:
        return cls(DurationClass.LONG, component)

    @classmethod
    def unusual(cls, component: SignalComponent, value: int) -> TimeSlot:
        return cls(DurationClass.UNUSUAL, component, value)

    @property
    def is_pulse(self) -> bool:
        return self.component is SignalComponent.PULSE

    def __str__(self) -> str:
        sign = "+" if self.is_pulse else "-"
        if self.duration_class is DurationClass.UNUSUAL:
            return f"{sign}{self.value}"
        return f"{sign}{self.duration_class.value}"


def round_to(x: int, multiple: int) -> int:
    """Round ``x`` to the nearest multiple of ``multiple`` (ties round up).

    >>> round_to(549, 550)
    550
    >>> round_to(125, 50)
    150
    >>> round_to(2972, 550)
    2750
    """
    if multiple <= 0:
        raise ValueError(f"multiple must be positive, got {multiple}")
    return (x + multiple // 2) // multiple * multiple


def component_at(index: int) -> SignalComponent:
    """Pulses sit at even indexes, pauses at odd ones."""
    return SignalComponent.PULSE if index & 1 == 0 else SignalComponent.PAUSE


def classify_duration(
    duration: int,
    component: SignalComponent,
    timing: ProtocolTiming = DEFAULT_TIMING,
) -> TimeSlot:
    rounded = round_to(duration, timing.unit_us)
    if rounded == timing.short_us:
        return TimeSlot.short(component)
    if rounded == timing.long_us:
        return TimeSlot.long(component)
    return TimeSlot.unusual(component, duration)


def classify_durations(
    data: Sequence[int],
    timing: Optional[ProtocolTiming] = None,
) -> list[TimeSlot]:
    """Turn a flat duration list into pulse/pause time slots of equal length."""
    timing = timing or DEFAULT_TIMING
    return [
        classify_duration(duration, component_at(i), timing)
        for i, duration in enumerate(data)
    ]
