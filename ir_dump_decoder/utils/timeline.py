"""Timeline geometry for plotting raw signals.

Durations are rounded to the protocol unit and laid end to end; pulses are
tall bars, pauses short ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ir_dump_decoder.decoding.timing import SignalComponent, component_at, round_to

PULSE_HEIGHT = 200
PAUSE_HEIGHT = 20
Y_LIMIT = 300


@dataclass(frozen=True)
class PlotSettings:
    """Canvas and axis settings for timeline images."""
    width: int = 1512 * 2
    height: int = 800 * 2
    min_span_us: int = 300_000
    round_to_us: int = 550

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid canvas size {self.width}x{self.height}")
        if self.round_to_us <= 0:
            raise ValueError(f"round_to_us must be positive, got {self.round_to_us}")


@dataclass(frozen=True)
class TimelineBar:
    """One pulse or pause on the time axis (microseconds)."""
    start: int
    end: int
    component: SignalComponent

    @property
    def height(self) -> int:
        return PULSE_HEIGHT if self.component is SignalComponent.PULSE else PAUSE_HEIGHT

    @property
    def width(self) -> int:
        return self.end - self.start


def build_timeline(data: Sequence[int], unit: int) -> list[TimelineBar]:
    """Lay out rounded durations as consecutive bars."""
    bars = []
    x = 0
    for i, duration in enumerate(data):
        x0 = x
        x += round_to(duration, unit)
        bars.append(TimelineBar(start=x0, end=x, component=component_at(i)))
    return bars


def x_limit(data: Sequence[int], settings: PlotSettings) -> int:
    """Right edge of the time axis: the signal length, but at least the minimum span."""
    unit = settings.round_to_us
    total = sum(round_to(duration, unit) for duration in data)
    return max(total, round_to(settings.min_span_us, unit))
