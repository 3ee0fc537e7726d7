"""Timing calibration for the pulse-distance IR protocol."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProtocolTiming:
    """Calibration constants of one IR remote family.

    Band limits are counted in whole units (``duration // unit_us``).
    Ranges are half-open: ``(low, high)`` accepts ``low <= units < high``.
    """

    unit_us: int = 550
    """Nominal short duration (~550us on Samsung devices)."""

    long_multiplier: int = 3
    """A long duration is this many units."""

    dump_start_pause_min_units: int = 26
    """The pause after the dump-start pulse must exceed this many units."""

    leader_pulse_units: tuple[int, int] = (4, 7)
    """Packet leader pulse (~3000us)."""

    leader_pause_units: tuple[int, int] = (15, 20)
    """Packet leader pause (~9000us)."""

    gap_pause_units: tuple[int, int] = (4, 7)
    """Pause between the end of one packet and the next leader (~3000us)."""

    def __post_init__(self):
        if self.unit_us <= 0:
            raise ValueError(f"unit_us must be positive, got {self.unit_us}")
        if self.long_multiplier <= 1:
            raise ValueError(
                f"long_multiplier must be greater than 1, got {self.long_multiplier}"
            )
        for name in ("leader_pulse_units", "leader_pause_units", "gap_pause_units"):
            low, high = getattr(self, name)
            if low >= high:
                raise ValueError(f"{name} must be an increasing (low, high) pair")
            object.__setattr__(self, name, (int(low), int(high)))

    @property
    def short_us(self) -> int:
        return self.unit_us

    @property
    def long_us(self) -> int:
        return self.long_multiplier * self.unit_us

    def units(self, duration: int) -> int:
        """Whole units contained in ``duration``."""
        return duration // self.unit_us

    def in_band(self, duration: int, band: tuple[int, int]) -> bool:
        low, high = band
        return low <= self.units(duration) < high


DEFAULT_TIMING = ProtocolTiming()
