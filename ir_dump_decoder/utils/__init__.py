"""Utility functions and helpers."""

from .timeline import (
    PlotSettings,
    TimelineBar,
    build_timeline,
    x_limit,
    PULSE_HEIGHT,
    PAUSE_HEIGHT,
    Y_LIMIT,
)

__all__ = [
    'PlotSettings',
    'TimelineBar',
    'build_timeline',
    'x_limit',
    'PULSE_HEIGHT',
    'PAUSE_HEIGHT',
    'Y_LIMIT',
]
