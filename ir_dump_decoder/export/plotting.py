"""Render raw signals as timeline images.

Each pulse or pause is drawn as a rectangle whose width is its rounded
duration. Pulses are 200 units tall and green, pauses 20 units tall and red,
on a 0..300 vertical axis. The time axis spans at least the configured
minimum (300ms by default) so images of short signals share a scale.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QGuiApplication, QImage, QPainter, QPen

from ir_dump_decoder.decoding.timing import SignalComponent
from ir_dump_decoder.models import Packet, RawSignal
from ir_dump_decoder.utils.timeline import (
    PlotSettings,
    Y_LIMIT,
    build_timeline,
    x_limit,
)

logger = logging.getLogger(__name__)

_app: Optional[QGuiApplication] = None


def ensure_gui_application() -> QGuiApplication:
    """QPainter needs a GUI application for fonts; create a headless one once."""
    global _app
    app = QGuiApplication.instance()
    if app is None:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        _app = QGuiApplication([])
        app = _app
    return app


def _tick_step(limit: float, max_ticks: int = 10) -> int:
    """Smallest 1/2/5 x 10^k step giving at most ``max_ticks`` intervals."""
    step = 1
    while True:
        for factor in (1, 2, 5):
            candidate = step * factor
            if limit / candidate <= max_ticks:
                return candidate
        step *= 10


def _safe_filename(name: str) -> str:
    return name.replace("/", "_").replace("\\", "_") or "unnamed"


class TimelineRenderer:
    """Draws one signal per image onto a fixed-size canvas."""

    def __init__(self, settings: Optional[PlotSettings] = None):
        self.settings = settings or PlotSettings()

        # Colors (dark theme)
        self.background_color = QColor("#263238")  # blue grey 900
        self.pulse_color = QColor("#1B5E20")        # green 900
        self.pause_color = QColor("#B71C1C")        # red 900
        self.pulse_color.setAlphaF(0.8)
        self.pause_color.setAlphaF(0.8)
        self.grid_color = QColor("#455A64")
        self.text_color = QColor("#FFFFFF")

        # Layout
        self.margin = 5
        self.caption_height = 40
        self.x_label_area = 30
        self.y_label_area = 60
        self.font_size = 20

    def plot_area(self) -> QRectF:
        left = self.margin + self.y_label_area
        top = self.margin + self.caption_height
        right = self.settings.width - self.margin
        bottom = self.settings.height - self.margin - self.x_label_area
        return QRectF(left, top, right - left, bottom - top)

    def time_to_x(self, t: float, limit: int, area: QRectF) -> float:
        if limit <= 0:
            return area.left()
        return area.left() + (t / limit) * area.width()

    def value_to_y(self, value: float, area: QRectF) -> float:
        return area.bottom() - (value / Y_LIMIT) * area.height()

    def create_pen(self, color: QColor, width: float = 1.0) -> QPen:
        pen = QPen(color)
        pen.setWidthF(width)
        return pen

    def create_brush(self, color: QColor) -> QBrush:
        return QBrush(color)

    def render(
        self,
        signal: RawSignal,
        packets: Optional[Sequence[Packet]] = None,
    ) -> QImage:
        """Draw ``signal``; decoded ``packets`` are listed in the plot when given."""
        ensure_gui_application()

        image = QImage(self.settings.width, self.settings.height, QImage.Format.Format_ARGB32)
        image.fill(self.background_color)

        limit = x_limit(signal.data, self.settings)
        area = self.plot_area()

        painter = QPainter(image)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)
            font = QFont()
            font.setPixelSize(self.font_size)
            painter.setFont(font)

            self._draw_caption(painter, signal.name)
            self._draw_mesh(painter, area, limit)
            self._draw_bars(painter, area, limit, signal)
            if packets is not None:
                self._draw_packets(painter, area, packets)
        finally:
            painter.end()

        return image

    def save(
        self,
        signal: RawSignal,
        out_dir: Union[str, Path],
        packets: Optional[Sequence[Packet]] = None,
    ) -> Path:
        """Render and write ``<out_dir>/<signal name>.png``."""
        out_path = Path(out_dir) / f"{_safe_filename(signal.name)}.png"
        image = self.render(signal, packets)
        if not image.save(str(out_path), "PNG"):
            raise OSError(f"Failed to write image: {out_path}")
        logger.info("Wrote %s", out_path)
        return out_path

    def _draw_caption(self, painter: QPainter, name: str) -> None:
        painter.setPen(self.create_pen(self.text_color))
        rect = QRectF(0, self.margin, self.settings.width, self.caption_height)
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, name)

    def _draw_mesh(self, painter: QPainter, area: QRectF, limit: int) -> None:
        grid_pen = self.create_pen(self.grid_color)
        text_pen = self.create_pen(self.text_color)

        step = _tick_step(limit)
        t = 0
        while t <= limit:
            x = self.time_to_x(t, limit, area)
            painter.setPen(grid_pen)
            painter.drawLine(QPointF(x, area.top()), QPointF(x, area.bottom()))
            painter.setPen(text_pen)
            label_rect = QRectF(x - 60, area.bottom() + 2, 120, self.x_label_area)
            painter.drawText(label_rect, Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop, str(t))
            t += step

        for value in range(0, Y_LIMIT + 1, 50):
            y = self.value_to_y(value, area)
            painter.setPen(grid_pen)
            painter.drawLine(QPointF(area.left(), y), QPointF(area.right(), y))
            painter.setPen(text_pen)
            label_rect = QRectF(self.margin, y - 12, self.y_label_area - 8, 24)
            painter.drawText(label_rect, Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter, str(value))

        painter.setPen(text_pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(area)

    def _draw_bars(self, painter: QPainter, area: QRectF, limit: int, signal: RawSignal) -> None:
        pulse_brush = self.create_brush(self.pulse_color)
        pause_brush = self.create_brush(self.pause_color)
        pulse_pen = self.create_pen(self.pulse_color)
        pause_pen = self.create_pen(self.pause_color)

        for bar in build_timeline(signal.data, self.settings.round_to_us):
            if bar.width <= 0:
                continue
            is_pulse = bar.component is SignalComponent.PULSE
            x0 = self.time_to_x(bar.start, limit, area)
            x1 = self.time_to_x(bar.end, limit, area)
            y1 = self.value_to_y(bar.height, area)
            painter.setPen(pulse_pen if is_pulse else pause_pen)
            painter.setBrush(pulse_brush if is_pulse else pause_brush)
            painter.drawRect(QRectF(QPointF(x0, y1), QPointF(x1, area.bottom())))

    def _draw_packets(self, painter: QPainter, area: QRectF, packets: Sequence[Packet]) -> None:
        # Bars top out at 200, so the band above is free for text
        painter.setPen(self.create_pen(self.text_color))
        line_height = self.font_size + 4
        y = area.top() + 4
        lines = [f"{len(packets)} packet(s)"] + [
            f"#{i}: {packet}" for i, packet in enumerate(packets)
        ]
        for line in lines:
            if y + line_height > self.value_to_y(Y_LIMIT * 2 / 3, area):
                break
            painter.drawText(QRectF(area.left() + 8, y, area.width() - 16, line_height),
                             Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter, line)
            y += line_height


def plot_signal(
    signal: RawSignal,
    out_dir: Union[str, Path],
    settings: Optional[PlotSettings] = None,
    packets: Optional[Sequence[Packet]] = None,
) -> Path:
    """Plot one signal into ``out_dir``; returns the image path."""
    return TimelineRenderer(settings).save(signal, out_dir, packets)
