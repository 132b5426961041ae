"""
Raster drawing surface for the dial image.

DrawingSurface is a small canvas-style contract: angles are radians measured
clockwise from the +x axis, the y axis points down, and text is drawn at its
baseline. QtDrawingSurface implements it on a QImage with QPainter and
encodes the result as JPEG.
"""

import logging
import math
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QPointF, QRectF, Qt
from PySide6.QtGui import (
    QBrush,
    QColor,
    QFont,
    QFontMetricsF,
    QGuiApplication,
    QImage,
    QLinearGradient,
    QPainter,
    QPen,
)

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_JPEG_QUALITY = 80
DEFAULT_FONT_FAMILY = "Open Sans"

TAU = 2 * math.pi


@dataclass(frozen=True)
class LinearGradient:
    """Two-point linear gradient with ordered (offset, colour) stops."""
    x0: float
    y0: float
    x1: float
    y1: float
    stops: Tuple[Tuple[float, str], ...]


Paint = Union[str, LinearGradient]


def ensure_gui_application() -> QGuiApplication:
    """
    Get the running Qt application, creating a headless one if needed.

    Text rendering needs a QGuiApplication even when nothing is shown on
    screen; without a display the offscreen platform plugin is used.
    """
    app = QGuiApplication.instance()
    if app is None:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        app = QGuiApplication(sys.argv[:1])
        logger.debug(f"Created QGuiApplication on platform {app.platformName()}")
    return app


class DrawingSurface(ABC):
    """Canvas contract used by the dial renderer."""

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        pass

    @abstractmethod
    def stroke_arc(self, cx: float, cy: float, radius: float, start: float, end: float,
                   paint: Paint, line_width: float) -> None:
        """
        Stroke a circular arc clockwise from start to end.

        A sweep of a full turn or more draws the whole circle.
        """
        pass

    @abstractmethod
    def fill_circle(self, cx: float, cy: float, radius: float, color: str) -> None:
        pass

    @abstractmethod
    def line(self, x1: float, y1: float, x2: float, y2: float, color: str,
             line_width: float, round_cap: bool = False) -> None:
        pass

    @abstractmethod
    def save(self) -> None:
        """Push the transform and style state."""
        pass

    @abstractmethod
    def restore(self) -> None:
        """Pop the transform and style state."""
        pass

    @abstractmethod
    def translate(self, dx: float, dy: float) -> None:
        pass

    @abstractmethod
    def rotate(self, radians: float) -> None:
        """Rotate the coordinate system clockwise."""
        pass

    @abstractmethod
    def set_font(self, pixel_size: int, bold: bool = False) -> None:
        pass

    @abstractmethod
    def measure_text(self, text: str) -> float:
        """Get the advance width of text in the current font."""
        pass

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float, color: str) -> None:
        """Draw text with its baseline starting at (x, y)."""
        pass

    @abstractmethod
    def encode_jpeg(self, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
        """Finish drawing and encode the image."""
        pass


class QtDrawingSurface(DrawingSurface):
    """DrawingSurface backed by a QImage."""

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 font_family: str = DEFAULT_FONT_FAMILY):
        ensure_gui_application()

        self._image = QImage(width, height, QImage.Format.Format_RGB32)
        self._image.fill(QColor("#FFFFFF"))

        self._painter: Optional[QPainter] = QPainter(self._image)
        self._painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        self._painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)

        self._font_family = font_family
        self._font = QFont(font_family)
        self._painter.setFont(self._font)

    @property
    def width(self) -> int:
        return self._image.width()

    @property
    def height(self) -> int:
        return self._image.height()

    @property
    def image(self) -> QImage:
        return self._image

    def _active_painter(self) -> QPainter:
        if self._painter is None:
            raise RuntimeError("Drawing surface has already been encoded")
        return self._painter

    def _to_brush(self, paint: Paint) -> QBrush:
        if isinstance(paint, LinearGradient):
            gradient = QLinearGradient(QPointF(paint.x0, paint.y0), QPointF(paint.x1, paint.y1))
            for offset, color in paint.stops:
                gradient.setColorAt(offset, QColor(color))
            return QBrush(gradient)
        return QBrush(QColor(paint))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        self._active_painter().fillRect(QRectF(x, y, w, h), QColor(color))

    def stroke_arc(self, cx: float, cy: float, radius: float, start: float, end: float,
                   paint: Paint, line_width: float) -> None:
        painter = self._active_painter()

        sweep = end - start
        if sweep < TAU:
            sweep %= TAU
        else:
            sweep = TAU
        if sweep == 0:
            return

        pen = QPen(self._to_brush(paint), line_width)
        pen.setCapStyle(Qt.PenCapStyle.FlatCap)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)

        # Qt arcs run counter-clockwise in 1/16th degree units
        rect = QRectF(cx - radius, cy - radius, 2 * radius, 2 * radius)
        painter.drawArc(rect, round(-math.degrees(start) * 16), round(-math.degrees(sweep) * 16))

    def fill_circle(self, cx: float, cy: float, radius: float, color: str) -> None:
        painter = self._active_painter()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(color))
        painter.drawEllipse(QPointF(cx, cy), radius, radius)

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str,
             line_width: float, round_cap: bool = False) -> None:
        painter = self._active_painter()
        pen = QPen(QColor(color), line_width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap if round_cap else Qt.PenCapStyle.FlatCap)
        painter.setPen(pen)
        painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    def save(self) -> None:
        self._active_painter().save()

    def restore(self) -> None:
        self._active_painter().restore()

    def translate(self, dx: float, dy: float) -> None:
        self._active_painter().translate(dx, dy)

    def rotate(self, radians: float) -> None:
        self._active_painter().rotate(math.degrees(radians))

    def set_font(self, pixel_size: int, bold: bool = False) -> None:
        font = QFont(self._font_family)
        font.setPixelSize(pixel_size)
        font.setBold(bold)
        self._font = font
        self._active_painter().setFont(font)

    def measure_text(self, text: str) -> float:
        return QFontMetricsF(self._font).horizontalAdvance(text)

    def fill_text(self, text: str, x: float, y: float, color: str) -> None:
        painter = self._active_painter()
        painter.setPen(QColor(color))
        painter.drawText(QPointF(x, y), text)

    def encode_jpeg(self, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
        """
        Finish drawing and encode the image as JPEG.

        Raises:
            RuntimeError: If the image could not be encoded
        """
        if self._painter is not None:
            self._painter.end()
            self._painter = None

        data = QByteArray()
        buffer = QBuffer(data)
        buffer.open(QIODevice.OpenModeFlag.WriteOnly)
        ok = self._image.save(buffer, "JPG", quality)
        buffer.close()

        if not ok:
            raise RuntimeError("Failed to encode image as JPEG")

        logger.debug(f"Encoded {self.width}x{self.height} JPEG, {data.size()} bytes")
        return bytes(data.data())


def make_gradient(x0: float, y0: float, x1: float, y1: float,
                  colors: Sequence[str]) -> LinearGradient:
    """Build a gradient with colours spread evenly from 0 to 1."""
    if len(colors) < 2:
        raise ValueError("A gradient needs at least two colours")
    step = 1 / (len(colors) - 1)
    return LinearGradient(x0, y0, x1, y1, tuple((i * step, c) for i, c in enumerate(colors)))
