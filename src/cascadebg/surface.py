"""
Drawing Surfaces
================
The 2-D canvas abstraction the cascade renderer paints onto.

Why is this file needed?
------------------------
1. Decoupling: The renderer only needs "fill with alpha", "draw text at a
   position with a color" and "report pixel size". Anything offering those
   three can host the cascade.
2. Persistence of pixels: The fading-trail look depends on the previous frame
   surviving into the next one. A QWidget repaint does not guarantee that, so
   the Qt surface keeps its own QImage back buffer.
3. Lookup by handle: Hosts register surfaces under a string id (like an HTML
   element id) and renderers bind to them by that id.

Classes:
    Surface: Protocol of the drawing capabilities.
    QImageSurface: QImage-backed implementation.
    SurfaceRegistry: Per-host handle -> surface mapping.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QFont, QImage, QPainter

from cascadebg.exceptions import ConfigError

logger = logging.getLogger(__name__)


class Surface(Protocol):
    def width(self) -> int: ...
    def height(self) -> int: ...
    def clear(self) -> None: ...
    def fill_rect(self, color: str, alpha: float) -> None: ...
    def draw_glyphs(
        self,
        glyphs: Sequence[str],
        xs: Sequence[float],
        ys: Sequence[float],
        colors: Sequence[str],
        glyph_size: int,
    ) -> None: ...


class QImageSurface:
    """
    A Surface backed by a premultiplied ARGB QImage.

    A non-positive size gives a null image; every drawing call on a null
    image is a no-op.
    """
    def __init__(self, width: int = 0, height: int = 0, font_family: str = "monospace") -> None:
        self._image: QImage = QImage()
        self._font_family = font_family
        self._colors: dict[str, QColor] = {}
        self.set_size(width, height)

    # ------------------------------------------------------------------------------
    # Host API
    # ------------------------------------------------------------------------------

    def image(self) -> QImage:
        return self._image

    def set_size(self, width: int, height: int) -> None:
        """Reallocate the back buffer. Previous content is discarded."""
        if width <= 0 or height <= 0:
            self._image = QImage()
            return
        self._image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
        self._image.fill(Qt.GlobalColor.transparent)

    # ------------------------------------------------------------------------------
    # Surface API
    # ------------------------------------------------------------------------------

    def width(self) -> int:
        return self._image.width()

    def height(self) -> int:
        return self._image.height()

    def clear(self) -> None:
        if self._image.isNull():
            return
        self._image.fill(Qt.GlobalColor.transparent)

    def fill_rect(self, color: str, alpha: float) -> None:
        if self._image.isNull():
            return
        fill = QColor(color)
        fill.setAlphaF(alpha)
        painter = QPainter(self._image)
        try:
            painter.fillRect(self._image.rect(), fill)
        finally:
            painter.end()

    def draw_glyphs(
        self,
        glyphs: Sequence[str],
        xs: Sequence[float],
        ys: Sequence[float],
        colors: Sequence[str],
        glyph_size: int,
    ) -> None:
        if self._image.isNull() or not glyphs:
            return

        font = QFont(self._font_family)
        font.setStyleHint(QFont.StyleHint.Monospace)
        font.setPixelSize(glyph_size)

        painter = QPainter(self._image)
        try:
            painter.setFont(font)
            for glyph, x, y, color in zip(glyphs, xs, ys, colors):
                painter.setPen(self._color(color))
                painter.drawText(QPointF(float(x), float(y)), glyph)
        finally:
            painter.end()

    def _color(self, name: str) -> QColor:
        # A handful of palette entries are reused every frame
        color = self._colors.get(name)
        if color is None:
            color = self._colors[name] = QColor(name)
        return color


class SurfaceRegistry:
    """Maps host-defined handles to surfaces. Each host owns one registry."""
    def __init__(self) -> None:
        self._surfaces: dict[str, Surface] = {}

    def register(self, handle: str, surface: Surface) -> None:
        if not handle:
            raise ConfigError("Surface handle must be a non-empty string.")
        self._surfaces[handle] = surface

    def unregister(self, handle: str, surface: Optional[Surface] = None) -> None:
        """Drop `handle`; when `surface` is given, only if it is still the one registered."""
        if surface is not None and self._surfaces.get(handle) is not surface:
            return
        self._surfaces.pop(handle, None)

    def resolve(self, handle: str) -> Optional[Surface]:
        surface = self._surfaces.get(handle)
        if surface is None:
            logger.debug(f"No surface registered under '{handle}'")
        return surface

    def handles(self) -> list[str]:
        return list(self._surfaces.keys())
