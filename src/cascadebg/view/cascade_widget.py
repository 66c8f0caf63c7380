"""
Cascade Background Widget
=========================
Hosts one CascadeRenderer inside a Qt widget tree.

Why is this file needed?
------------------------
1. Ownership: The widget owns the drawing surface (a QImage back buffer sized
   to the widget) and registers it under its handle; the renderer only
   references it.
2. Resize coalescing: Window drags emit dozens of resize events per second.
   They are debounced so the grid is rebuilt once the drag settles.
3. Visibility policy: The loop is paused while the widget is hidden or its
   window is minimized, and resumed when it comes back.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import Optional

import numpy as np
from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QWidget

from cascadebg.config import DEFAULT_HANDLE, CascadeConfig
from cascadebg.debounce import Debouncer
from cascadebg.renderer import CascadeRenderer
from cascadebg.scheduling import QtFrameScheduler
from cascadebg.surface import QImageSurface, SurfaceRegistry

logger = logging.getLogger(__name__)


def _release(
    registry: SurfaceRegistry,
    handle: str,
    surface: QImageSurface,
    renderer: CascadeRenderer,
    *_: object,
) -> None:
    """Destruction-time teardown for a widget that was never closed."""
    renderer.close()
    registry.unregister(handle, surface)
    logger.debug(f"Released cascade surface '{handle}'.")


class CascadeBackground(QWidget):
    """
    Background layer that paints the cascade behind its siblings.

    The renderer is created stopped; it starts when the widget is first shown.
    """
    def __init__(
        self,
        registry: SurfaceRegistry,
        config: Optional[CascadeConfig] = None,
        handle: str = DEFAULT_HANDLE,
        parent: Optional[QWidget] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        super().__init__(parent=parent)
        self.setObjectName(handle)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent)

        self._config: CascadeConfig = config or CascadeConfig()
        self._registry = registry
        self._handle = handle
        self._has_grid: bool = False
        self._paused_by_user: bool = False
        self._watched_window: Optional[QWidget] = None

        # Surface: sized on the first resize event
        self.surface = QImageSurface(font_family=self._config.font_family)
        registry.register(handle, self.surface)

        self._scheduler = QtFrameScheduler(self, interval_ms=self._config.frame_interval_ms)
        self.renderer = CascadeRenderer.bind(
            registry,
            handle,
            self._scheduler,
            config=self._config,
            rng=rng,
            autostart=False,
            on_frame=self.update,
        )

        # init debounce gate + its wake-up timer
        self._resize_gate = Debouncer(self._config.resize_debounce_s, self._apply_size)
        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.timeout.connect(self._on_resize_timeout)

        # Emitted from the C++ destructor: the slot must not touch this widget
        self.destroyed.connect(partial(_release, registry, handle, self.surface, self.renderer))

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def handle(self) -> str:
        return self._handle

    def set_paused(self, paused: bool) -> None:
        """Explicit pause requested by the user (e.g. a toolbar toggle)."""
        self._paused_by_user = paused
        if paused:
            self.renderer.stop()
        else:
            self._resume_if_visible()

    def teardown(self) -> None:
        """Stop the loop and release the surface. Safe to call more than once."""
        self._resize_timer.stop()
        self._resize_gate.cancel()
        self.renderer.close()
        self._registry.unregister(self._handle, self.surface)
        if self._watched_window is not None:
            self._watched_window.removeEventFilter(self)
            self._watched_window = None

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        size = event.size()
        if not self._has_grid:
            self._apply_size(size.width(), size.height())
            return
        self._resize_gate.trigger(size.width(), size.height())
        self._resize_timer.start(self._config.resize_debounce_ms)

    def closeEvent(self, event) -> None:
        self.teardown()
        super().closeEvent(event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._watch_window()
        self._resume_if_visible()

    def hideEvent(self, event) -> None:
        super().hideEvent(event)
        self.renderer.stop()

    def changeEvent(self, event: QEvent) -> None:
        super().changeEvent(event)
        # Only top-level widgets receive their own window state changes
        if self.isWindow() and event.type() == QEvent.Type.WindowStateChange:
            self._on_window_state_changed(self)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._watched_window and event.type() == QEvent.Type.WindowStateChange:
            self._on_window_state_changed(self._watched_window)
        return super().eventFilter(watched, event)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor(self._config.background))
            image = self.surface.image()
            if not image.isNull():
                painter.drawImage(0, 0, image)
        finally:
            painter.end()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _apply_size(self, width: int, height: int) -> None:
        if (width, height) != (self.surface.width(), self.surface.height()):
            self.surface.set_size(width, height)
        self.renderer.resize(width, height)
        self._has_grid = True
        self.update()

    def _on_resize_timeout(self) -> None:
        if not self._resize_gate.pending:
            return
        if not self._resize_gate.poll():
            # Timer fired a bit early; wait out the rest of the quiet period
            self._resize_timer.start(max(1, int(self._resize_gate.remaining() * 1000)))

    def _on_window_state_changed(self, window: QWidget) -> None:
        if window.isMinimized():
            self.renderer.stop()
        else:
            self._resume_if_visible()

    def _resume_if_visible(self) -> None:
        if self._paused_by_user or not self.isVisible():
            return
        window = self.window()
        if window is not None and window.isMinimized():
            return
        self.renderer.start()

    def _watch_window(self) -> None:
        window = self.window()
        if window is self or window is self._watched_window:
            return
        if self._watched_window is not None:
            self._watched_window.removeEventFilter(self)
        window.installEventFilter(self)
        self._watched_window = window
