from __future__ import annotations

import numpy as np
import pytest
import shiboken6
from PySide6.QtCore import QCoreApplication, QEvent, Qt
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QWidget

from cascadebg.config import CascadeConfig
from cascadebg.surface import SurfaceRegistry
from cascadebg.view.cascade_widget import CascadeBackground


@pytest.fixture
def host(qapp):
    """A shown parent window with a 140x100 cascade child (no layout)."""
    registry = SurfaceRegistry()
    parent = QWidget()
    parent.resize(400, 300)
    widget = CascadeBackground(
        registry,
        config=CascadeConfig(resize_debounce_ms=30, frame_interval_ms=5),
        parent=parent,
        rng=np.random.default_rng(7),
    )
    widget.setGeometry(0, 0, 140, 100)
    parent.show()
    QTest.qWait(20)
    yield registry, parent, widget
    widget.teardown()
    parent.close()


def test_surface_is_registered_under_the_handle(qapp):
    registry = SurfaceRegistry()
    widget = CascadeBackground(registry, handle="bg")
    try:
        assert widget.objectName() == "bg"
        assert registry.resolve("bg") is widget.surface
        assert not widget.renderer.is_inert
        assert not widget.renderer.is_running
    finally:
        widget.teardown()


def test_first_resize_builds_the_grid_immediately(host):
    _, _, widget = host
    assert (widget.surface.width(), widget.surface.height()) == (140, 100)
    assert widget.renderer.column_count == 10


def test_showing_starts_and_hiding_stops_the_loop(host):
    _, _, widget = host
    assert widget.renderer.is_running

    widget.hide()
    assert not widget.renderer.is_running

    widget.show()
    assert widget.renderer.is_running


def test_frames_are_rendered_while_shown(host):
    _, _, widget = host
    QTest.qWait(100)
    assert widget.renderer.frame_count > 0


def test_resize_bursts_are_debounced(host):
    _, _, widget = host

    widget.resize(280, 100)
    widget.resize(420, 100)
    assert widget.renderer.column_count == 10

    QTest.qWait(150)

    assert widget.renderer.column_count == 30
    assert widget.surface.width() == 420


def test_user_pause_survives_show(host):
    _, _, widget = host
    widget.set_paused(True)
    widget.hide()
    widget.show()
    assert not widget.renderer.is_running

    widget.set_paused(False)
    assert widget.renderer.is_running


def test_teardown_releases_surface_and_loop(host):
    registry, _, widget = host
    widget.teardown()

    assert registry.resolve(widget.handle) is None
    assert widget.renderer.is_inert
    assert not widget.renderer.is_running

    frames = widget.renderer.frame_count
    QTest.qWait(50)
    assert widget.renderer.frame_count == frames


def test_minimizing_the_window_pauses_and_restoring_resumes(host):
    _, parent, widget = host
    assert widget.renderer.is_running

    parent.setWindowState(Qt.WindowState.WindowMinimized)
    assert not widget.renderer.is_running

    parent.setWindowState(Qt.WindowState.WindowNoState)
    assert widget.renderer.is_running


def test_user_pause_still_holds_after_restore(host):
    _, parent, widget = host
    widget.set_paused(True)

    parent.setWindowState(Qt.WindowState.WindowMinimized)
    parent.setWindowState(Qt.WindowState.WindowNoState)

    assert not widget.renderer.is_running


def test_unpausing_while_minimized_waits_for_restore(host):
    _, parent, widget = host
    widget.set_paused(True)
    parent.setWindowState(Qt.WindowState.WindowMinimized)

    widget.set_paused(False)
    assert not widget.renderer.is_running

    parent.setWindowState(Qt.WindowState.WindowNoState)
    assert widget.renderer.is_running


def test_top_level_widget_follows_its_own_window_state(qapp):
    widget = CascadeBackground(SurfaceRegistry(), config=CascadeConfig(frame_interval_ms=5))
    widget.resize(140, 100)
    widget.show()
    QTest.qWait(20)
    try:
        widget.setWindowState(Qt.WindowState.WindowMinimized)
        assert not widget.renderer.is_running

        widget.setWindowState(Qt.WindowState.WindowNoState)
        assert widget.renderer.is_running
    finally:
        widget.close()


def test_closing_a_top_level_widget_tears_it_down(qapp):
    registry = SurfaceRegistry()
    widget = CascadeBackground(registry, config=CascadeConfig(frame_interval_ms=5))
    widget.resize(140, 100)
    widget.show()
    QTest.qWait(20)
    renderer = widget.renderer
    assert renderer.is_running

    widget.close()

    assert registry.resolve(widget.handle) is None
    assert renderer.is_inert
    assert not renderer.is_running


def test_destroying_the_widget_releases_surface_and_loop(qapp):
    registry = SurfaceRegistry()
    parent = QWidget()
    widget = CascadeBackground(registry, config=CascadeConfig(frame_interval_ms=5), parent=parent)
    widget.setGeometry(0, 0, 140, 100)
    parent.show()
    QTest.qWait(20)
    renderer = widget.renderer
    handle = widget.handle
    assert renderer.is_running

    # Deleted without any close() or teardown()
    parent.deleteLater()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)

    assert not shiboken6.isValid(widget)
    assert registry.resolve(handle) is None
    assert renderer.is_inert
    assert not renderer.is_running

    frames = renderer.frame_count
    QTest.qWait(50)
    assert renderer.frame_count == frames


def test_destruction_keeps_a_newer_surface_under_the_same_handle(qapp):
    registry = SurfaceRegistry()
    parent = QWidget()
    CascadeBackground(registry, parent=parent)
    replacement = object()
    registry.register("matrix-bg", replacement)

    parent.deleteLater()
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)

    assert registry.resolve("matrix-bg") is replacement
