from __future__ import annotations

import shiboken6
from PySide6.QtCore import QObject
from PySide6.QtTest import QTest

from cascadebg.scheduling import QtFrameScheduler


def test_requested_frame_fires_once(qapp):
    scheduler = QtFrameScheduler(interval_ms=1)
    calls = []

    scheduler.request_frame(lambda: calls.append(1))
    QTest.qWait(50)

    assert calls == [1]
    assert scheduler.pending_count == 0


def test_cancelled_frame_never_fires(qapp):
    scheduler = QtFrameScheduler(interval_ms=5)
    calls = []

    handle = scheduler.request_frame(lambda: calls.append(1))
    scheduler.cancel_frame(handle)
    QTest.qWait(50)

    assert calls == []
    assert scheduler.pending_count == 0


def test_cancel_after_fire_is_a_no_op(qapp):
    scheduler = QtFrameScheduler(interval_ms=1)
    handle = scheduler.request_frame(lambda: None)
    QTest.qWait(50)
    scheduler.cancel_frame(handle)
    assert scheduler.pending_count == 0


def test_cancel_tolerates_a_timer_deleted_with_its_parent(qapp):
    parent = QObject()
    scheduler = QtFrameScheduler(parent, interval_ms=1000)
    handle = scheduler.request_frame(lambda: None)

    shiboken6.delete(parent)
    scheduler.cancel_frame(handle)

    assert scheduler.pending_count == 0
