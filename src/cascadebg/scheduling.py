"""
Frame Scheduling
================
"Run again before the next repaint" for the render loop.

Why is this file needed?
------------------------
1. Explicit handles: The renderer holds the handle of its pending frame and
   cancels it on stop, instead of relying on a flag checked inside the loop.
2. Testability: The renderer only sees the FrameScheduler protocol, so tests
   can pump frames by hand without a Qt event loop.

Classes:
    FrameScheduler: Protocol for one-shot frame requests.
    QtFrameScheduler: Single-shot QTimer implementation.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

import shiboken6
from PySide6.QtCore import QObject, QTimer


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> Any: ...
    def cancel_frame(self, handle: Any) -> None: ...


class QtFrameScheduler:
    """
    Schedules each frame with its own single-shot QTimer; the timer is the handle.

    All timers live on the thread of `parent`, so frames and resizes run on the
    same event queue and never need locking.
    """
    def __init__(self, parent: Optional[QObject] = None, interval_ms: int = 16) -> None:
        self._parent = parent
        self.interval_ms = interval_ms
        self._pending: set[QTimer] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(self.interval_ms)
        timer.timeout.connect(lambda: self._fire(timer, callback))
        self._pending.add(timer)
        timer.start()
        return timer

    def cancel_frame(self, handle: QTimer) -> None:
        if handle not in self._pending:
            return
        self._pending.discard(handle)
        # The timer dies with its parent; cancelling during teardown may find it gone
        if not shiboken6.isValid(handle):
            return
        handle.stop()
        handle.deleteLater()

    def _fire(self, timer: QTimer, callback: Callable[[], None]) -> None:
        if timer not in self._pending:
            return
        self._pending.discard(timer)
        timer.deleteLater()
        callback()
