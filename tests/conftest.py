"""Pytest configuration: headless Qt plus in-memory surface/scheduler doubles."""
from __future__ import annotations

import os
import sys
from pathlib import Path

# Must be set before the first QGuiApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import numpy as np
import pytest
from PySide6.QtWidgets import QApplication


class RecordingSurface:
    """Surface double that records every drawing call instead of painting."""
    def __init__(self, width: int = 140, height: int = 100) -> None:
        self._width = width
        self._height = height
        self.fills: list[tuple[str, float]] = []
        self.frames: list[list[tuple[str, float, float, str]]] = []
        self.clears = 0

    def set_size(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self.clears += 1

    def fill_rect(self, color: str, alpha: float) -> None:
        self.fills.append((color, alpha))

    def draw_glyphs(self, glyphs, xs, ys, colors, glyph_size) -> None:
        self.frames.append(list(zip(glyphs, xs, ys, colors)))


class ManualScheduler:
    """FrameScheduler double: frames only run when the test pumps them."""
    def __init__(self) -> None:
        self._next_handle = 0
        self.pending: dict[int, object] = {}

    def request_frame(self, callback) -> int:
        self._next_handle += 1
        self.pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: int) -> None:
        self.pending.pop(handle, None)

    def pump(self, frames: int = 1) -> None:
        for _ in range(frames):
            if not self.pending:
                return
            due = list(self.pending.values())
            self.pending.clear()
            for callback in due:
                callback()


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface(140, 100)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
