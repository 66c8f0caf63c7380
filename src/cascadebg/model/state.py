"""
Cascade State (Data Model)
==========================
This module defines the per-renderer simulation state.

Why is this file needed?
------------------------
1. State Management: It holds the column grid and the drop positions of ONE
   renderer instance. Nothing here is shared between instances.
2. Decoupling: The renderer reads positions from this object and asks it to
   advance; the drawing surface never touches it.

Classes:
    RunState: Stopped / Running lifecycle states.
    DropField: Column grid + one floating-point drop position per column.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from cascadebg.config import INITIAL_DROP_OFFSET_RANGE
from cascadebg.exceptions import ConfigError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class RunState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class DropField:
    """
    The column grid derived from the surface width, and the drops falling in it.

    Drop positions are measured in rows (multiples of glyph_size). They can be
    fractional and negative; negative rows are above the top edge.
    """
    def __init__(self, glyph_size: int) -> None:
        if glyph_size <= 0:
            raise ConfigError(f"glyph_size must be positive, got {glyph_size}")
        self.glyph_size: int = glyph_size
        self.width: int = 0
        self.height: int = 0
        self.drops: npt.NDArray[np.float64] = np.empty(0, dtype=np.float64)
        self._initialized: bool = False

    @property
    def column_count(self) -> int:
        """floor(width / glyph_size), or 0 for a degenerate surface."""
        if self.width <= 0 or self.height <= 0:
            return 0
        return self.width // self.glyph_size

    def resize(self, width: int, height: int, rng: np.random.Generator) -> bool:
        """
        Recompute the grid for new surface dimensions and re-randomize every drop.

        Returns False (and keeps the current drops) when the dimensions did not change.
        """
        width = max(int(width), 0)
        height = max(int(height), 0)
        if self._initialized and (width, height) == (self.width, self.height):
            return False

        self.width = width
        self.height = height
        self._initialized = True

        n = self.column_count
        # Generator.uniform samples the half-open interval [low, high)
        self.drops = rng.uniform(-INITIAL_DROP_OFFSET_RANGE, 0.0, size=n)
        logger.debug(f"Grid resized to {width}x{height} px -> {n} columns")
        return True

    def positions(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Pixel (x, y) draw positions of every column's glyph."""
        xs = np.arange(self.drops.size, dtype=np.float64) * self.glyph_size
        ys = self.drops * self.glyph_size
        return xs, ys

    def advance(self, rng: np.random.Generator, reset_threshold: float) -> npt.NDArray[np.bool_]:
        """
        Apply the stochastic reset policy, then move every drop down one row.

        A drop below the bottom edge restarts at row 0 only when a uniform draw
        exceeds reset_threshold, so exited drops linger off-screen for a
        geometrically distributed number of frames.

        Returns:
            Boolean mask of the columns that were reset this frame.
        """
        if self.drops.size == 0:
            return np.zeros(0, dtype=bool)

        below = self.drops * self.glyph_size > self.height
        rolls = rng.random(self.drops.size)
        reset = below & (rolls > reset_threshold)
        self.drops[reset] = 0.0
        self.drops += 1.0
        return reset
