"""
Cascade Renderer
================
The falling-glyph ("matrix") background animation.

Why is this file needed?
------------------------
1. Simulation: It keeps one drop per column and advances all of them every
   frame, resetting exited drops stochastically so columns never restart in
   lockstep.
2. Drawing: Each frame dims the previous one with a translucent overlay and
   draws one random glyph per column, which produces the fading trails.
3. Lifecycle: It owns the handle of its pending frame, so start/stop are
   idempotent and stop() truly halts the loop.

Note: The renderer never listens for resize or visibility signals itself.
Hosts call resize()/start()/stop() (see view.cascade_widget).
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

import numpy as np

from cascadebg.config import CascadeConfig
from cascadebg.model.glyphs import ColorCycle, GlyphSet
from cascadebg.model.state import DropField, RunState

if TYPE_CHECKING:
    import numpy.typing as npt

    from cascadebg.scheduling import FrameScheduler
    from cascadebg.surface import Surface, SurfaceRegistry

logger = logging.getLogger(__name__)


class CascadeRenderer:
    """
    Renders the cascade onto one Surface.

    The loop starts during construction unless autostart=False, so a host
    tearing down the view must call stop() (or close()).

    A renderer built without a surface is inert: every operation is a silent
    no-op and nothing is ever scheduled.
    """
    def __init__(
        self,
        surface: Optional[Surface],
        scheduler: FrameScheduler,
        config: Optional[CascadeConfig] = None,
        rng: Optional[np.random.Generator] = None,
        autostart: bool = True,
        on_frame: Optional[Callable[[], None]] = None,
    ) -> None:
        self._config: CascadeConfig = config or CascadeConfig()
        self._surface: Optional[Surface] = surface
        self._scheduler = scheduler
        self._rng: np.random.Generator = rng if rng is not None else np.random.default_rng(self._config.seed)
        self._on_frame = on_frame

        self._glyphs = GlyphSet(self._config.glyph_set)
        self._colors = ColorCycle(self._config.palette, self._config.color_policy)
        self._field = DropField(self._config.glyph_size)

        self._state: RunState = RunState.STOPPED
        self._handle: Any = None
        self._frame_count: int = 0

        if surface is None:
            logger.warning("Cascade surface not found, renderer disabled.")
            return

        self._field.resize(surface.width(), surface.height(), self._rng)
        logger.info(f"Cascade renderer initialized ({self._field.column_count} columns).")

        if autostart:
            self.start()

    @classmethod
    def bind(
        cls,
        registry: SurfaceRegistry,
        handle: str,
        scheduler: FrameScheduler,
        **kwargs: Any,
    ) -> CascadeRenderer:
        """Create a renderer for the surface registered under `handle` (inert if there is none)."""
        surface = registry.resolve(handle)
        if surface is None:
            logger.warning(f"No drawing surface registered as '{handle}'.")
        return cls(surface, scheduler, **kwargs)

    # ------------------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------------------

    @property
    def config(self) -> CascadeConfig:
        return self._config

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def is_inert(self) -> bool:
        return self._surface is None

    @property
    def column_count(self) -> int:
        return self._field.column_count

    @property
    def drops(self) -> npt.NDArray[np.float64]:
        """Copy of the drop positions (in rows)."""
        return self._field.drops.copy()

    @property
    def frame_count(self) -> int:
        return self._frame_count

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def resize(self, width: int, height: int) -> bool:
        """
        Recompute the column grid for new surface dimensions.

        All drops are re-randomized; a non-positive dimension yields zero
        columns. Identical dimensions are a no-op. Returns True if the grid changed.
        """
        if self.is_inert:
            return False
        if width <= 0 or height <= 0:
            logger.debug(f"Degenerate surface size {width}x{height}, no columns will be drawn.")

        changed = self._field.resize(width, height, self._rng)
        if changed:
            self._surface.clear()
        return changed

    def render_frame(self) -> None:
        """Paint exactly one frame: fade overlay, one glyph per column, advance drops."""
        if self.is_inert:
            return

        cfg = self._config
        self._surface.fill_rect(cfg.background, cfg.fade_opacity)

        n = self._field.column_count
        if n > 0:
            glyphs = self._glyphs.pick(self._rng, n)
            xs, ys = self._field.positions()
            colors = self._colors.colors_for(n, self._rng)
            self._surface.draw_glyphs(glyphs, xs.tolist(), ys.tolist(), colors, cfg.glyph_size)
            self._field.advance(self._rng, cfg.reset_threshold)

        self._frame_count += 1
        if self._on_frame is not None:
            self._on_frame()

    def start(self) -> None:
        if self.is_inert or self._state is RunState.RUNNING:
            return
        self._state = RunState.RUNNING
        self._handle = self._scheduler.request_frame(self._tick)
        logger.info("Cascade animation started.")

    def stop(self) -> None:
        if self._state is RunState.STOPPED:
            return
        self._state = RunState.STOPPED
        if self._handle is not None:
            self._scheduler.cancel_frame(self._handle)
            self._handle = None
        logger.info("Cascade animation stopped.")

    def close(self) -> None:
        """Stop the loop and release the surface; the renderer becomes inert."""
        self.stop()
        self._surface = None

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _tick(self) -> None:
        self._handle = None
        if self._state is not RunState.RUNNING:
            return
        self.render_frame()
        # on_frame may have stopped us
        if self._state is RunState.RUNNING:
            self._handle = self._scheduler.request_frame(self._tick)
