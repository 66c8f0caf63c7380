"""
Falling-glyph cascade ("matrix background") for Qt hosts.

The pure model (glyphs, drop grid) and the renderer live here; the Qt host
widgets are in cascadebg.view.
"""
from cascadebg.config import CascadeConfig
from cascadebg.exceptions import CascadeError, ConfigError
from cascadebg.debounce import Debouncer
from cascadebg.model.glyphs import ColorCycle, ColorPolicy, GlyphSet
from cascadebg.model.state import DropField, RunState
from cascadebg.renderer import CascadeRenderer
from cascadebg.scheduling import FrameScheduler, QtFrameScheduler
from cascadebg.surface import QImageSurface, Surface, SurfaceRegistry

__all__ = [
    "CascadeConfig",
    "CascadeError",
    "CascadeRenderer",
    "ColorCycle",
    "ColorPolicy",
    "ConfigError",
    "Debouncer",
    "DropField",
    "FrameScheduler",
    "GlyphSet",
    "QImageSurface",
    "QtFrameScheduler",
    "RunState",
    "Surface",
    "SurfaceRegistry",
]
