"""
Configuration & Defaults
========================
This module is the central registry for the tunable constants of the cascade.

Why is this file needed?
------------------------
1. Abstraction: Glyph size, fade opacity, reset threshold etc. are not
   scattered as magic numbers through the renderer.
2. Persistence: Users can override any option through QSettings (INI file),
   without touching the code.

Exports:
    CascadeConfig: Frozen dataclass with every recognized option.
    DEFAULT_GLYPHS, DEFAULT_PALETTE, DEFAULT_BACKGROUND: Reference values.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional, TYPE_CHECKING

from cascadebg.exceptions import ConfigError
from cascadebg.model.glyphs import ColorPolicy

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

# Global Constants
DEFAULT_GLYPHS: str = (
    "01アイウエオカキクケコサシスセソタチツテトナニヌネノ"
    "ハヒフヘホマミムメモヤユヨラリルレロワヲン"
)
DEFAULT_PALETTE: tuple[str, ...] = ("#7c3aed", "#3b82f6", "#06b6d4")  # purple, blue, cyan
DEFAULT_BACKGROUND: str = "#0a0a0a"
DEFAULT_HANDLE: str = "matrix-bg"

# New drops start somewhere in [-100, 0) rows above the top edge
INITIAL_DROP_OFFSET_RANGE: float = 100.0

SETTINGS_GROUP: str = "cascade"


@dataclass(frozen=True)
class CascadeConfig:
    glyph_size: int = 14
    fade_opacity: float = 0.05
    reset_threshold: float = 0.975
    resize_debounce_ms: int = 250
    frame_interval_ms: int = 16
    glyph_set: str = DEFAULT_GLYPHS
    palette: tuple[str, ...] = field(default=DEFAULT_PALETTE)
    color_policy: ColorPolicy = ColorPolicy.COLUMN
    background: str = DEFAULT_BACKGROUND
    font_family: str = "monospace"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        # Normalize sequences so the instance stays hashable and immutable
        object.__setattr__(self, "palette", tuple(self.palette))
        object.__setattr__(self, "glyph_set", "".join(self.glyph_set))
        object.__setattr__(self, "color_policy", ColorPolicy(self.color_policy))

        if self.glyph_size <= 0:
            raise ConfigError(f"glyph_size must be positive, got {self.glyph_size}")
        if not 0.0 <= self.fade_opacity <= 1.0:
            raise ConfigError(f"fade_opacity must be within [0, 1], got {self.fade_opacity}")
        if not 0.0 <= self.reset_threshold <= 1.0:
            raise ConfigError(f"reset_threshold must be within [0, 1], got {self.reset_threshold}")
        if self.resize_debounce_ms < 0:
            raise ConfigError(f"resize_debounce_ms must not be negative, got {self.resize_debounce_ms}")
        if self.frame_interval_ms <= 0:
            raise ConfigError(f"frame_interval_ms must be positive, got {self.frame_interval_ms}")
        if not self.glyph_set:
            raise ConfigError("glyph_set must contain at least one symbol")
        if not self.palette:
            raise ConfigError("palette must contain at least one color")

    @property
    def resize_debounce_s(self) -> float:
        return self.resize_debounce_ms / 1000.0

    # ------------------------------------------------------------------------------
    # QSettings persistence
    # ------------------------------------------------------------------------------

    @classmethod
    def from_settings(cls, settings: QSettings, group: str = SETTINGS_GROUP) -> CascadeConfig:
        """
        Build a config from QSettings. Missing keys keep their defaults,
        invalid values are logged and replaced by the default.
        """
        config = cls()
        settings.beginGroup(group)
        try:
            for f in fields(cls):
                if not settings.contains(f.name):
                    continue
                default = getattr(config, f.name)
                try:
                    value = _read_value(settings, f.name, default)
                    config = replace(config, **{f.name: value})
                except (TypeError, ValueError) as e:
                    logger.warning(f"Ignoring invalid setting '{group}/{f.name}': {e}")
        finally:
            settings.endGroup()
        return config

    def to_settings(self, settings: QSettings, group: str = SETTINGS_GROUP) -> None:
        """Write every option back to QSettings."""
        settings.beginGroup(group)
        try:
            for f in fields(self):
                value = getattr(self, f.name)
                if value is None:
                    settings.remove(f.name)
                elif isinstance(value, tuple):
                    settings.setValue(f.name, list(value))
                elif isinstance(value, ColorPolicy):
                    settings.setValue(f.name, value.value)
                else:
                    settings.setValue(f.name, value)
        finally:
            settings.endGroup()


def _read_value(settings: QSettings, key: str, default: Any) -> Any:
    """Read one typed value; INI files store everything as strings."""
    if key == "seed":
        return int(settings.value(key))
    if isinstance(default, tuple):
        raw = settings.value(key, type=list)
        if isinstance(raw, str):
            raw = [raw]
        return tuple(str(v) for v in raw)
    if isinstance(default, ColorPolicy):
        return ColorPolicy(str(settings.value(key)).lower())
    if isinstance(default, int):
        return int(settings.value(key))
    if isinstance(default, float):
        return float(settings.value(key))
    return str(settings.value(key))
