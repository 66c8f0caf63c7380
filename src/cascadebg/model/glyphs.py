from __future__ import annotations

from enum import StrEnum
from typing import Iterable, Iterator, TYPE_CHECKING

from cascadebg.exceptions import ConfigError

if TYPE_CHECKING:
    import numpy as np


class ColorPolicy(StrEnum):
    """How a color is assigned to each drawn glyph."""
    COLUMN = "column"  # palette[i % n], stable per column
    RANDOM = "random"  # re-drawn for every glyph on every frame


class GlyphSet:
    """
    Immutable ordered sequence of candidate symbols.
    One is chosen uniformly at random per column per frame.
    """
    __slots__ = ("_glyphs",)

    def __init__(self, glyphs: Iterable[str]) -> None:
        symbols = tuple(glyphs)
        if not symbols:
            raise ConfigError("GlyphSet needs at least one symbol.")
        self._glyphs: tuple[str, ...] = symbols

    def __len__(self) -> int:
        return len(self._glyphs)

    def __iter__(self) -> Iterator[str]:
        return iter(self._glyphs)

    def __getitem__(self, index: int) -> str:
        return self._glyphs[index]

    def __repr__(self) -> str:
        return f"GlyphSet({''.join(self._glyphs)!r})"

    def pick(self, rng: np.random.Generator, count: int) -> list[str]:
        """Pick `count` glyphs uniformly at random (with replacement)."""
        if count <= 0:
            return []
        idx = rng.integers(0, len(self._glyphs), size=count)
        return [self._glyphs[i] for i in idx]


class ColorCycle:
    """A small fixed palette plus the policy deciding which entry each column gets."""
    __slots__ = ("_palette", "_policy")

    def __init__(self, palette: Iterable[str], policy: ColorPolicy = ColorPolicy.COLUMN) -> None:
        colors = tuple(palette)
        if not colors:
            raise ConfigError("ColorCycle needs at least one color.")
        self._palette: tuple[str, ...] = colors
        self._policy = ColorPolicy(policy)

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    @property
    def policy(self) -> ColorPolicy:
        return self._policy

    def colors_for(self, column_count: int, rng: np.random.Generator) -> list[str]:
        """Return one color per column for the current frame."""
        if column_count <= 0:
            return []
        n = len(self._palette)
        if self._policy is ColorPolicy.RANDOM:
            idx = rng.integers(0, n, size=column_count)
            return [self._palette[i] for i in idx]
        return [self._palette[i % n] for i in range(column_count)]
