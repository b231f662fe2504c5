"""
Display colors for participants
"""
from __future__ import annotations
import colorsys
import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence

DEFAULT_PALETTE = (
    "#e6194b", "#3cb44b", "#4363d8", "#f58231", "#911eb4",
    "#42d4f4", "#f032e6", "#9a6324", "#469990", "#800000",
)


def hsv_to_hex(h: float, s: float, v: float) -> str:
    """Convert HSV (all 0..1) to #rrggbb"""
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


class ColorAssigner(ABC):
    """Hands out a color for each new participant"""

    @abstractmethod
    def next_color(self) -> str:
        ...


class RandomHueColorAssigner(ColorAssigner):
    """Vibrant colors: random hue, fixed saturation and brightness"""

    saturation = 0.7
    brightness = 0.9

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def next_color(self) -> str:
        return hsv_to_hex(self.rng.random(), self.saturation, self.brightness)


class PaletteColorAssigner(ColorAssigner):
    """Cycles through a fixed palette"""

    def __init__(self, palette: Sequence[str] = DEFAULT_PALETTE):
        if not palette:
            raise ValueError("palette must not be empty")
        self.palette = list(palette)
        self._i = 0

    def next_color(self) -> str:
        c = self.palette[self._i % len(self.palette)]
        self._i += 1
        return c
