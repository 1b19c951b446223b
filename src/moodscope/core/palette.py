"""
Mood to color mapping.

Each mood owns a fixed HSL swatch; lightness is nudged up to +/-15 points
by energy so the color pulses with volume.
"""

import colorsys
import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from moodscope.core.moods import Mood

logger = logging.getLogger(__name__)

FALLBACK_MOOD = Mood.FOCUSED
MIN_LIGHTNESS = 10.0
MAX_LIGHTNESS = 85.0
ENERGY_LIGHTNESS_SWING = 30.0


@dataclass(frozen=True)
class PaletteEntry:
    """Static swatch: hue in [0, 360), saturation and lightness in [0, 100]."""

    hue: int
    saturation: int
    base_lightness: int


@dataclass(frozen=True)
class HSLColor:
    """Display color for one frame."""

    hue: float
    saturation: float
    lightness: float

    @property
    def lightness_percent(self) -> int:
        # Half rounds up, as in CSS serializers
        return int(math.floor(self.lightness + 0.5))

    def to_css(self) -> str:
        return f"hsl({self.hue:g}, {self.saturation:g}%, {self.lightness_percent}%)"

    def to_rgb(self) -> tuple[int, int, int]:
        """Convert to 8-bit RGB."""
        r, g, b = colorsys.hls_to_rgb(
            (self.hue % 360) / 360.0,
            self.lightness_percent / 100.0,
            self.saturation / 100.0,
        )
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

    def __str__(self) -> str:
        return self.to_css()


_E = PaletteEntry

PALETTE: Mapping[Mood, PaletteEntry] = MappingProxyType({
    # Base moods
    Mood.SILENT: _E(0, 0, 93),
    Mood.MELANCHOLIC: _E(248, 55, 28),
    Mood.PEACEFUL: _E(205, 52, 50),
    Mood.SERENE: _E(175, 58, 58),
    Mood.TENSE: _E(22, 78, 36),
    Mood.FOCUSED: _E(128, 45, 38),
    Mood.UPLIFTING: _E(72, 78, 52),
    Mood.ANGRY: _E(348, 85, 40),
    Mood.POWERFUL: _E(25, 88, 44),
    Mood.EXCITED: _E(48, 95, 56),
    # Fast-tempo variants
    Mood.RESTLESS: _E(35, 82, 45),
    Mood.PLAYFUL: _E(80, 85, 58),
    Mood.JOYFUL: _E(55, 90, 62),
    Mood.FRANTIC: _E(10, 92, 42),
    Mood.DRIVEN: _E(150, 65, 42),
    Mood.EUPHORIC: _E(300, 90, 58),
    Mood.FURIOUS: _E(0, 100, 30),
    Mood.INTENSE: _E(20, 95, 38),
    # Slow-tempo and drone variants
    Mood.SOMBER: _E(230, 60, 20),
    Mood.TRANQUIL: _E(200, 35, 65),
    Mood.MEDITATIVE: _E(185, 40, 45),
    Mood.BROODING: _E(270, 50, 25),
    Mood.CONTEMPLATIVE: _E(250, 40, 40),
    Mood.HOPEFUL: _E(45, 65, 55),
    Mood.SMOLDERING: _E(10, 70, 25),
    Mood.HEAVY: _E(30, 60, 28),
    Mood.GIDDY: _E(320, 75, 60),
})

del _E


def palette_entry(mood: Mood | str) -> PaletteEntry:
    """Look up a swatch, falling back to the focused entry for unknown labels."""
    try:
        return PALETTE[Mood(mood)]
    except (ValueError, KeyError):
        logger.debug("No palette entry for %r, using %s", mood, FALLBACK_MOOD)
        return PALETTE[FALLBACK_MOOD]


def to_color(mood: Mood | str, energy: float) -> HSLColor:
    """
    Map a mood and energy level to a display color.

    Args:
        mood: Mood label (enum member or its string value).
        energy: Frame energy in [0.0, 1.0].

    Returns:
        HSLColor with the palette hue/saturation and energy-shifted lightness.
    """
    entry = palette_entry(mood)
    lightness = entry.base_lightness + (energy - 0.5) * ENERGY_LIGHTNESS_SWING
    lightness = min(MAX_LIGHTNESS, max(MIN_LIGHTNESS, lightness))
    return HSLColor(
        hue=float(entry.hue),
        saturation=float(entry.saturation),
        lightness=float(lightness),
    )
