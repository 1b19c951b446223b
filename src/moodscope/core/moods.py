"""
Mood classification module.

Maps the eight extracted features to a label from a closed vocabulary:
a 3x3 energy x brightness grid picks a base mood, then an ordered chain of
modifiers remaps it. The chain order is load-bearing; reordering the
modifiers changes results.

Base grid (energy x brightness):

                  bass-heavy    mid-range     bright/treble
    high energy:  angry         powerful      excited
    mid energy:   tense         focused       uplifting
    low energy:   melancholic   peaceful      serene
    near-silent:  silent
"""

import bisect
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping

from moodscope.core.extractor import FeatureVector


class Mood(str, Enum):
    """Closed mood vocabulary."""

    SILENT = "silent"

    # Base grid
    MELANCHOLIC = "melancholic"
    PEACEFUL = "peaceful"
    SERENE = "serene"
    TENSE = "tense"
    FOCUSED = "focused"
    UPLIFTING = "uplifting"
    ANGRY = "angry"
    POWERFUL = "powerful"
    EXCITED = "excited"

    # Fast-tempo variants
    RESTLESS = "restless"
    PLAYFUL = "playful"
    JOYFUL = "joyful"
    FRANTIC = "frantic"
    DRIVEN = "driven"
    EUPHORIC = "euphoric"
    FURIOUS = "furious"
    INTENSE = "intense"

    # Slow-tempo and drone variants
    SOMBER = "somber"
    TRANQUIL = "tranquil"
    MEDITATIVE = "meditative"
    BROODING = "brooding"
    CONTEMPLATIVE = "contemplative"
    HOPEFUL = "hopeful"
    SMOLDERING = "smoldering"
    HEAVY = "heavy"
    GIDDY = "giddy"

    def __str__(self) -> str:
        return self.value


MOOD_INDEX: Mapping[Mood, int] = MappingProxyType({mood: i for i, mood in enumerate(Mood)})

SILENCE_THRESHOLD = 0.05
ENERGY_BANDS = (0.35, 0.60)      # low | mid | high
BRIGHTNESS_BANDS = (0.38, 0.65)  # bass | mid | bright

# Rows: energy band, columns: brightness band
BASE_GRID: tuple[tuple[Mood, ...], ...] = (
    (Mood.MELANCHOLIC, Mood.PEACEFUL, Mood.SERENE),
    (Mood.TENSE, Mood.FOCUSED, Mood.UPLIFTING),
    (Mood.ANGRY, Mood.POWERFUL, Mood.EXCITED),
)


@dataclass(frozen=True)
class MoodModifier:
    """
    One conditional step of the modifier chain.

    The table is completed to a total mapping over Mood at construction:
    labels without an explicit entry map to themselves.
    """

    name: str
    applies: Callable[[FeatureVector], bool]
    table: Mapping[Mood, Mood] = field(default_factory=dict)

    def __post_init__(self):
        total = {mood: self.table.get(mood, mood) for mood in Mood}
        object.__setattr__(self, "table", MappingProxyType(total))

    def remap(self, mood: Mood) -> Mood:
        return self.table[mood]

    def __call__(self, mood: Mood, features: FeatureVector) -> Mood:
        if self.applies(features):
            return self.remap(mood)
        return mood


M = Mood

# Volume: very loud escalates, very quiet dampens
LOUD = MoodModifier(
    "loud",
    lambda f: f.energy > 0.80,
    {
        M.PEACEFUL: M.UPLIFTING,
        M.SERENE: M.EXCITED,
        M.FOCUSED: M.POWERFUL,
        M.UPLIFTING: M.EXCITED,
        M.MELANCHOLIC: M.TENSE,
        M.TRANQUIL: M.PEACEFUL,
        M.MEDITATIVE: M.SERENE,
        M.HOPEFUL: M.UPLIFTING,
        M.SOMBER: M.MELANCHOLIC,
        M.CONTEMPLATIVE: M.FOCUSED,
        M.BROODING: M.TENSE,
        M.HEAVY: M.POWERFUL,
        M.GIDDY: M.EXCITED,
    },
)

QUIET = MoodModifier(
    "quiet",
    lambda f: f.energy < 0.22,
    {
        M.ANGRY: M.TENSE,
        M.POWERFUL: M.FOCUSED,
        M.EXCITED: M.UPLIFTING,
        M.FURIOUS: M.ANGRY,
        M.INTENSE: M.POWERFUL,
        M.FRANTIC: M.TENSE,
        M.DRIVEN: M.FOCUSED,
        M.RESTLESS: M.MELANCHOLIC,
        M.JOYFUL: M.PEACEFUL,
        M.PLAYFUL: M.PEACEFUL,
        M.EUPHORIC: M.SERENE,
    },
)

# Tempo: fast onsets give urgent variants, slow ones heavy variants.
# tempo == 0 means "no estimate" and leaves the mood alone.
FAST = MoodModifier(
    "fast",
    lambda f: f.tempo > 0.65,
    {
        M.MELANCHOLIC: M.RESTLESS,
        M.PEACEFUL: M.PLAYFUL,
        M.SERENE: M.JOYFUL,
        M.TENSE: M.FRANTIC,
        M.FOCUSED: M.DRIVEN,
        M.UPLIFTING: M.EUPHORIC,
        M.ANGRY: M.FURIOUS,
        M.POWERFUL: M.INTENSE,
        M.EXCITED: M.EUPHORIC,
    },
)

SLOW = MoodModifier(
    "slow",
    lambda f: 0 < f.tempo < 0.25,
    {
        M.MELANCHOLIC: M.SOMBER,
        M.PEACEFUL: M.TRANQUIL,
        M.SERENE: M.MEDITATIVE,
        M.TENSE: M.BROODING,
        M.FOCUSED: M.CONTEMPLATIVE,
        M.UPLIFTING: M.HOPEFUL,
        M.ANGRY: M.SMOLDERING,
        M.POWERFUL: M.HEAVY,
        M.EXCITED: M.GIDDY,
    },
)

# Flux: a static spectrum reads as a sustained drone
DRONE = MoodModifier(
    "drone",
    lambda f: f.flux < 0.05 and f.energy > 0.12,
    {
        M.MELANCHOLIC: M.SOMBER,
        M.PEACEFUL: M.MEDITATIVE,
        M.SERENE: M.MEDITATIVE,
        M.TENSE: M.BROODING,
        M.FOCUSED: M.CONTEMPLATIVE,
        M.UPLIFTING: M.HOPEFUL,
        M.ANGRY: M.SMOLDERING,
        M.POWERFUL: M.HEAVY,
        M.EXCITED: M.GIDDY,
        M.RESTLESS: M.BROODING,
        M.FRANTIC: M.TENSE,
        M.DRIVEN: M.FOCUSED,
        M.EUPHORIC: M.SERENE,
        M.FURIOUS: M.ANGRY,
        M.INTENSE: M.POWERFUL,
    },
)

# Spread: wide spectrum with enough energy sounds fuller
WIDE = MoodModifier(
    "wide",
    lambda f: f.spread > 0.55 and f.energy > 0.40,
    {
        M.FOCUSED: M.POWERFUL,
        M.TENSE: M.FRANTIC,
        M.UPLIFTING: M.EXCITED,
        M.PEACEFUL: M.UPLIFTING,
        M.MELANCHOLIC: M.TENSE,
        M.CONTEMPLATIVE: M.FOCUSED,
        M.TRANQUIL: M.PEACEFUL,
    },
)

# Bass: bass-dominated audio pulls toward heavier, darker moods
BASS = MoodModifier(
    "bass",
    lambda f: f.bass_ratio > 0.30 and f.energy > 0.25,
    {
        M.UPLIFTING: M.FOCUSED,
        M.EXCITED: M.POWERFUL,
        M.JOYFUL: M.DRIVEN,
        M.PLAYFUL: M.RESTLESS,
        M.HOPEFUL: M.CONTEMPLATIVE,
        M.GIDDY: M.RESTLESS,
        M.EUPHORIC: M.INTENSE,
        M.SERENE: M.PEACEFUL,
        M.TRANQUIL: M.SOMBER,
    },
)

# Noise: flat spectrum plus a busy waveform reads as percussive chaos
NOISY = MoodModifier(
    "noisy",
    lambda f: f.flatness > 0.70 and f.zcr > 0.15 and f.energy > 0.15,
    {
        M.PEACEFUL: M.RESTLESS,
        M.SERENE: M.UPLIFTING,
        M.TRANQUIL: M.PEACEFUL,
        M.MEDITATIVE: M.CONTEMPLATIVE,
        M.SOMBER: M.BROODING,
        M.HOPEFUL: M.FOCUSED,
        M.CONTEMPLATIVE: M.TENSE,
    },
)

del M

# Loud/quiet and fast/slow are mutually exclusive pairs, so running each
# half as its own step is equivalent to a single if/else.
MODIFIERS: tuple[MoodModifier, ...] = (LOUD, QUIET, FAST, SLOW, DRONE, WIDE, BASS, NOISY)


def base_mood(energy: float, brightness: float) -> Mood:
    """Pick the grid cell for non-silent input."""
    row = bisect.bisect_right(ENERGY_BANDS, energy)
    col = bisect.bisect_right(BRIGHTNESS_BANDS, brightness)
    return BASE_GRID[row][col]


def classify_features(features: FeatureVector) -> Mood:
    """Classify a FeatureVector. Pure: equal inputs give equal moods."""
    if features.energy < SILENCE_THRESHOLD:
        return Mood.SILENT

    mood = base_mood(features.energy, features.brightness)
    for modifier in MODIFIERS:
        mood = modifier(mood, features)
    return mood


def classify(
    energy: float,
    brightness: float,
    tempo: float,
    flux: float,
    spread: float,
    flatness: float,
    bass_ratio: float,
    zcr: float,
) -> Mood:
    """Classify from the eight scalar features."""
    return classify_features(
        FeatureVector(
            energy=energy,
            brightness=brightness,
            tempo=tempo,
            flux=flux,
            spread=spread,
            flatness=flatness,
            bass_ratio=bass_ratio,
            zcr=zcr,
        )
    )
