"""
Per-stream session wrapping the extract -> classify -> color chain.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from moodscope.config import ExtractorConfig
from moodscope.core.extractor import FEATURE_NAMES, FeatureExtractor, FeatureVector
from moodscope.core.moods import Mood, classify_features
from moodscope.core.palette import HSLColor, to_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoodReading:
    """Pipeline output for one frame."""

    features: FeatureVector
    mood: Mood
    color: HSLColor


class MoodSession:
    """
    Owns the extractor history for one continuous audio stream.

    Create one session per capture source, or call reset() when the
    source changes so stale onsets and flux baselines do not leak into
    the new stream. Sessions share nothing with each other.
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.extractor = FeatureExtractor(config=config, clock=clock)
        self._closed = False
        self.frame_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def process(
        self,
        freq_frame: Sequence[int] | np.ndarray,
        time_frame: Sequence[int] | np.ndarray | None = None,
        now_ms: float | None = None,
    ) -> MoodReading:
        """
        Run one frame through the full pipeline.

        Raises:
            RuntimeError: If the session has been disposed.
        """
        if self._closed:
            raise RuntimeError("MoodSession has been disposed")

        features = self.extractor.extract(freq_frame, time_frame, now_ms=now_ms)
        mood = classify_features(features)
        self.frame_count += 1
        return MoodReading(features=features, mood=mood, color=to_color(mood, features.energy))

    def reset(self):
        """Start a fresh stream: empty onsets, no previous frame, zero energy."""
        logger.debug("Resetting mood session after %d frames", self.frame_count)
        self.extractor.reset()
        self.frame_count = 0

    def dispose(self):
        """Reset and close the session. Further process() calls raise."""
        if not self._closed:
            self.reset()
            self._closed = True

    def __enter__(self) -> "MoodSession":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


@dataclass
class MoodTimeline:
    """Readings for a whole decoded signal, one per output frame."""

    readings: list[MoodReading]
    frame_times: np.ndarray
    fps: int
    sample_rate: int
    fft_size: int
    duration: float

    @property
    def n_frames(self) -> int:
        return len(self.readings)

    @property
    def moods(self) -> list[Mood]:
        return [reading.mood for reading in self.readings]

    def mood_counts(self) -> dict[Mood, int]:
        counts = Counter(self.moods)
        return {mood: counts[mood] for mood in Mood if counts[mood]}

    @property
    def dominant_mood(self) -> Mood:
        """Most frequent mood, ignoring silence unless nothing else occurs."""
        counts = Counter(mood for mood in self.moods if mood is not Mood.SILENT)
        if not counts:
            return Mood.SILENT
        return counts.most_common(1)[0][0]

    def feature_matrix(self) -> np.ndarray:
        """Shape (n_frames, 8) in FEATURE_NAMES order."""
        if not self.readings:
            return np.zeros((0, len(FEATURE_NAMES)), dtype=np.float64)
        return np.array([r.features.as_tuple() for r in self.readings], dtype=np.float64)
