"""
Manifest serialization module.

Exports a mood timeline to JSON aligned to the target FPS, or to a
compressed NumPy archive for faster loading in rendering tools.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Union

import numpy as np

from moodscope.core.extractor import FEATURE_NAMES
from moodscope.core.moods import MOOD_INDEX, Mood
from moodscope.core.session import MoodReading, MoodTimeline


@dataclass
class ManifestMetadata:
    """Metadata header for the mood manifest."""

    fps: int
    n_frames: int
    duration: float
    sample_rate: int
    fft_size: int
    dominant_mood: str
    version: str = "1.0"
    schema_version: str = "1.0"


class ManifestExporter:
    """
    Exports mood timelines to manifest format.

    Each frame carries its mood, rendered color and the eight features
    that produced it.
    """

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        """Round to configured precision."""
        return round(float(value), self.precision)

    def _build_frame(
        self,
        index: int,
        time_sec: float,
        reading: MoodReading,
    ) -> dict[str, Any]:
        frame: dict[str, Any] = {
            "frame_index": index,
            "time": self._round(time_sec),
            "mood": reading.mood.value,
            "color": reading.color.to_css(),
            "rgb": list(reading.color.to_rgb()),
        }
        for name, value in reading.features.as_dict().items():
            frame[name] = self._round(value)
        return frame

    def build_manifest(self, timeline: MoodTimeline) -> dict[str, Any]:
        """
        Build the complete manifest dictionary.

        Args:
            timeline: Readings from MoodPipeline.analyze().

        Returns:
            Manifest dictionary ready for serialization.
        """
        metadata = ManifestMetadata(
            fps=timeline.fps,
            n_frames=timeline.n_frames,
            duration=self._round(timeline.duration),
            sample_rate=timeline.sample_rate,
            fft_size=timeline.fft_size,
            dominant_mood=timeline.dominant_mood.value,
        )

        frames = [
            self._build_frame(i, timeline.frame_times[i], reading)
            for i, reading in enumerate(timeline.readings)
        ]

        return {
            "metadata": {
                **asdict(metadata),
                "mood_counts": {
                    mood.value: count for mood, count in timeline.mood_counts().items()
                },
            },
            "frames": frames,
        }

    def export_json(
        self,
        timeline: MoodTimeline,
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """Write the manifest as JSON and return the path."""
        manifest = self.build_manifest(timeline)
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=indent)

        return output_path

    def export_numpy(
        self,
        timeline: MoodTimeline,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export the timeline as a NumPy .npz archive.

        Moods are stored as indices into the ``moods`` vocabulary array;
        each feature is stored under its own name.
        """
        output_path = Path(output_path)
        features = timeline.feature_matrix()

        np.savez_compressed(
            output_path,
            frame_times=timeline.frame_times,
            mood_indices=np.array([MOOD_INDEX[m] for m in timeline.moods], dtype=np.int16),
            moods=np.array([m.value for m in Mood]),
            lightness=np.array([r.color.lightness for r in timeline.readings], dtype=np.float64),
            fps=timeline.fps,
            n_frames=timeline.n_frames,
            **{name: features[:, i] for i, name in enumerate(FEATURE_NAMES)},
        )

        return output_path

    def to_dict(self, timeline: MoodTimeline) -> dict[str, Any]:
        """Return manifest as dictionary (for in-memory use)."""
        return self.build_manifest(timeline)
