"""Audio to mood to color engine for reactive visuals."""

from moodscope.core.extractor import FeatureExtractor, FeatureVector
from moodscope.core.frames import ByteFrameAnalyser
from moodscope.core.moods import Mood, classify, classify_features
from moodscope.core.palette import HSLColor, to_color
from moodscope.core.session import MoodReading, MoodSession, MoodTimeline
from moodscope.io.exporter import ManifestExporter
from moodscope.pipeline import MoodPipeline

__version__ = "0.1.0"
__all__ = [
    "FeatureExtractor",
    "FeatureVector",
    "ByteFrameAnalyser",
    "Mood",
    "classify",
    "classify_features",
    "HSLColor",
    "to_color",
    "MoodReading",
    "MoodSession",
    "MoodTimeline",
    "ManifestExporter",
    "MoodPipeline",
]
