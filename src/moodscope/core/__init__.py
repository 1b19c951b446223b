"""Core frame-by-frame mood processing modules."""

from moodscope.core.extractor import FeatureExtractor
from moodscope.core.moods import classify
from moodscope.core.palette import to_color
from moodscope.core.session import MoodSession

__all__ = ["FeatureExtractor", "classify", "to_color", "MoodSession"]
