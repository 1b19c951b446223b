"""Tests for MoodSession lifecycle and end-to-end frame processing."""

import numpy as np
import pytest

from moodscope.core.extractor import ExtractorHistory
from moodscope.core.moods import Mood
from moodscope.core.session import MoodReading, MoodSession


class TestMoodSession:
    """Tests for per-stream sessions."""

    def test_process_returns_reading(self, flat_frame):
        """process() runs extract, classify and color in one call."""
        session = MoodSession()
        reading = session.process(flat_frame, now_ms=0.0)

        assert isinstance(reading, MoodReading)
        assert isinstance(reading.mood, Mood)
        assert reading.color.to_css().startswith("hsl(")
        assert session.frame_count == 1

    def test_silent_frame(self, silent_frame):
        """Silence maps to the silent mood and a pale grey."""
        reading = MoodSession().process(silent_frame, now_ms=0.0)

        assert reading.mood is Mood.SILENT
        assert reading.color.to_css() == "hsl(0, 0%, 78%)"

    def test_bass_heavy_end_to_end(self, bass_frame):
        """Bass-only input never reads as a bright mood."""
        reading = MoodSession().process(bass_frame, now_ms=0.0)

        assert reading.features.bass_ratio > 0.9
        assert reading.mood not in {Mood.EXCITED, Mood.SERENE, Mood.UPLIFTING, Mood.EUPHORIC}

    def test_steady_tone_becomes_drone(self, loud_frame):
        """A sustained loud spectrum settles into a drone variant."""
        session = MoodSession()
        session.process(loud_frame, now_ms=0.0)
        reading = session.process(loud_frame, now_ms=16.0)

        assert reading.features.flux == 0.0
        # High energy, bright centroid: excited, pulled to giddy by the drone step
        assert reading.mood is Mood.GIDDY

    def test_sessions_are_independent(self, loud_frame):
        """Two sessions never share history."""
        first = MoodSession()
        second = MoodSession()
        first.process(loud_frame, now_ms=0.0)

        assert first.extractor.history.onset_times == [0.0]
        assert second.extractor.history == ExtractorHistory()

    def test_reset(self, loud_frame):
        """reset() starts a fresh stream."""
        session = MoodSession()
        session.process(loud_frame, now_ms=0.0)
        session.reset()

        assert session.extractor.history == ExtractorHistory()
        assert session.frame_count == 0
        assert not session.closed

    def test_dispose_closes(self, flat_frame):
        """A disposed session refuses further frames."""
        session = MoodSession()
        session.process(flat_frame, now_ms=0.0)
        session.dispose()

        assert session.closed
        with pytest.raises(RuntimeError):
            session.process(flat_frame, now_ms=16.0)

        # Disposing twice is harmless
        session.dispose()

    def test_context_manager_disposes(self, flat_frame):
        """Leaving the with-block disposes the session."""
        with MoodSession() as session:
            session.process(flat_frame, now_ms=0.0)

        assert session.closed

    def test_clock_passed_to_extractor(self, loud_frame):
        """A session clock drives onset timestamps."""
        session = MoodSession(clock=lambda: 42.0)
        session.process(loud_frame)

        assert session.extractor.history.onset_times == [42.0]

    def test_time_frame_feeds_zcr(self, flat_frame):
        """The waveform reaches the extractor."""
        wave = np.tile([0, 255], 1024)
        reading = MoodSession().process(flat_frame, wave, now_ms=0.0)

        assert reading.features.zcr == 1.0
