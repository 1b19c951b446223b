"""Tests for byte-frame synthesis."""

import numpy as np
import pytest

from moodscope.config import AnalyserConfig
from moodscope.core.frames import ByteFrameAnalyser


class TestByteFrameAnalyser:
    """Tests for AnalyserNode-style byte frames."""

    @pytest.fixture
    def sine_block(self):
        """2048 samples of a 440Hz sine at 44.1kHz."""
        sr = 44100
        t = np.arange(2048) / sr
        return 0.5 * np.sin(2 * np.pi * 440.0 * t)

    def test_frame_shapes(self, sine_block):
        """Frequency frames have fft_size/2 bins, time frames fft_size samples."""
        analyser = ByteFrameAnalyser()
        freq = analyser.frequency_frame(sine_block)
        wave = analyser.time_domain_frame(sine_block)

        assert freq.shape == (1024,)
        assert wave.shape == (2048,)
        assert freq.dtype == np.uint8
        assert wave.dtype == np.uint8

    def test_silence(self):
        """Silence gives zero magnitudes and a flat 128 waveform."""
        analyser = ByteFrameAnalyser()
        block = np.zeros(2048)

        assert np.all(analyser.frequency_frame(block) == 0)
        assert np.all(analyser.time_domain_frame(block) == 128)

    def test_sine_peak_bin(self, sine_block):
        """A 440Hz tone peaks near bin 440 / (44100 / 2048)."""
        analyser = ByteFrameAnalyser(AnalyserConfig(smoothing_time_constant=0.0))
        freq = analyser.frequency_frame(sine_block)

        assert int(np.argmax(freq)) in (20, 21)
        assert freq.max() > 200

    def test_smoothing_rises_toward_steady_state(self, sine_block):
        """With smoothing, repeated frames approach the unsmoothed level."""
        smoothed = ByteFrameAnalyser()
        raw = ByteFrameAnalyser(AnalyserConfig(smoothing_time_constant=0.0))

        first = smoothed.frequency_frame(sine_block)
        for _ in range(30):
            last = smoothed.frequency_frame(sine_block)
        target = raw.frequency_frame(sine_block)

        peak = int(np.argmax(target))
        assert first[peak] < last[peak]
        assert abs(int(last[peak]) - int(target[peak])) <= 1

    def test_reset_clears_smoothing(self, sine_block):
        """After reset the first frame repeats exactly."""
        analyser = ByteFrameAnalyser()
        first = analyser.frequency_frame(sine_block)
        analyser.frequency_frame(sine_block)
        analyser.reset()

        assert np.array_equal(analyser.frequency_frame(sine_block), first)

    def test_short_block_is_padded(self):
        """Blocks shorter than fft_size are zero-padded at the front."""
        analyser = ByteFrameAnalyser()
        wave = analyser.time_domain_frame(np.full(100, 0.5))

        assert wave.shape == (2048,)
        assert np.all(wave[:-100] == 128)
        assert np.all(wave[-100:] == 192)

    def test_long_block_uses_latest_samples(self):
        """Only the trailing fft_size samples are analysed."""
        analyser = ByteFrameAnalyser()
        block = np.concatenate([np.full(1000, -1.0), np.zeros(2048)])

        assert np.all(analyser.time_domain_frame(block) == 128)

    def test_time_domain_clipping(self):
        """Full-scale samples clip to the byte range."""
        analyser = ByteFrameAnalyser()
        wave = analyser.time_domain_frame(np.array([-1.0, 1.0, 2.0]))

        assert list(wave[-3:]) == [0, 255, 255]

    def test_custom_fft_size(self):
        """fft_size sets the number of bins."""
        analyser = ByteFrameAnalyser(AnalyserConfig(fft_size=512))
        assert analyser.frequency_frame(np.zeros(512)).shape == (256,)
        assert analyser.frequency_bin_count == 256

    @pytest.mark.parametrize("fft_size", [16, 1000, 65536])
    def test_invalid_fft_size(self, fft_size):
        """Sizes outside [32, 32768] or not a power of two are rejected."""
        with pytest.raises(ValueError):
            ByteFrameAnalyser(AnalyserConfig(fft_size=fft_size))

    def test_invalid_smoothing(self):
        """Smoothing outside [0, 1] is rejected."""
        with pytest.raises(ValueError):
            ByteFrameAnalyser(AnalyserConfig(smoothing_time_constant=1.5))

    def test_invalid_decibel_range(self):
        """min_decibels must be below max_decibels."""
        with pytest.raises(ValueError):
            ByteFrameAnalyser(AnalyserConfig(min_decibels=-30.0, max_decibels=-100.0))
