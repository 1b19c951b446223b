"""
Byte-frame synthesis.

Reproduces the frames a Web Audio AnalyserNode hands to the browser each
animation frame, so decoded audio files can drive the same feature
thresholds the live visualizer was tuned on.
"""

import numpy as np
from scipy import fft as scipy_fft
from scipy import signal as scipy_signal

from moodscope.config import AnalyserConfig


class ByteFrameAnalyser:
    """
    Converts blocks of float audio into byte frequency/time-domain frames.

    Frequency frames are Blackman-windowed, FFT magnitudes scaled by
    1/fft_size, smoothed over time and mapped from
    [min_decibels, max_decibels] onto 0..255.
    """

    def __init__(self, config: AnalyserConfig | None = None):
        """
        Initialize the analyser.

        Args:
            config: Analyser settings. Raises ValueError if invalid.
        """
        self.config = config or AnalyserConfig()
        self.config.validate()

        self._window = scipy_signal.get_window("blackman", self.config.fft_size)
        self._smoothed: np.ndarray | None = None

    @property
    def fft_size(self) -> int:
        return self.config.fft_size

    @property
    def frequency_bin_count(self) -> int:
        return self.config.frequency_bin_count

    def reset(self):
        """Drop the smoothing state."""
        self._smoothed = None

    def _prepare(self, block: np.ndarray) -> np.ndarray:
        """Take the most recent fft_size samples, zero-padding at the front."""
        block = np.asarray(block, dtype=np.float64)
        n = self.fft_size
        if len(block) >= n:
            return block[-n:]
        padded = np.zeros(n, dtype=np.float64)
        if len(block):
            padded[n - len(block):] = block
        return padded

    def frequency_frame(self, block: np.ndarray) -> np.ndarray:
        """
        Byte magnitudes for the latest block.

        Args:
            block: Mono float samples in [-1, 1].

        Returns:
            uint8 array of length fft_size / 2.
        """
        cfg = self.config
        windowed = self._prepare(block) * self._window
        magnitude = np.abs(scipy_fft.rfft(windowed))[: cfg.frequency_bin_count] / cfg.fft_size

        if self._smoothed is None:
            self._smoothed = np.zeros(cfg.frequency_bin_count, dtype=np.float64)

        tau = cfg.smoothing_time_constant
        smoothed = tau * self._smoothed + (1.0 - tau) * magnitude
        smoothed[~np.isfinite(smoothed)] = 0.0
        self._smoothed = smoothed

        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(smoothed)

        scale = 255.0 / (cfg.max_decibels - cfg.min_decibels)
        scaled = np.floor(scale * (decibels - cfg.min_decibels))
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def time_domain_frame(self, block: np.ndarray) -> np.ndarray:
        """Byte waveform for the latest block, 128 = silence."""
        samples = self._prepare(block)
        scaled = np.floor(128.0 * (1.0 + samples))
        return np.clip(scaled, 0, 255).astype(np.uint8)
