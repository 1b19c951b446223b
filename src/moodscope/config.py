"""
Configuration dataclasses for the mood pipeline.

Defaults reproduce the tuning of the browser visualizer the thresholds
were calibrated against.
"""

from dataclasses import dataclass


@dataclass
class ExtractorConfig:
    """Thresholds and windows used by the feature extractor."""

    # Onset detection
    onset_delta: float = 0.12     # minimum energy jump between frames
    onset_floor: float = 0.15     # minimum absolute energy for an onset
    onset_window_ms: float = 3000.0

    # Tempo normalization (BPM mapped linearly onto [0, 1])
    min_bpm: float = 40.0
    max_bpm: float = 180.0

    # Fraction of the lowest bins counted as "bass"
    bass_fraction: float = 0.10

    # Time-domain midpoint for zero crossings (byte-scaled silence)
    zcr_midpoint: int = 128


@dataclass
class AnalyserConfig:
    """
    Byte-frame synthesis parameters.

    Mirror the defaults of a Web Audio AnalyserNode with fftSize=2048.
    """

    fft_size: int = 2048
    smoothing_time_constant: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0

    def validate(self):
        """Raise ValueError for settings an AnalyserNode would reject."""
        if self.fft_size < 32 or self.fft_size > 32768:
            raise ValueError(f"fft_size out of range [32, 32768]: {self.fft_size}")
        if self.fft_size & (self.fft_size - 1):
            raise ValueError(f"fft_size must be a power of two: {self.fft_size}")
        if not 0.0 <= self.smoothing_time_constant <= 1.0:
            raise ValueError(
                f"smoothing_time_constant must be in [0, 1]: {self.smoothing_time_constant}"
            )
        if self.min_decibels >= self.max_decibels:
            raise ValueError("min_decibels must be lower than max_decibels")

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2
