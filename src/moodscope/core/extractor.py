"""
Feature extraction module for live spectrum frames.

Turns one byte-scaled frequency frame (and optionally a time-domain frame)
into eight normalized mood drivers: energy, brightness, tempo, flux,
spread, flatness, bass ratio and zero crossing rate.
"""

import bisect
import logging
import math
import time
from dataclasses import asdict, astuple, dataclass, field
from typing import Callable, Sequence

import numpy as np

from moodscope.config import ExtractorConfig

logger = logging.getLogger(__name__)

FEATURE_NAMES = (
    "energy",
    "brightness",
    "tempo",
    "flux",
    "spread",
    "flatness",
    "bass_ratio",
    "zcr",
)


@dataclass(frozen=True)
class FeatureVector:
    """Eight mood drivers for a single frame, each in [0.0, 1.0]."""

    energy: float = 0.0      # overall loudness
    brightness: float = 0.0  # log-scale spectral centroid (0=bass, 1=treble)
    tempo: float = 0.0       # onset rate (0 = no data or <=40 BPM, 1 = >=180 BPM)
    flux: float = 0.0        # spectral change from the previous frame
    spread: float = 0.0      # bandwidth around the centroid
    flatness: float = 0.0    # 0 = tonal, 1 = noise-like
    bass_ratio: float = 0.0  # share of amplitude in the lowest bins
    zcr: float = 0.0         # waveform zero crossing rate

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def as_tuple(self) -> tuple[float, ...]:
        """Values in classifier argument order."""
        return astuple(self)


@dataclass
class ExtractorHistory:
    """Cross-frame state carried by one extractor within one session."""

    previous_energy: float = 0.0
    previous_frame: np.ndarray | None = None
    # Monotonic milliseconds, ascending
    onset_times: list[float] = field(default_factory=list)

    def reset(self):
        self.previous_energy = 0.0
        self.previous_frame = None
        self.onset_times.clear()


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return float(min(high, max(low, value)))


def monotonic_ms() -> float:
    """Default extractor clock."""
    return time.monotonic() * 1000.0


class FeatureExtractor:
    """
    Extracts normalized features from successive spectrum frames.

    The extractor is the only stateful stage of the pipeline: it keeps the
    previous frame (for flux), the previous energy and recent onset
    timestamps (for tempo). One extractor must serve exactly one stream;
    call reset() when the source changes.
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """
        Initialize the extractor.

        Args:
            config: Thresholds and windows (defaults tuned for 60 fps input).
            clock: Callable returning monotonic time in milliseconds.
        """
        self.config = config or ExtractorConfig()
        self.clock = clock or monotonic_ms
        self.history = ExtractorHistory()

    def reset(self):
        """Forget all cross-frame state."""
        self.history.reset()

    def extract(
        self,
        freq_frame: Sequence[int] | np.ndarray,
        time_frame: Sequence[int] | np.ndarray | None = None,
        now_ms: float | None = None,
    ) -> FeatureVector:
        """
        Extract features from one frame and advance the history.

        Args:
            freq_frame: N byte magnitudes (0-255), bin 0 = DC.
            time_frame: Optional M byte waveform samples centred at 128.
            now_ms: Frame timestamp in milliseconds. Defaults to the clock.

        Returns:
            FeatureVector with every field clamped to [0.0, 1.0].
        """
        magnitudes = np.asarray(freq_frame, dtype=np.float64)
        now = self.clock() if now_ms is None else float(now_ms)

        n_bins = len(magnitudes)
        # Bin 0 is skipped in all spectral sums so log2(i) stays finite
        upper = magnitudes[1:]
        log_index = np.log2(np.arange(1, n_bins, dtype=np.float64))
        total = float(upper.sum())
        log_n = math.log2(n_bins) if n_bins > 1 else 0.0

        energy = (total / n_bins) / 255.0 if n_bins else 0.0

        centroid = 0.0
        brightness = 0.0
        spread = 0.0
        if total > 0:
            centroid = float(np.dot(log_index, upper)) / total
            brightness = centroid / log_n
            deviation = log_index - centroid
            spread = math.sqrt(float(np.dot(deviation * deviation, upper)) / total) / log_n

        flux = self._spectral_flux(magnitudes, total)
        flatness = self._spectral_flatness(upper, total, n_bins)
        bass_ratio = self._bass_ratio(magnitudes, total)
        zcr = self._zero_crossing_rate(time_frame)
        tempo = self._update_tempo(energy, now)

        return FeatureVector(
            energy=_clamp(energy),
            brightness=_clamp(brightness),
            tempo=_clamp(tempo),
            flux=_clamp(flux),
            spread=_clamp(spread),
            flatness=_clamp(flatness),
            bass_ratio=_clamp(bass_ratio),
            zcr=_clamp(zcr),
        )

    def _spectral_flux(self, magnitudes: np.ndarray, total: float) -> float:
        """
        Half-wave rectified change against the previous frame.

        Normalized by the current total amplitude so quiet and loud audio
        compare proportionally. The frame is always stored for next time.
        """
        previous = self.history.previous_frame
        flux = 0.0
        if previous is not None and total > 0 and previous.shape == magnitudes.shape:
            rising = np.maximum(magnitudes - previous, 0.0)
            flux = float(rising.sum()) / total
        self.history.previous_frame = magnitudes.copy()
        return flux

    @staticmethod
    def _spectral_flatness(upper: np.ndarray, total: float, n_bins: int) -> float:
        """Geometric over arithmetic mean of the positive bins."""
        if total <= 0:
            return 0.0
        positive = upper[upper > 0]
        if positive.size == 0:
            return 0.0
        geometric_mean = math.exp(float(np.mean(np.log(positive))))
        arithmetic_mean = total / n_bins
        return geometric_mean / arithmetic_mean

    def _bass_ratio(self, magnitudes: np.ndarray, total: float) -> float:
        if total <= 0:
            return 0.0
        bass_end = max(1, int(len(magnitudes) * self.config.bass_fraction))
        return float(magnitudes[:bass_end].sum()) / total

    def _zero_crossing_rate(self, time_frame) -> float:
        if time_frame is None:
            return 0.0
        samples = np.asarray(time_frame, dtype=np.float64)
        if samples.size < 2:
            return 0.0
        above = samples >= self.config.zcr_midpoint
        crossings = int(np.count_nonzero(above[1:] != above[:-1]))
        return crossings / (samples.size - 1)

    def _update_tempo(self, energy: float, now: float) -> float:
        """
        Record onsets, prune the trailing window and estimate tempo.

        Returns the average inter-onset rate mapped from
        [min_bpm, max_bpm] onto [0, 1].
        """
        cfg = self.config
        history = self.history

        if energy - history.previous_energy > cfg.onset_delta and energy > cfg.onset_floor:
            bisect.insort(history.onset_times, now)
            logger.debug("Onset at %.1f ms (energy %.3f)", now, energy)
        history.previous_energy = energy

        cutoff = now - cfg.onset_window_ms
        stale = bisect.bisect_left(history.onset_times, cutoff)
        del history.onset_times[:stale]

        onsets = history.onset_times
        if len(onsets) < 2:
            return 0.0

        # Mean of consecutive gaps telescopes to span / count
        avg_interval = (onsets[-1] - onsets[0]) / (len(onsets) - 1)
        if avg_interval <= 0:
            return 1.0

        bpm = 60000.0 / avg_interval
        return (bpm - cfg.min_bpm) / (cfg.max_bpm - cfg.min_bpm)
