"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

# Default sample rate for test audio
TEST_SR = 22050

# Frequency bins delivered by an analyser with fftSize=2048
N_BINS = 1024


@pytest.fixture
def sample_rate() -> int:
    """Default sample rate for tests."""
    return TEST_SR


@pytest.fixture
def pure_sine(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a pure 440Hz sine wave (A4 note).

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 2.0
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)
    y = 0.5 * np.sin(2 * np.pi * 440.0 * t)
    return y.astype(np.float32), sample_rate


@pytest.fixture
def white_noise(sample_rate: int) -> tuple[np.ndarray, int]:
    """Generate reproducible white noise."""
    rng = np.random.default_rng(42)
    y = rng.standard_normal(int(sample_rate * 2.0)).astype(np.float32) * 0.3
    return y, sample_rate


@pytest.fixture
def mixed_signal(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a signal with both harmonic and percussive content.

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 2.0
    t = np.linspace(0, duration, int(sample_rate * duration), endpoint=False)

    # Harmonic: chord (C major: C4, E4, G4)
    harmonic = (
        0.2 * np.sin(2 * np.pi * 261.63 * t) +
        0.2 * np.sin(2 * np.pi * 329.63 * t) +
        0.2 * np.sin(2 * np.pi * 392.00 * t)
    )

    # Percussive: clicks at 120 BPM
    samples_per_beat = int(sample_rate * 60 / 120)
    total_samples = len(t)
    percussive = np.zeros(total_samples)

    click_duration = int(sample_rate * 0.01)
    for beat_start in range(0, total_samples, samples_per_beat):
        click_end = min(beat_start + click_duration, total_samples)
        decay = np.exp(-np.linspace(0, 5, click_end - beat_start))
        percussive[beat_start:click_end] = 0.5 * decay

    y = (harmonic + percussive).astype(np.float32)
    return y, sample_rate


@pytest.fixture
def temp_audio_file(tmp_path, mixed_signal):
    """Create a temporary audio file for testing file I/O."""
    import soundfile as sf

    y, sr = mixed_signal
    audio_path = tmp_path / "test_audio.wav"
    sf.write(audio_path, y, sr)
    return audio_path


@pytest.fixture
def silent_frame() -> np.ndarray:
    """All-zero spectrum frame."""
    return np.zeros(N_BINS, dtype=np.uint8)


@pytest.fixture
def flat_frame() -> np.ndarray:
    """Constant mid-level spectrum across every bin."""
    return np.full(N_BINS, 100, dtype=np.uint8)


@pytest.fixture
def loud_frame() -> np.ndarray:
    """Constant loud spectrum (energy ~0.78)."""
    return np.full(N_BINS, 200, dtype=np.uint8)


@pytest.fixture
def bass_frame() -> np.ndarray:
    """All magnitude in the lowest 10% of bins at 200."""
    frame = np.zeros(N_BINS, dtype=np.uint8)
    frame[: N_BINS // 10] = 200
    return frame
