"""
Offline mood pipeline.

Decodes an audio file, replays it through the byte-frame analyser at the
target frame rate and collects a mood reading per frame.
"""

import hashlib
import json
import logging
import shutil
from dataclasses import asdict
from pathlib import Path
from typing import Any, Union

import librosa
import numpy as np

from moodscope.config import AnalyserConfig, ExtractorConfig
from moodscope.core.frames import ByteFrameAnalyser
from moodscope.core.session import MoodSession, MoodTimeline
from moodscope.io.exporter import ManifestExporter

logger = logging.getLogger(__name__)


class MoodPipeline:
    """
    Complete audio-file-to-mood-manifest pipeline.

    Every analyze() call uses a fresh analyser and session, so results do
    not depend on previously processed files.
    """

    # Version of the analysis logic/schema.
    # Increment whenever extraction or classification changes so cached
    # manifests are invalidated.
    ANALYSIS_VERSION = "1.0"

    def __init__(
        self,
        target_fps: int = 60,
        sample_rate: int = 44100,
        analyser_config: AnalyserConfig | None = None,
        extractor_config: ExtractorConfig | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            target_fps: Frames per second, i.e. display refresh rate to emulate.
            sample_rate: Decode sample rate.
            analyser_config: Byte-frame synthesis settings.
            extractor_config: Feature extractor thresholds.
        """
        self.target_fps = target_fps or 60
        self.sample_rate = sample_rate
        self.analyser_config = analyser_config or AnalyserConfig()
        self.analyser_config.validate()
        self.extractor_config = extractor_config or ExtractorConfig()
        self.exporter = ManifestExporter()

    def _get_cache_dir(self) -> Path:
        """Return the directory for caching manifests."""
        cache_dir = Path.home() / ".cache" / "moodscope" / "manifests"
        cache_dir.mkdir(parents=True, exist_ok=True)
        return cache_dir

    def _calculate_file_hash(self, file_path: Path) -> str:
        """Calculate SHA256 hash of the file."""
        sha256_hash = hashlib.sha256()
        with open(file_path, "rb") as f:
            for byte_block in iter(lambda: f.read(4096), b""):
                sha256_hash.update(byte_block)
        return sha256_hash.hexdigest()

    def _get_config_hash(self) -> str:
        """Calculate hash of the pipeline configuration."""
        config = {
            "version": self.ANALYSIS_VERSION,
            "fps": self.target_fps,
            "sr": self.sample_rate,
            "analyser": asdict(self.analyser_config),
            "extractor": asdict(self.extractor_config),
        }
        return hashlib.md5(json.dumps(config, sort_keys=True).encode("utf-8")).hexdigest()

    def _get_cache_path(self, audio_path: Path) -> Path:
        file_hash = self._calculate_file_hash(audio_path)
        config_hash = self._get_config_hash()
        return self._get_cache_dir() / f"manifest_{file_hash}_{config_hash}.json"

    def clear_cache(self):
        """Clear the manifest cache."""
        cache_dir = self._get_cache_dir()
        if cache_dir.exists():
            shutil.rmtree(cache_dir)
            cache_dir.mkdir(parents=True, exist_ok=True)

    def compute_hop_length(self, sr: int) -> int:
        """Samples between consecutive output frames."""
        return max(1, int(sr / self.target_fps))

    def load(self, audio_path: Union[str, Path]) -> tuple[np.ndarray, int]:
        """
        Decode an audio file to mono float samples.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {audio_path}")
        y, sr = librosa.load(audio_path, sr=self.sample_rate, mono=True)
        return y, sr

    def analyze(self, y: np.ndarray, sr: int) -> MoodTimeline:
        """
        Replay a signal frame by frame through the mood pipeline.

        Args:
            y: Mono audio samples in [-1, 1].
            sr: Sample rate of y.

        Returns:
            MoodTimeline with one reading per hop.
        """
        hop_length = self.compute_hop_length(sr)
        n_frames = len(y) // hop_length
        frame_times = librosa.frames_to_time(
            np.arange(n_frames),
            sr=sr,
            hop_length=hop_length,
        )

        analyser = ByteFrameAnalyser(self.analyser_config)
        fft_size = analyser.fft_size
        readings = []

        with MoodSession(config=self.extractor_config) as session:
            for index in range(n_frames):
                end = (index + 1) * hop_length
                block = y[max(0, end - fft_size):end]
                reading = session.process(
                    analyser.frequency_frame(block),
                    analyser.time_domain_frame(block),
                    now_ms=float(frame_times[index]) * 1000.0,
                )
                readings.append(reading)

        timeline = MoodTimeline(
            readings=readings,
            frame_times=np.asarray(frame_times, dtype=np.float64),
            fps=self.target_fps,
            sample_rate=sr,
            fft_size=fft_size,
            duration=float(librosa.get_duration(y=y, sr=sr)),
        )
        logger.info(
            "Analyzed %d frames (%.2fs), dominant mood: %s",
            timeline.n_frames,
            timeline.duration,
            timeline.dominant_mood,
        )
        return timeline

    def export(
        self,
        timeline: MoodTimeline,
        output_path: Union[str, Path],
        format: str = "json",
    ) -> Path:
        """Write the timeline as "json" or "numpy"."""
        if format == "numpy":
            return self.exporter.export_numpy(timeline, output_path)
        return self.exporter.export_json(timeline, output_path)

    def process(
        self,
        audio_path: Union[str, Path],
        output_path: Union[str, Path] | None = None,
        format: str = "json",
        use_cache: bool = True,
    ) -> dict[str, Any]:
        """
        Run the complete pipeline from audio file to manifest.

        Args:
            audio_path: Path to input audio file.
            output_path: Path for output manifest. If None, only returns dict.
            format: Output format ("json" or "numpy").
            use_cache: Whether to use a cached manifest if available.

        Returns:
            Dictionary containing manifest data and processing info.
        """
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        # NPZ output needs the full timeline, which the cache does not hold
        if use_cache and format == "json":
            try:
                cache_path = self._get_cache_path(audio_path)
                if cache_path.exists():
                    with open(cache_path, "r", encoding="utf-8") as f:
                        manifest = json.load(f)
                    if not self._is_manifest(manifest):
                        raise ValueError(f"not a mood manifest: {cache_path}")
                    logger.info("Loaded mood manifest from cache: %s", cache_path)

                    result = self._result(manifest)
                    if output_path:
                        with open(output_path, "w", encoding="utf-8") as f:
                            json.dump(manifest, f, indent=2)
                        result["output_path"] = str(output_path)
                    return result
            except (OSError, ValueError) as e:
                logger.warning("Failed to load cache: %s. Re-analyzing.", e)

        y, sr = self.load(audio_path)
        timeline = self.analyze(y, sr)
        manifest = self.exporter.to_dict(timeline)

        if use_cache:
            try:
                cache_path = self._get_cache_path(audio_path)
                with open(cache_path, "w", encoding="utf-8") as f:
                    json.dump(manifest, f, indent=2)
            except OSError as e:
                logger.warning("Failed to save cache: %s", e)

        result = self._result(manifest)
        if output_path:
            written_path = self.export(timeline, output_path, format)
            result["output_path"] = str(written_path)

        return result

    @staticmethod
    def _is_manifest(manifest: Any) -> bool:
        """Cached JSON must have a metadata dict and a frames list."""
        return (
            isinstance(manifest, dict)
            and isinstance(manifest.get("metadata"), dict)
            and isinstance(manifest.get("frames"), list)
        )

    def _result(self, manifest: dict[str, Any]) -> dict[str, Any]:
        metadata = manifest.get("metadata", {})
        return {
            "manifest": manifest,
            "duration": metadata.get("duration", 0.0),
            "n_frames": metadata.get("n_frames", 0),
            "fps": self.target_fps,
            "dominant_mood": metadata.get("dominant_mood", "silent"),
        }

    def process_to_manifest(self, audio_path: Union[str, Path]) -> dict[str, Any]:
        """Process audio and return the manifest dictionary directly."""
        return self.process(audio_path)["manifest"]
