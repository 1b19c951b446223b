"""
Command-line interface for mood analysis.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from moodscope.config import AnalyserConfig
from moodscope.pipeline import MoodPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="moodscope",
        description="Classify the mood of an audio file frame by frame and map it to colors",
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Input audio file (wav, mp3, flac, ogg)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output manifest file path (default: <input>_moods.json)",
    )

    parser.add_argument(
        "-f", "--fps",
        type=int,
        default=60,
        help="Frames per second to emulate (default: 60)",
    )

    parser.add_argument(
        "-s", "--sample-rate",
        type=int,
        default=44100,
        help="Decode sample rate (default: 44100)",
    )

    parser.add_argument(
        "--format",
        choices=["json", "numpy"],
        default="json",
        help="Output format (default: json)",
    )

    parser.add_argument(
        "--fft-size",
        type=int,
        default=2048,
        help="Analyser FFT size, power of two (default: 2048)",
    )

    parser.add_argument(
        "--smoothing",
        type=float,
        default=0.8,
        help="Analyser smoothing time constant in [0, 1] (default: 0.8)",
    )

    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore and do not write the manifest cache",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print manifest summary to stdout",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    output_path = args.output
    if output_path is None:
        suffix = ".npz" if args.format == "numpy" else ".json"
        output_path = args.input.with_name(f"{args.input.stem}_moods{suffix}")

    try:
        pipeline = MoodPipeline(
            target_fps=args.fps,
            sample_rate=args.sample_rate,
            analyser_config=AnalyserConfig(
                fft_size=args.fft_size,
                smoothing_time_constant=args.smoothing,
            ),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Processing: {args.input}")
        print(f"Target FPS: {args.fps}")

    result = pipeline.process(
        args.input,
        output_path=output_path,
        format=args.format,
        use_cache=not args.no_cache,
    )

    if not args.quiet:
        print(f"Duration: {result['duration']:.2f}s")
        print(f"Frames: {result['n_frames']}")
        print(f"Dominant mood: {result['dominant_mood']}")
        print(f"Output: {result['output_path']}")

    if args.summary:
        manifest = result["manifest"]
        print("\n--- Manifest Summary ---")
        print(json.dumps(manifest["metadata"], indent=2))

        frames = manifest["frames"]
        if len(frames) > 0:
            print(f"\nFirst frame: {json.dumps(frames[0], indent=2)}")
        if len(frames) > 1:
            mid = len(frames) // 2
            print(f"\nMiddle frame ({mid}): {json.dumps(frames[mid], indent=2)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
