#!/usr/bin/env python3
"""
Draper command-line client.

Extracts keyframes and audio from a local video, sends them to a running
analysis API, and prints the merged report.

    draper analyze ad.mp4 --frames 8 --brief
    draper extract ad.mp4 --output payload.json
    draper serve --port 8000
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config.settings import Settings, get_settings
from .core.analysis.composer import AnalysisComposer
from .core.analysis.models import brand_brief, format_scenes
from .core.errors import DraperError
from .infrastructure.http.client import HttpxTransport
from .infrastructure.video.processor import create_media_extractor

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="draper",
        description="Creative analysis of video advertisements",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_extraction_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("video", type=Path, help="Path to the video file")
        sub.add_argument(
            "--frames", type=int, default=settings.frame_count,
            help=f"Number of keyframes to sample (default: {settings.frame_count})",
        )
        sub.add_argument("--output", type=Path, help="Write JSON here instead of stdout")

    analyze = subparsers.add_parser("analyze", help="Extract media and request an analysis")
    add_extraction_args(analyze)
    analyze.add_argument(
        "--server", default=settings.api_base_url,
        help=f"Analysis API base URL (default: {settings.api_base_url})",
    )
    analyze.add_argument(
        "--mode", choices=["split", "combined"], default="split",
        help="split: /api/visuals + /api/audio in parallel; combined: /api/analyze",
    )
    analyze.add_argument("--brief", action="store_true", help="Print a three-line summary")
    analyze.add_argument(
        "--scenes", action="store_true",
        help="Print the scene list with seek positions",
    )

    extract = subparsers.add_parser("extract", help="Extract media and print the payload")
    add_extraction_args(extract)

    serve = subparsers.add_parser("serve", help="Run the analysis API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    return parser


def _write_json(data: dict, output: Optional[Path]) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info(f"Wrote {output}")
    else:
        print(text)


async def run_extract(args: argparse.Namespace, settings: Settings) -> int:
    extractor = create_media_extractor(
        ffmpeg_path=settings.ffmpeg_path,
        ffprobe_path=settings.ffprobe_path,
        frame_width=settings.frame_width,
        frame_quality=settings.frame_quality,
        max_audio_seconds=settings.max_audio_seconds,
    )
    payload = await extractor.extract_payload(args.video, args.frames)
    _write_json(payload.combined_body(), args.output)
    return 0


async def run_analyze(args: argparse.Namespace, settings: Settings) -> int:
    extractor = create_media_extractor(
        ffmpeg_path=settings.ffmpeg_path,
        ffprobe_path=settings.ffprobe_path,
        frame_width=settings.frame_width,
        frame_quality=settings.frame_quality,
        max_audio_seconds=settings.max_audio_seconds,
    )

    logger.info(f"Extracting {args.frames} keyframes and audio from {args.video}")
    payload = await extractor.extract_payload(args.video, args.frames)
    if not payload.has_audio:
        logger.info("No usable audio track; continuing with visuals only")

    composer = AnalysisComposer(HttpxTransport(args.server))
    if args.mode == "combined":
        result = await composer.analyze_combined(payload)
    else:
        result = await composer.analyze_split(payload)

    _write_json(result, args.output)
    if args.brief:
        print(brand_brief(result))
    if args.scenes:
        print(format_scenes(result))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    args = build_parser(settings).parse_args(argv)

    if args.command == "serve":
        from .main import run

        run(host=args.host, port=args.port, reload=args.reload)
        return 0

    if args.frames < 1:
        logger.error("--frames must be at least 1")
        return 2
    if not args.video.exists():
        logger.error(f"Video file not found: {args.video}")
        return 2

    handler = run_analyze if args.command == "analyze" else run_extract
    try:
        return asyncio.run(handler(args, settings))
    except DraperError as e:
        logger.error(f"Analysis failed: {e.message}")
        return 1
    except (RuntimeError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
