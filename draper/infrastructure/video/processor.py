"""
Media extraction using FFmpeg.

This module turns a video file into the pieces the analysis API wants:
1. Video metadata (duration, resolution, audio presence) via ffprobe
2. k keyframes at evenly spaced, left-aligned times, each a small JPEG
3. The audio track downmixed to mono, capped in length, as WAV

Frame captures run one at a time and in timestamp order. Audio is a
separate ffmpeg process and can run alongside them.

Everything goes through stdout pipes, so no temp files are written.
"""

import asyncio
import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Union

import numpy as np

from ...core.errors import MediaDecodeError
from ...core.media.datauri import to_data_uri
from ...core.media.models import AnalysisPayload, AudioClip, Frame, VideoInfo
from ...core.media.timestamps import format_min_sec, sample_times
from ...core.media.wav import wav_data_uri

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_SAMPLE_RATE = 44100


def jpeg_qscale(quality: float) -> int:
    """
    Map a 0-1 JPEG quality factor onto ffmpeg's -q:v scale.

    ffmpeg's MJPEG scale runs from 2 (best) to 31 (worst).
    """
    if not 0 < quality <= 1:
        raise ValueError("quality must be in (0, 1]")
    return max(2, min(31, round(2 + (1 - quality) * 29)))


def _parse_rate(rate: str) -> float:
    """Parse an ffprobe rate such as "30000/1001"."""
    if "/" in rate:
        num, denom = rate.split("/")
        return float(num) / float(denom) if float(denom) else 0.0
    return float(rate)


class MediaExtractor(Protocol):
    """Protocol for media extraction operations."""

    async def get_video_info(self, path: PathLike) -> VideoInfo:
        ...

    async def extract_frames(
        self,
        path: PathLike,
        count: int,
        info: Optional[VideoInfo] = None,
    ) -> list[Frame]:
        ...

    async def extract_audio(
        self,
        path: PathLike,
        info: Optional[VideoInfo] = None,
    ) -> Optional[AudioClip]:
        ...


class FFmpegMediaExtractor:
    """
    Media extractor using FFmpeg/FFprobe subprocesses.

    Subprocesses run in a worker thread so the event loop stays free.
    """

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        ffprobe_path: str = "ffprobe",
        frame_width: int = 256,
        frame_quality: float = 0.3,
        max_audio_seconds: Optional[float] = 30.0,
    ) -> None:
        if frame_width < 2:
            raise ValueError("frame_width must be at least 2")

        self._ffmpeg = ffmpeg_path
        self._ffprobe = ffprobe_path
        self._frame_width = frame_width
        self._qscale = jpeg_qscale(frame_quality)
        self._max_audio_seconds = max_audio_seconds or None

    def check_available(self) -> None:
        """Raise RuntimeError if ffmpeg or ffprobe can't be found."""
        for binary in (self._ffmpeg, self._ffprobe):
            if shutil.which(binary) is None:
                raise RuntimeError(
                    f"{binary} not found. Install with: apt-get install ffmpeg"
                )

    async def _run(self, cmd: list[str], timeout: float) -> subprocess.CompletedProcess:
        return await asyncio.to_thread(
            subprocess.run,
            cmd,
            capture_output=True,
            timeout=timeout,
        )

    async def get_video_info(self, path: PathLike) -> VideoInfo:
        """
        Extract metadata using ffprobe.

        Raises MediaDecodeError if the file can't be probed or has no
        video stream.
        """
        cmd = [
            self._ffprobe,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

        try:
            result = await self._run(cmd, timeout=30)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise MediaDecodeError(f"ffprobe failed: {e}") from e

        if result.returncode != 0:
            raise MediaDecodeError(f"ffprobe failed: {result.stderr.decode(errors='replace')}")

        try:
            probe = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise MediaDecodeError("ffprobe returned unreadable output") from e

        streams = probe.get("streams", [])
        video_stream = next((s for s in streams if s.get("codec_type") == "video"), None)
        audio_stream = next((s for s in streams if s.get("codec_type") == "audio"), None)

        if not video_stream:
            raise MediaDecodeError("No video stream found")

        duration = float(probe.get("format", {}).get("duration") or 0)
        if duration == 0:
            duration = float(video_stream.get("duration") or 0)

        sample_rate = None
        if audio_stream and audio_stream.get("sample_rate"):
            sample_rate = int(audio_stream["sample_rate"])

        return VideoInfo(
            duration_seconds=duration,
            width=int(video_stream.get("width", 0)),
            height=int(video_stream.get("height", 0)),
            fps=_parse_rate(video_stream.get("r_frame_rate", "0/1")),
            codec=video_stream.get("codec_name", "unknown"),
            has_audio=audio_stream is not None,
            audio_sample_rate=sample_rate,
        )

    async def _capture_frame(self, path: PathLike, timestamp: float) -> bytes:
        # -ss before -i for fast seeking; scale keeps aspect ratio with an even height
        cmd = [
            self._ffmpeg,
            "-v", "error",
            "-ss", f"{timestamp:.3f}",
            "-i", str(path),
            "-frames:v", "1",
            "-vf", f"scale={self._frame_width}:-2",
            "-q:v", str(self._qscale),
            "-f", "image2pipe",
            "-vcodec", "mjpeg",
            "-",
        ]

        try:
            result = await self._run(cmd, timeout=10)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise MediaDecodeError(f"Frame capture at {timestamp:.2f}s failed: {e}") from e

        if result.returncode != 0 or not result.stdout:
            raise MediaDecodeError(
                f"Frame capture at {timestamp:.2f}s failed: "
                f"{result.stderr.decode(errors='replace').strip()}"
            )

        return result.stdout

    async def extract_frames(
        self,
        path: PathLike,
        count: int,
        info: Optional[VideoInfo] = None,
    ) -> list[Frame]:
        """
        Capture ``count`` keyframes at ``duration * i / count``.

        Captures are awaited one after another so frames come back in
        timestamp order. Any failed capture fails the whole extraction.
        """
        if info is None:
            info = await self.get_video_info(path)

        times = sample_times(info.duration_seconds, count)
        frames: list[Frame] = []

        for ts in times:
            image = await self._capture_frame(path, ts)
            frames.append(Frame(image=to_data_uri(image, "image/jpeg"), timestamp=format_min_sec(ts)))

        logger.info(
            "Extracted keyframes",
            extra={"count": len(frames), "duration": info.duration_seconds},
        )

        return frames

    async def extract_audio(
        self,
        path: PathLike,
        info: Optional[VideoInfo] = None,
    ) -> Optional[AudioClip]:
        """
        Extract the audio track as a mono WAV clip.

        Returns None when there's no audio or anything goes wrong;
        silent ads are common and the analysis can go ahead without sound.
        """
        try:
            if info is None:
                info = await self.get_video_info(path)

            if not info.has_audio:
                logger.info("Video has no audio track")
                return None

            return await self._decode_audio(path, info.audio_sample_rate or DEFAULT_SAMPLE_RATE)
        except (MediaDecodeError, ValueError) as e:
            logger.warning("Audio extraction failed", extra={"error": str(e)})
            return None

    async def _decode_audio(self, path: PathLike, sample_rate: int) -> AudioClip:
        cmd = [self._ffmpeg, "-v", "error", "-i", str(path), "-vn", "-ac", "1", "-ar", str(sample_rate)]
        if self._max_audio_seconds:
            cmd += ["-t", str(self._max_audio_seconds)]
        cmd += ["-f", "f32le", "-acodec", "pcm_f32le", "-"]

        try:
            result = await self._run(cmd, timeout=60)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise MediaDecodeError(f"Audio decode failed: {e}") from e

        if result.returncode != 0:
            raise MediaDecodeError(f"Audio decode failed: {result.stderr.decode(errors='replace').strip()}")

        samples = np.frombuffer(result.stdout, dtype="<f4")
        if samples.size == 0:
            raise MediaDecodeError("Audio track decoded to zero samples")

        duration = samples.size / sample_rate
        logger.info("Extracted audio", extra={"seconds": round(duration, 2), "sample_rate": sample_rate})

        return AudioClip(
            data_uri=wav_data_uri(samples, sample_rate),
            sample_rate=sample_rate,
            duration_seconds=duration,
        )

    async def extract_payload(self, path: PathLike, count: int) -> AnalysisPayload:
        """
        Build the full request payload for one video.

        Probes once, then runs frame and audio extraction concurrently.
        """
        info = await self.get_video_info(path)
        frames, audio = await asyncio.gather(
            self.extract_frames(path, count, info),
            self.extract_audio(path, info),
        )
        return AnalysisPayload(frames=frames, duration=info.duration_seconds, audio=audio)


def create_media_extractor(
    ffmpeg_path: str = "ffmpeg",
    ffprobe_path: str = "ffprobe",
    frame_width: int = 256,
    frame_quality: float = 0.3,
    max_audio_seconds: Optional[float] = 30.0,
) -> FFmpegMediaExtractor:
    """
    Factory function for the media extractor.

    Verifies the FFmpeg binaries are installed before returning.
    """
    extractor = FFmpegMediaExtractor(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        frame_width=frame_width,
        frame_quality=frame_quality,
        max_audio_seconds=max_audio_seconds,
    )
    extractor.check_available()
    logger.info("FFmpeg media extractor initialized")
    return extractor
