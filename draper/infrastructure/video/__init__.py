"""
Video processing infrastructure.

Handles media extraction using FFmpeg:
- Video metadata via ffprobe
- Evenly spaced, downscaled JPEG keyframes
- A mono, length-capped WAV clip of the audio track
"""

from .processor import (
    FFmpegMediaExtractor,
    MediaExtractor,
    create_media_extractor,
    jpeg_qscale,
)

__all__ = [
    "FFmpegMediaExtractor",
    "MediaExtractor",
    "create_media_extractor",
    "jpeg_qscale",
]
