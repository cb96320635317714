"""
Media extraction helpers.

Pure functions and value objects used to turn a video into a
provider-ready payload. The FFmpeg-backed extractor itself lives in
infrastructure.video.
"""

from .datauri import from_data_uri, to_data_uri
from .models import AnalysisPayload, AudioClip, Frame, VideoInfo
from .timestamps import format_min_sec, parse_timestamp, sample_times
from .wav import encode_wav, wav_data_uri

__all__ = [
    "AnalysisPayload",
    "AudioClip",
    "Frame",
    "VideoInfo",
    "encode_wav",
    "format_min_sec",
    "from_data_uri",
    "parse_timestamp",
    "sample_times",
    "to_data_uri",
    "wav_data_uri",
]
