"""
16-bit PCM WAV encoding.

Audio decoded by FFmpeg arrives as float samples in [-1.0, 1.0]. This
module quantizes them and wraps them in a canonical 44-byte RIFF/WAVE
header:

    RIFF <size> WAVE
    fmt  16 <format=1> <channels> <rate> <byte_rate> <block_align> 16
    data <numSamples * numChannels * 2> <interleaved little-endian int16>
"""

import struct

import numpy as np

from .datauri import to_data_uri

WAV_HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
PCM_FORMAT = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def quantize(samples: np.ndarray) -> np.ndarray:
    """
    Convert float samples to int16.

    Values are clamped to [-1, 1]; negatives scale by 32768 and
    positives by 32767 so both ends of the range are reachable.
    """
    clipped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def encode_wav(samples: np.ndarray, sample_rate: int, num_channels: int = 1) -> bytes:
    """
    Encode float PCM as a WAV file.

    ``samples`` is either 1-D (mono, or already interleaved) or shaped
    ``(frames, channels)``. The returned bytes are a complete file.
    """
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")
    if num_channels < 1:
        raise ValueError("num_channels must be at least 1")

    pcm = quantize(samples).reshape(-1)
    if pcm.size % num_channels:
        raise ValueError("sample count is not a multiple of the channel count")

    data = pcm.tobytes()
    block_align = num_channels * BITS_PER_SAMPLE // 8
    header = _HEADER.pack(
        b"RIFF",
        WAV_HEADER_SIZE - 8 + len(data),
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT,
        num_channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        len(data),
    )
    return header + data


def wav_data_uri(samples: np.ndarray, sample_rate: int, num_channels: int = 1) -> str:
    """Encode samples as a WAV data URI ready for a JSON payload."""
    return to_data_uri(encode_wav(samples, sample_rate, num_channels), "audio/wav")
