"""
Unit tests for media helpers: sampling, timestamps, data URIs, WAV.

These run without FFmpeg or the network.
"""

import io
import struct
import wave

import numpy as np
import pytest

from draper.core.media.datauri import from_data_uri, to_data_uri
from draper.core.media.models import AnalysisPayload, AudioClip, Frame
from draper.core.media.timestamps import format_min_sec, parse_timestamp, sample_times
from draper.core.media.wav import WAV_HEADER_SIZE, encode_wav, quantize, wav_data_uri


# ---------------------------------------------------------------------------
# Frame Sampling Tests
# ---------------------------------------------------------------------------

class TestSampleTimes:
    """Tests for evenly spaced, left-aligned sampling."""

    def test_ten_second_video_four_frames(self):
        assert sample_times(10.0, 4) == [0.0, 2.5, 5.0, 7.5]

    @pytest.mark.parametrize("count", [1, 3, 8, 17])
    def test_returns_exactly_count_points(self, count):
        duration = 31.7
        times = sample_times(duration, count)

        assert len(times) == count
        assert times == pytest.approx([duration * i / count for i in range(count)])

    def test_never_includes_final_instant(self):
        times = sample_times(12.0, 6)
        assert max(times) < 12.0

    def test_strictly_increasing(self):
        times = sample_times(45.0, 8)
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_zero_duration_collapses_to_start(self):
        """Unknown durations are not deduplicated."""
        assert sample_times(0, 3) == [0.0, 0.0, 0.0]
        assert sample_times(None, 2) == [0.0, 0.0]

    def test_rejects_zero_count(self):
        with pytest.raises(ValueError, match="at least 1"):
            sample_times(10.0, 0)


# ---------------------------------------------------------------------------
# Timestamp Tests
# ---------------------------------------------------------------------------

class TestFormatMinSec:

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0:00"),
        (2.5, "0:02"),
        (59.99, "0:59"),
        (65, "1:05"),
        (600, "10:00"),
    ])
    def test_formats(self, seconds, expected):
        assert format_min_sec(seconds) == expected


class TestParseTimestamp:

    @pytest.mark.parametrize("value,expected", [
        ("45s", 45),
        ("1:05", 65),
        ("0:12", 12),
        ("12", 12),
        ("  7S ", 7),
        ("0:12 start", 12),
        ("0:12-0:15", 12),
        (30, 30),
    ])
    def test_parses_model_timecodes(self, value, expected):
        assert parse_timestamp(value) == expected

    @pytest.mark.parametrize("value", ["garbage", None, "", ":", "a:b", "abc:12"])
    def test_unreadable_values_become_zero(self, value):
        assert parse_timestamp(value) == 0

    def test_round_trips_formatted_values(self):
        for n in range(0, 360000):
            assert parse_timestamp(format_min_sec(n)) == n


# ---------------------------------------------------------------------------
# Data URI Tests
# ---------------------------------------------------------------------------

class TestDataUri:

    def test_encodes_with_media_type(self):
        assert to_data_uri(b"abc", "image/jpeg") == "data:image/jpeg;base64,YWJj"

    def test_decodes_prefixed_and_bare(self):
        assert from_data_uri("data:audio/wav;base64,YWJj") == b"abc"
        assert from_data_uri("YWJj") == b"abc"

    def test_rejects_invalid_base64(self):
        with pytest.raises(ValueError):
            from_data_uri("data:audio/wav;base64,@@@")


# ---------------------------------------------------------------------------
# WAV Encoding Tests
# ---------------------------------------------------------------------------

class TestWavEncoding:

    def test_header_layout(self):
        data = encode_wav(np.zeros(100), sample_rate=16000)

        fields = struct.unpack("<4sI4s4sIHHIIHH4sI", data[:WAV_HEADER_SIZE])
        assert fields == (
            b"RIFF", 36 + 200, b"WAVE",
            b"fmt ", 16, 1, 1, 16000, 32000, 2, 16,
            b"data", 200,
        )
        assert len(data) == WAV_HEADER_SIZE + 200

    def test_stereo_header_and_length(self):
        data = encode_wav(np.zeros((50, 2)), sample_rate=44100, num_channels=2)

        channels, rate, byte_rate, block_align = struct.unpack("<HIIH", data[22:34])
        assert (channels, rate, byte_rate, block_align) == (2, 44100, 176400, 4)
        assert struct.unpack("<I", data[40:44])[0] == 50 * 2 * 2

    def test_standard_parser_round_trip(self):
        """Decoded samples stay within one LSB of the originals."""
        rate = 8000
        t = np.arange(rate) / rate
        original = 0.8 * np.sin(2 * np.pi * 220 * t)

        with wave.open(io.BytesIO(encode_wav(original, rate)), "rb") as reader:
            assert reader.getnchannels() == 1
            assert reader.getsampwidth() == 2
            assert reader.getframerate() == rate
            decoded = np.frombuffer(reader.readframes(reader.getnframes()), dtype="<i2")

        expected = np.where(original < 0, original * 32768, original * 32767)
        assert decoded.size == original.size
        assert np.max(np.abs(decoded - expected)) <= 1

    def test_quantize_clamps_out_of_range(self):
        assert quantize(np.array([-2.0, -1.0, 0.0, 1.0, 3.0])).tolist() == [
            -32768, -32768, 0, 32767, 32767,
        ]

    def test_rejects_bad_arguments(self):
        with pytest.raises(ValueError):
            encode_wav(np.zeros(4), sample_rate=0)
        with pytest.raises(ValueError, match="multiple"):
            encode_wav(np.zeros(3), sample_rate=8000, num_channels=2)

    def test_data_uri_prefix(self):
        uri = wav_data_uri(np.zeros(10), 8000)
        assert uri.startswith("data:audio/wav;base64,")
        assert from_data_uri(uri)[:4] == b"RIFF"


# ---------------------------------------------------------------------------
# Payload Tests
# ---------------------------------------------------------------------------

class TestAnalysisPayload:

    def test_bodies_use_wire_field_names(self):
        payload = AnalysisPayload(
            frames=[Frame(image="data:image/jpeg;base64,AAAA", timestamp="0:00")],
            duration=10.0,
            audio=AudioClip(data_uri="data:audio/wav;base64,AAAA", sample_rate=8000, duration_seconds=1.0),
        )

        assert payload.visuals_body() == {
            "framesWithTime": [{"image": "data:image/jpeg;base64,AAAA", "timestamp": "0:00"}],
            "duration": 10.0,
        }
        assert payload.audio_body() == {"audio": "data:audio/wav;base64,AAAA"}
        assert payload.combined_body()["audio"] == "data:audio/wav;base64,AAAA"

    def test_silent_payload_sends_null_audio(self):
        payload = AnalysisPayload(frames=[], duration=3.0)

        assert not payload.has_audio
        assert payload.combined_body()["audio"] is None
