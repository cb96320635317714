"""
Unit tests for the FFmpeg media extractor.

Subprocess calls are replaced with canned CompletedProcess results, so
these tests check the commands we build and how output is handled
without needing FFmpeg installed.
"""

import io
import json
import subprocess
import wave

import numpy as np
import pytest

from draper.core.errors import MediaDecodeError
from draper.core.media.datauri import from_data_uri
from draper.core.media.models import VideoInfo
from draper.infrastructure.video.processor import FFmpegMediaExtractor, jpeg_qscale

FAKE_JPEG = b"\xff\xd8\xff\xe0fakejpeg\xff\xd9"


def probe_output(duration="10.0", with_audio=True) -> bytes:
    streams = [{
        "codec_type": "video",
        "codec_name": "h264",
        "width": 1080,
        "height": 1920,
        "r_frame_rate": "30000/1001",
    }]
    if with_audio:
        streams.append({"codec_type": "audio", "codec_name": "aac", "sample_rate": "8000"})
    return json.dumps({"streams": streams, "format": {"duration": duration}}).encode()


class StubExtractor(FFmpegMediaExtractor):
    """Extractor whose subprocess runner answers from a script."""

    def __init__(self, responder, **kwargs):
        super().__init__(**kwargs)
        self.commands: list[list[str]] = []
        self._responder = responder

    async def _run(self, cmd, timeout):
        self.commands.append(cmd)
        returncode, stdout, stderr = self._responder(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)


def default_responder(cmd, duration="10.0", with_audio=True, pcm=b""):
    if cmd[0] == "ffprobe":
        return 0, probe_output(duration, with_audio), b""
    if "f32le" in cmd:
        return 0, pcm, b""
    return 0, FAKE_JPEG, b""


def seek_times(commands) -> list[str]:
    return [cmd[cmd.index("-ss") + 1] for cmd in commands if "-ss" in cmd]


# ---------------------------------------------------------------------------
# Probe Tests
# ---------------------------------------------------------------------------

class TestGetVideoInfo:

    async def test_parses_streams(self):
        info = await StubExtractor(default_responder).get_video_info("ad.mp4")

        assert info.duration_seconds == 10.0
        assert (info.width, info.height) == (1080, 1920)
        assert info.fps == pytest.approx(29.97, rel=1e-3)
        assert info.has_audio
        assert info.audio_sample_rate == 8000

    async def test_probe_failure_raises(self):
        extractor = StubExtractor(lambda cmd: (1, b"", b"Invalid data found"))

        with pytest.raises(MediaDecodeError, match="Invalid data"):
            await extractor.get_video_info("broken.mp4")

    async def test_missing_video_stream_raises(self):
        output = json.dumps({"streams": [{"codec_type": "audio"}], "format": {}}).encode()
        extractor = StubExtractor(lambda cmd: (0, output, b""))

        with pytest.raises(MediaDecodeError, match="No video stream"):
            await extractor.get_video_info("audio_only.m4a")


# ---------------------------------------------------------------------------
# Frame Extraction Tests
# ---------------------------------------------------------------------------

class TestExtractFrames:

    async def test_samples_evenly_in_order(self):
        extractor = StubExtractor(default_responder)

        frames = await extractor.extract_frames("ad.mp4", 4)

        assert seek_times(extractor.commands) == ["0.000", "2.500", "5.000", "7.500"]
        assert [f.timestamp for f in frames] == ["0:00", "0:02", "0:05", "0:07"]
        assert all(f.image.startswith("data:image/jpeg;base64,") for f in frames)
        assert from_data_uri(frames[0].image) == FAKE_JPEG

    async def test_scales_and_compresses(self):
        extractor = StubExtractor(default_responder, frame_width=384, frame_quality=0.4)

        await extractor.extract_frames("ad.mp4", 1)

        cmd = extractor.commands[-1]
        assert cmd[cmd.index("-vf") + 1] == "scale=384:-2"
        assert cmd[cmd.index("-q:v") + 1] == str(jpeg_qscale(0.4))

    async def test_uses_given_info_without_probing(self):
        extractor = StubExtractor(default_responder)
        info = VideoInfo(duration_seconds=6.0, width=640, height=360, fps=25, codec="h264")

        frames = await extractor.extract_frames("ad.mp4", 3, info)

        assert len(frames) == 3
        assert all(cmd[0] == "ffmpeg" for cmd in extractor.commands)

    async def test_any_failed_capture_fails_everything(self):
        def responder(cmd):
            if cmd[0] == "ffmpeg" and cmd[cmd.index("-ss") + 1] == "5.000":
                return 1, b"", b"decode error"
            return default_responder(cmd)

        with pytest.raises(MediaDecodeError, match="5.00s"):
            await StubExtractor(responder).extract_frames("ad.mp4", 4)

    async def test_zero_duration_repeats_first_frame(self):
        extractor = StubExtractor(lambda cmd: default_responder(cmd, duration="0"))

        frames = await extractor.extract_frames("ad.mp4", 3)

        assert seek_times(extractor.commands) == ["0.000"] * 3
        assert len(frames) == 3


# ---------------------------------------------------------------------------
# Audio Extraction Tests
# ---------------------------------------------------------------------------

class TestExtractAudio:

    async def test_no_audio_track_returns_none(self):
        extractor = StubExtractor(lambda cmd: default_responder(cmd, with_audio=False))

        assert await extractor.extract_audio("silent.mp4") is None
        assert not any("f32le" in cmd for cmd in extractor.commands)

    async def test_decode_failure_returns_none(self):
        def responder(cmd):
            if "f32le" in cmd:
                return 1, b"", b"Error while decoding stream"
            return default_responder(cmd)

        assert await StubExtractor(responder).extract_audio("ad.mp4") is None

    async def test_probe_failure_returns_none(self):
        extractor = StubExtractor(lambda cmd: (1, b"", b"moov atom not found"))
        assert await extractor.extract_audio("broken.mp4") is None

    async def test_encodes_mono_wav(self):
        pcm = (0.5 * np.ones(8000, dtype="<f4")).tobytes()
        extractor = StubExtractor(lambda cmd: default_responder(cmd, pcm=pcm))

        clip = await extractor.extract_audio("ad.mp4")

        assert clip.sample_rate == 8000
        assert clip.duration_seconds == pytest.approx(1.0)
        with wave.open(io.BytesIO(from_data_uri(clip.data_uri)), "rb") as reader:
            assert reader.getnchannels() == 1
            assert reader.getnframes() == 8000

        cmd = next(c for c in extractor.commands if "f32le" in c)
        assert cmd[cmd.index("-ac") + 1] == "1"
        assert cmd[cmd.index("-t") + 1] == "30.0"

    async def test_uncapped_when_limit_disabled(self):
        pcm = np.zeros(10, dtype="<f4").tobytes()
        extractor = StubExtractor(lambda cmd: default_responder(cmd, pcm=pcm), max_audio_seconds=None)

        await extractor.extract_audio("ad.mp4")

        cmd = next(c for c in extractor.commands if "f32le" in c)
        assert "-t" not in cmd


# ---------------------------------------------------------------------------
# Payload Tests
# ---------------------------------------------------------------------------

class TestExtractPayload:

    async def test_silent_ten_second_video(self):
        extractor = StubExtractor(lambda cmd: default_responder(cmd, with_audio=False))

        payload = await extractor.extract_payload("silent.mp4", 4)

        assert payload.duration == 10.0
        assert [f.timestamp for f in payload.frames] == ["0:00", "0:02", "0:05", "0:07"]
        assert payload.audio is None
        assert sum(1 for cmd in extractor.commands if cmd[0] == "ffprobe") == 1


@pytest.mark.parametrize("quality,expected", [(1.0, 2), (0.3, 22), (0.01, 31)])
def test_jpeg_qscale(quality, expected):
    assert jpeg_qscale(quality) == expected


def test_jpeg_qscale_rejects_out_of_range():
    with pytest.raises(ValueError):
        jpeg_qscale(0)
