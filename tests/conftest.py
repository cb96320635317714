"""
Shared test fixtures.

FakeProvider stands in for the OpenAI client: it records every call
and answers from canned replies, so no test touches the network.
"""

import json
from typing import Optional

import numpy as np
import pytest

from draper.core.media.models import Frame
from draper.core.media.wav import wav_data_uri


class FakeProvider:
    """In-memory ProviderClient."""

    def __init__(
        self,
        replies: Optional[list[str]] = None,
        transcript: str = "Buy the new Sparkle soap today",
        transcription_error: Optional[Exception] = None,
        completion_error: Optional[Exception] = None,
    ) -> None:
        self.replies = list(replies or [json.dumps({"meta": {"product_name": "Sparkle"}})])
        self.transcript = transcript
        self.transcription_error = transcription_error
        self.completion_error = completion_error
        self.transcribed: list[bytes] = []
        self.completions: list[tuple[list[dict], int]] = []

    async def transcribe(self, audio: bytes) -> str:
        self.transcribed.append(audio)
        if self.transcription_error:
            raise self.transcription_error
        return self.transcript

    async def complete_json(self, messages: list[dict], max_tokens: int) -> str:
        self.completions.append((messages, max_tokens))
        if self.completion_error:
            raise self.completion_error
        return self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def frames() -> list[Frame]:
    return [
        Frame(image="data:image/jpeg;base64,/9j/AAAA", timestamp=ts)
        for ts in ("0:00", "0:02", "0:05", "0:07")
    ]


@pytest.fixture
def audio_uri() -> str:
    """Half a second of a quiet 440 Hz tone."""
    t = np.arange(0, 0.5, 1 / 8000)
    return wav_data_uri(0.25 * np.sin(2 * np.pi * 440 * t), 8000)
