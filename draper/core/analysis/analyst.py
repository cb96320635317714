"""
Ad analysis service.

This is the server-side brain of the proxy: it turns a normalized
payload into provider calls and parses the replies. It doesn't know
about HTTP or which provider SDK is in use.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..errors import MediaDecodeError, ProviderTranscriptionError
from ..media.datauri import from_data_uri
from ..media.models import Frame
from .inputs import parse_model_json
from .models import (
    AUDIO_FAILED_TEXT,
    NO_AUDIO_TEXT,
    NO_SPEECH_TEXT,
    AnalysisResult,
    TranscriptionOutcome,
)
from .prompts import (
    VISUALS_SYSTEM_PROMPT,
    audio_system_prompt,
    combined_system_prompt,
    timestamps_message,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ProviderClient(Protocol):
    """
    Interface for the model provider.

    The analyst only needs speech-to-text and a chat completion that
    answers in JSON. Tests substitute an in-memory fake.
    """

    async def transcribe(self, audio: bytes) -> str:
        """Transcribe WAV bytes. Raises ProviderTranscriptionError."""
        ...

    async def complete_json(self, messages: list[dict], max_tokens: int) -> str:
        """Return the raw reply text. Raises ProviderAnalysisError."""
        ...


@dataclass
class AnalystConfig:
    """Token budgets per analysis call."""
    combined_max_tokens: int = 3500
    visuals_max_tokens: int = 2000
    audio_max_tokens: int = 800


def build_vision_messages(system_prompt: str, frames: Sequence[Frame]) -> list[dict]:
    """
    Build the chat messages for a frames-bearing request.

    Frames go in one user message as low-detail image parts, followed by
    a second user message listing their timestamps in the same order.
    """
    return [
        {"role": "system", "content": system_prompt},
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": frame.image, "detail": "low"}}
                for frame in frames
            ],
        },
        {"role": "user", "content": timestamps_message([frame.timestamp for frame in frames])},
    ]


# ---------------------------------------------------------------------------
# Analyst Service
# ---------------------------------------------------------------------------

class AdAnalyst:
    """
    Orchestrates transcription and analysis calls for one request.

    Stateless beyond its provider client, so one instance can serve
    concurrent requests.
    """

    def __init__(self, provider: ProviderClient, config: Optional[AnalystConfig] = None) -> None:
        self._provider = provider
        self._config = config or AnalystConfig()

    async def transcribe(self, audio: Optional[str]) -> TranscriptionOutcome:
        """
        Attempt to transcribe an audio data URI.

        Never raises. Missing audio is a successful outcome carrying the
        "No audio detected." text; failures come back as ``error``.
        """
        if not audio:
            return TranscriptionOutcome(text=NO_AUDIO_TEXT)

        try:
            data = from_data_uri(audio)
        except ValueError as e:
            logger.warning("Audio payload is not valid base64", extra={"error": str(e)})
            return TranscriptionOutcome(error=MediaDecodeError("Audio payload could not be decoded"))

        try:
            text = await self._provider.transcribe(data)
        except ProviderTranscriptionError as e:
            logger.error("Transcription failed", extra={"error": e.message})
            return TranscriptionOutcome(error=e)

        return TranscriptionOutcome(text=text or NO_SPEECH_TEXT)

    async def analyze_combined(self, frames: Sequence[Frame], audio: Optional[str]) -> AnalysisResult:
        """
        Full report from one completion.

        Transcription finishes before the vision call starts; its failure
        only downgrades the transcript to a placeholder.
        """
        outcome = await self.transcribe(audio)
        transcript = outcome.text_or(AUDIO_FAILED_TEXT)

        logger.info(
            "Running combined analysis",
            extra={"frame_count": len(frames), "transcribed": outcome.ok and bool(audio)},
        )

        messages = build_vision_messages(combined_system_prompt(transcript), frames)
        reply = await self._provider.complete_json(messages, self._config.combined_max_tokens)
        return parse_model_json(reply)

    async def analyze_visuals(self, frames: Sequence[Frame]) -> AnalysisResult:
        """Vision-only sections (see VisionPartial)."""
        logger.info("Running visual analysis", extra={"frame_count": len(frames)})

        messages = build_vision_messages(VISUALS_SYSTEM_PROMPT, frames)
        reply = await self._provider.complete_json(messages, self._config.visuals_max_tokens)
        return parse_model_json(reply)

    async def analyze_audio(self, audio: str) -> AnalysisResult:
        """
        Script and strategy sections (see AudioPartial).

        A transcription failure is fatal here, since there is nothing
        else to analyze.
        """
        transcript = (await self.transcribe(audio)).unwrap()

        logger.info("Running audio analysis", extra={"transcript_chars": len(transcript)})

        messages = [{"role": "system", "content": audio_system_prompt(transcript)}]
        reply = await self._provider.complete_json(messages, self._config.audio_max_tokens)
        return parse_model_json(reply)
