"""
OpenAI API client wrapper.

This module provides a thin wrapper around the OpenAI SDK that:
1. Implements our ProviderClient protocol
2. Handles API-specific details (file uploads, JSON response mode)
3. Maps SDK errors onto our domain errors

One instance is created at startup and shared by every request; the
underlying AsyncOpenAI client holds no per-request state.
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional
from uuid import uuid4

from openai import APIError, AsyncOpenAI, RateLimitError

from ...core.analysis.analyst import ProviderClient
from ...core.errors import ProviderAnalysisError, ProviderTranscriptionError

logger = logging.getLogger(__name__)


@dataclass
class OpenAIConfig:
    """Configuration for the OpenAI client."""
    api_key: str
    chat_model: str = "gpt-4o-mini"
    transcription_model: str = "whisper-1"
    transcription_prompt: str = ""
    timeout_seconds: float = 60.0
    temp_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("API key is required")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


@contextmanager
def temporary_audio_file(audio: bytes, directory: Optional[str] = None) -> Iterator[Path]:
    """
    Write audio to a uniquely named temp file and always remove it.

    Names use a random UUID so concurrent requests never collide.
    """
    path = Path(directory or tempfile.gettempdir()) / f"upload_{uuid4().hex}.wav"
    path.write_bytes(audio)
    try:
        yield path
    finally:
        if path.exists():
            os.unlink(path)


def _error_message(error: APIError) -> str:
    return getattr(error, "message", None) or str(error)


class OpenAIProviderClient(ProviderClient):
    """
    Implementation of ProviderClient using OpenAI.

    Knows OpenAI's request format but nothing about ads or reports.
    """

    def __init__(self, config: OpenAIConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self._config = config
        self._client = client or AsyncOpenAI(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )

    async def transcribe(self, audio: bytes) -> str:
        """
        Transcribe WAV bytes.

        The SDK uploads from a file handle, so the audio is staged in a
        temp file that is deleted whether or not the call succeeds.
        """
        if not audio:
            raise ProviderTranscriptionError("Audio payload is empty")

        with temporary_audio_file(audio, self._config.temp_dir) as path:
            try:
                with open(path, "rb") as audio_file:
                    kwargs = {"file": audio_file, "model": self._config.transcription_model}
                    if self._config.transcription_prompt:
                        kwargs["prompt"] = self._config.transcription_prompt
                    transcription = await self._client.audio.transcriptions.create(**kwargs)
            except APIError as e:
                logger.error("Transcription API error", extra={"error": str(e)})
                raise ProviderTranscriptionError(f"Transcription failed: {_error_message(e)}") from e

        text = getattr(transcription, "text", "") or ""
        logger.info("Transcribed audio", extra={"chars": len(text), "bytes": len(audio)})
        return text

    async def complete_json(self, messages: list[dict], max_tokens: int) -> str:
        """Run a chat completion in JSON mode and return the reply text."""
        try:
            completion = await self._client.chat.completions.create(
                model=self._config.chat_model,
                response_format={"type": "json_object"},
                messages=messages,
                max_tokens=max_tokens,
            )
        except RateLimitError as e:
            logger.warning("Rate limit hit", extra={"error": str(e)})
            raise ProviderAnalysisError("Provider rate limit exceeded. Please try again later.") from e
        except APIError as e:
            logger.error(
                "Chat completion API error",
                extra={"error": str(e), "status": getattr(e, "status_code", None)},
            )
            raise ProviderAnalysisError(f"Analysis failed: {_error_message(e)}") from e

        if not completion.choices:
            raise ProviderAnalysisError("Provider returned no choices")

        return completion.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_openai_client(
    api_key: Optional[str] = None,
    chat_model: str = "gpt-4o-mini",
    transcription_model: str = "whisper-1",
    transcription_prompt: str = "",
    timeout_seconds: float = 60.0,
) -> OpenAIProviderClient:
    """
    Factory function to create a configured client.

    Reads the API key from the parameter or the OPENAI_API_KEY
    environment variable, and fails fast if neither is set.
    """
    key = api_key or os.environ.get("OPENAI_API_KEY")
    if not key:
        raise ValueError(
            "API key must be provided or set in OPENAI_API_KEY environment variable"
        )

    config = OpenAIConfig(
        api_key=key,
        chat_model=chat_model,
        transcription_model=transcription_model,
        transcription_prompt=transcription_prompt,
        timeout_seconds=timeout_seconds,
    )
    return OpenAIProviderClient(config)
