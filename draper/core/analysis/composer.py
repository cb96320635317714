"""
Client-side analysis request composer.

Takes an extracted payload, sends it to the analysis API, and returns
one merged report. In split mode the visual and audio branches are
independent requests issued at the same time, so the wait is the slower
of the two rather than their sum.
"""

import asyncio
import logging
from typing import Protocol

from ..errors import NoInputError, ProviderAnalysisError
from ..media.models import AnalysisPayload
from .models import AnalysisResult, AudioPartial, VisionPartial, merge_partials

logger = logging.getLogger(__name__)

VISUALS_PATH = "/api/visuals"
AUDIO_PATH = "/api/audio"
ANALYZE_PATH = "/api/analyze"


class AnalysisTransport(Protocol):
    """Something that can POST a JSON body and return the JSON reply."""

    async def post_json(self, path: str, body: dict) -> dict:
        """Raises ProviderAnalysisError on non-2xx or unparseable replies."""
        ...


def _check_partial(branch: str, data: dict) -> dict:
    if "error" in data:
        raise ProviderAnalysisError(f"{branch} analysis failed: {data['error']}")
    return data


class AnalysisComposer:
    """Turns an AnalysisPayload into a finished report."""

    def __init__(self, transport: AnalysisTransport) -> None:
        self._transport = transport

    async def analyze_split(self, payload: AnalysisPayload) -> AnalysisResult:
        """
        Run the visual and audio branches concurrently and merge them.

        All-or-nothing: if either branch fails, the error propagates and
        no partial report is produced.
        """
        if not payload.frames:
            raise NoInputError("No frames received")

        visual_call = self._transport.post_json(VISUALS_PATH, payload.visuals_body())

        if payload.has_audio:
            audio_call = self._transport.post_json(AUDIO_PATH, payload.audio_body())
            # Both branches settle before either failure is raised
            visual_data, audio_data = await asyncio.gather(
                visual_call, audio_call, return_exceptions=True
            )
            for outcome in (visual_data, audio_data):
                if isinstance(outcome, BaseException):
                    raise outcome
            audio = AudioPartial.from_dict(_check_partial("Audio", audio_data))
        else:
            visual_data = await visual_call
            audio = None

        vision = VisionPartial.from_dict(_check_partial("Visual", visual_data))

        logger.info(
            "Merged analysis branches",
            extra={"frame_count": len(payload.frames), "has_audio": payload.has_audio},
        )

        return merge_partials(vision, audio)

    async def analyze_combined(self, payload: AnalysisPayload) -> AnalysisResult:
        """Single request to the combined endpoint."""
        data = await self._transport.post_json(ANALYZE_PATH, payload.combined_body())
        return _check_partial("Combined", data)
