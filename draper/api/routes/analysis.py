"""
Ad analysis API endpoints.

Four stateless handlers:
- POST /api/analyze: transcript + frames -> full report in one completion
- POST /api/visuals: frames -> vision-only sections
- POST /api/audio: audio -> transcript -> script/strategy sections
- POST /api/transcribe: audio -> {text}

Clients normally call /api/visuals and /api/audio at the same time and
merge the results (see core.analysis.composer).
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.analysis.inputs import normalize_frames
from ...core.analysis.models import AnalysisResult
from ..dependencies import AnalystDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class FrameWithTime(BaseModel):
    """A keyframe image with its position in the video."""
    image: str = Field(description="JPEG data URI")
    timestamp: Union[str, int, float] = Field(default="", description="e.g. '0:12' or '12s'")


class VisualsRequest(BaseModel):
    """Frames for analysis. Pre-stamped frames take precedence."""
    model_config = ConfigDict(populate_by_name=True)

    frames: Optional[list[str]] = Field(default=None, description="Bare JPEG data URIs")
    frames_with_time: Optional[list[FrameWithTime]] = Field(
        default=None,
        alias="framesWithTime",
        description="Frames with timestamps",
    )
    duration: Optional[float] = Field(default=None, description="Video duration in seconds")


class AnalyzeRequest(VisualsRequest):
    """Frames plus optional audio for the combined endpoint."""
    audio: Optional[str] = Field(default=None, description="WAV data URI")


class AudioRequest(BaseModel):
    """Audio-only request body."""
    audio: Optional[str] = Field(default=None, description="WAV data URI")


class TranscriptionResponse(BaseModel):
    """Transcribed speech."""
    text: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/analyze",
    status_code=status.HTTP_200_OK,
    summary="Full ad analysis",
    description="Transcribe audio (if any), then analyze frames and transcript together",
)
async def analyze(request: AnalyzeRequest, analyst: AnalystDep) -> AnalysisResult:
    frames = normalize_frames(request.frames, request.frames_with_time, request.duration)

    logger.info(
        "Processing combined analysis",
        extra={"frame_count": len(frames), "has_audio": bool(request.audio)},
    )

    return await analyst.analyze_combined(frames, request.audio)


@router.post(
    "/visuals",
    status_code=status.HTTP_200_OK,
    summary="Visual analysis",
    description="Production and creative signals from keyframes only",
)
async def visuals(request: VisualsRequest, analyst: AnalystDep) -> AnalysisResult:
    frames = normalize_frames(request.frames, request.frames_with_time, request.duration)

    logger.info("Processing visual analysis", extra={"frame_count": len(frames)})

    return await analyst.analyze_visuals(frames)


@router.post(
    "/audio",
    status_code=status.HTTP_200_OK,
    summary="Audio analysis",
    description="Transcribe the audio and analyze the script for strategy and language",
)
async def audio(request: AudioRequest, analyst: AnalystDep) -> AnalysisResult:
    if not request.audio:
        return {"error": "No audio"}

    return await analyst.analyze_audio(request.audio)


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    status_code=status.HTTP_200_OK,
    summary="Transcribe audio",
)
async def transcribe(request: AudioRequest, analyst: AnalystDep) -> TranscriptionResponse:
    outcome = await analyst.transcribe(request.audio)
    return TranscriptionResponse(text=outcome.unwrap())
