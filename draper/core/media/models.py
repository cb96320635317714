"""
Extraction domain models.

Everything here lives for exactly one extraction: it's created from a
video file, serialized into a request body, and thrown away.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class VideoInfo:
    """Technical information about a video file."""
    duration_seconds: float
    width: int
    height: int
    fps: float
    codec: str
    has_audio: bool = False
    audio_sample_rate: Optional[int] = None


@dataclass(frozen=True)
class Frame:
    """
    One sampled keyframe.

    ``timestamp`` is a position in the video's own timeline, already
    formatted for the model ("0:12" or "12s").
    """
    image: str  # JPEG data URI
    timestamp: str

    def to_dict(self) -> dict[str, str]:
        return {"image": self.image, "timestamp": self.timestamp}


@dataclass(frozen=True)
class AudioClip:
    """A mono WAV clip cut from the video's audio track."""
    data_uri: str
    sample_rate: int
    duration_seconds: float


@dataclass
class AnalysisPayload:
    """
    The wire body sent to the analysis API.

    Frames are always sent pre-stamped (``framesWithTime``) so the server
    never has to guess timestamps.
    """
    frames: list[Frame] = field(default_factory=list)
    duration: float = 0.0
    audio: Optional[AudioClip] = None

    @property
    def has_audio(self) -> bool:
        return self.audio is not None

    def visuals_body(self) -> dict:
        return {
            "framesWithTime": [frame.to_dict() for frame in self.frames],
            "duration": self.duration,
        }

    def audio_body(self) -> dict:
        return {"audio": self.audio.data_uri if self.audio else None}

    def combined_body(self) -> dict:
        body = self.visuals_body()
        body.update(self.audio_body())
        return body
