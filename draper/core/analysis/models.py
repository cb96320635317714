"""
Analysis result models.

The provider's JSON is trusted verbatim; these types only pin down which
top-level sections each analysis branch owns so the split results can be
merged without guessing.

Field ownership for a merged report:

    meta                    audio   (falls back to DEFAULT_META)
    content_xray            visual content_xray_visuals, then audio
                            content_xray_audio on top (audio wins per key)
    production_analysis     visual
    creative_intelligence   visual
    scene_by_scene          visual
    communication_profile   audio
    strategy                audio
    critique                audio
    brand_takeaways         audio
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..media.timestamps import format_min_sec, parse_timestamp

AnalysisResult = dict[str, Any]

NO_AUDIO_TEXT = "No audio detected."
NO_SPEECH_TEXT = "No spoken words."
AUDIO_FAILED_TEXT = "Audio processing failed."

DEFAULT_META: dict[str, Any] = {"product_name": "Ad Analysis", "quality_score": 7}


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return dict(value) if isinstance(value, dict) else {}


def _items(data: dict, key: str) -> list:
    value = data.get(key)
    return list(value) if isinstance(value, list) else []


@dataclass(frozen=True)
class VisionPartial:
    """Sections produced by the frames-only branch."""
    production_analysis: dict = field(default_factory=dict)
    creative_intelligence: dict = field(default_factory=dict)
    content_xray_visuals: dict = field(default_factory=dict)
    scene_by_scene: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "VisionPartial":
        return cls(
            production_analysis=_section(data, "production_analysis"),
            creative_intelligence=_section(data, "creative_intelligence"),
            content_xray_visuals=_section(data, "content_xray_visuals"),
            scene_by_scene=_items(data, "scene_by_scene"),
        )


@dataclass(frozen=True)
class AudioPartial:
    """Sections produced by the audio-only branch."""
    meta: Optional[dict] = None
    content_xray_audio: dict = field(default_factory=dict)
    communication_profile: dict = field(default_factory=dict)
    strategy: dict = field(default_factory=dict)
    critique: dict = field(default_factory=dict)
    brand_takeaways: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "AudioPartial":
        meta = data.get("meta")
        return cls(
            meta=dict(meta) if isinstance(meta, dict) and meta else None,
            content_xray_audio=_section(data, "content_xray_audio"),
            communication_profile=_section(data, "communication_profile"),
            strategy=_section(data, "strategy"),
            critique=_section(data, "critique"),
            brand_takeaways=_items(data, "brand_takeaways"),
        )


def merge_partials(vision: VisionPartial, audio: Optional[AudioPartial] = None) -> AnalysisResult:
    """Combine the two branch results into one report."""
    audio = audio or AudioPartial()

    content_xray = dict(vision.content_xray_visuals)
    content_xray.update(audio.content_xray_audio)

    return {
        "meta": dict(audio.meta) if audio.meta else dict(DEFAULT_META),
        "content_xray": content_xray,
        "production_analysis": dict(vision.production_analysis),
        "creative_intelligence": dict(vision.creative_intelligence),
        "scene_by_scene": list(vision.scene_by_scene),
        "communication_profile": dict(audio.communication_profile),
        "strategy": dict(audio.strategy),
        "critique": dict(audio.critique),
        "brand_takeaways": list(audio.brand_takeaways),
    }


@dataclass(frozen=True)
class TranscriptionOutcome:
    """
    Result of a transcription attempt.

    Exactly one of ``text`` / ``error`` is set. Callers decide what a
    failure turns into via ``text_or``.
    """
    text: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def text_or(self, fallback: str) -> str:
        return self.text if self.ok and self.text is not None else fallback

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        return self.text or ""


def brand_brief(result: AnalysisResult) -> str:
    """Three-line plain-text summary of a report."""
    meta = result.get("meta") or {}
    strategy = result.get("strategy") or {}
    xray = result.get("content_xray") or {}
    return (
        f"Ad: {meta.get('product_name', '')}\n"
        f"Hook: {strategy.get('hook_tactic', '')}\n"
        f"Script: {xray.get('script', '')}"
    )


def scene_timeline(result: AnalysisResult) -> list[tuple[int, dict]]:
    """
    Pair each scene with its seek position in seconds.

    Timecodes come straight from the model ("0:12", "12s", "Start"), so
    anything unreadable seeks to 0 rather than failing the report.
    """
    scenes = result.get("scene_by_scene") or []
    return [
        (parse_timestamp(scene.get("timecode")), scene)
        for scene in scenes
        if isinstance(scene, dict)
    ]


def format_scenes(result: AnalysisResult) -> str:
    """One line per scene: seek seconds, segment, and what's on screen."""
    lines = []
    for seconds, scene in scene_timeline(result):
        lines.append(
            f"{format_min_sec(seconds):>6}  {scene.get('segment', '')}: {scene.get('visual', '')}"
        )
    return "\n".join(lines)
