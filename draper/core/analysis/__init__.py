"""
Ad analysis logic.

Contains the analyst service, the client-side composer, result models,
and the prompts.
"""

from .analyst import AdAnalyst, AnalystConfig, ProviderClient
from .composer import AnalysisComposer, AnalysisTransport
from .inputs import normalize_frames, parse_model_json, strip_code_fences
from .models import (
    AnalysisResult,
    AudioPartial,
    TranscriptionOutcome,
    VisionPartial,
    brand_brief,
    format_scenes,
    merge_partials,
    scene_timeline,
)

__all__ = [
    "AdAnalyst",
    "AnalystConfig",
    "AnalysisComposer",
    "AnalysisResult",
    "AnalysisTransport",
    "AudioPartial",
    "ProviderClient",
    "TranscriptionOutcome",
    "VisionPartial",
    "brand_brief",
    "format_scenes",
    "merge_partials",
    "normalize_frames",
    "parse_model_json",
    "scene_timeline",
    "strip_code_fences",
]
