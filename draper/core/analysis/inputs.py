"""
Request input normalization and reply parsing.

Both directions deal with loosely-shaped data: clients may send bare
frames or pre-stamped ones, and the model may wrap its JSON in Markdown
code fences.
"""

import json
import math
import re
from typing import Any, Optional, Sequence

from ..errors import NoInputError, ProviderAnalysisError
from ..media.models import Frame

_CODE_FENCE = re.compile(r"```json|```")


def _frame_from_item(item: Any) -> Frame:
    if isinstance(item, Frame):
        return item
    if isinstance(item, dict):
        return Frame(image=str(item.get("image", "")), timestamp=str(item.get("timestamp", "")))
    return Frame(image=getattr(item, "image"), timestamp=str(getattr(item, "timestamp")))


def normalize_frames(
    frames: Optional[Sequence[str]] = None,
    frames_with_time: Optional[Sequence[Any]] = None,
    duration: Optional[float] = None,
) -> list[Frame]:
    """
    Produce a stamped frame list from either input shape.

    Pre-stamped frames win. Bare frames are stamped "<n>s" using their
    position within ``duration``, or "0:00" when the duration is unknown.
    """
    if frames_with_time:
        return [_frame_from_item(item) for item in frames_with_time]

    if frames:
        count = len(frames)
        return [
            Frame(
                image=image,
                timestamp=f"{math.floor(i / count * duration)}s" if duration else "0:00",
            )
            for i, image in enumerate(frames)
        ]

    raise NoInputError("No frames received")


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers the model sometimes adds."""
    return _CODE_FENCE.sub("", text).strip()


def parse_model_json(text: Optional[str]) -> dict[str, Any]:
    """
    Parse a model reply as a JSON object.

    Raises ProviderAnalysisError if the reply is empty, malformed, or
    not an object.
    """
    if not text:
        raise ProviderAnalysisError("Model returned an empty response")

    try:
        parsed = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ProviderAnalysisError(f"Model returned invalid JSON: {e.msg}") from e

    if not isinstance(parsed, dict):
        raise ProviderAnalysisError("Model returned JSON that is not an object")

    return parsed
