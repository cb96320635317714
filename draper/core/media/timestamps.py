"""
Timestamp helpers for sampled frames.

Formatting and parsing are deliberately not symmetric. The formatter
only ever produces "M:SS", while the parser has to cope with whatever
free-form timecode a model writes back ("12s", "0:12", "12", "0:12 start").
"""

import math
import re

_STRIP_PATTERN = re.compile(r"start|s")
_LEADING_INT = re.compile(r"^[+-]?\d+")


def sample_times(duration: float, count: int) -> list[float]:
    """
    Evenly spaced, left-aligned sample points.

    Returns ``duration * i / count`` for ``i`` in ``0..count-1``. The last
    instant of the video is never included. A zero duration collapses
    every point to 0.0; duplicates are kept.
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    duration = duration or 0.0
    return [duration * i / count for i in range(count)]


def format_min_sec(seconds: float) -> str:
    """Format seconds as "M:SS" (minutes unpadded)."""
    minutes = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{minutes}:{secs:02d}"


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text.strip())
    if not match:
        raise ValueError(f"not an integer: {text!r}")
    return int(match.group())


def parse_timestamp(value) -> int:
    """
    Normalize a model-written timecode to whole seconds.

    Never raises: anything that can't be read as a timecode becomes 0,
    since the value comes straight out of an untrusted model reply.
    """
    if value is None or value == "":
        return 0

    try:
        cleaned = _STRIP_PATTERN.sub("", str(value).lower()).strip()
        if ":" in cleaned:
            parts = cleaned.split(":")
            return _leading_int(parts[0]) * 60 + _leading_int(parts[1])
        return _leading_int(cleaned)
    except (ValueError, IndexError):
        return 0
