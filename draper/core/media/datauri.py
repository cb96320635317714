"""Data URI encoding for media sent inside JSON bodies."""

import base64

_BASE64_MARKER = ";base64,"


def to_data_uri(data: bytes, media_type: str) -> str:
    """Encode raw bytes as ``data:<media_type>;base64,<payload>``."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type}{_BASE64_MARKER}{encoded}"


def from_data_uri(uri: str) -> bytes:
    """
    Decode a base64 data URI back to bytes.

    A bare base64 string (no ``data:`` prefix) is accepted as well.
    Raises ValueError if the payload is not valid base64.
    """
    payload = uri.split(_BASE64_MARKER)[-1]
    return base64.b64decode(payload, validate=True)
