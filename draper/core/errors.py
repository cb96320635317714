"""
Domain errors.

Each error carries a user-facing message. The API layer maps them to
HTTP status codes; the CLI prints the message and exits non-zero.
"""


class DraperError(Exception):
    """Base class for all expected failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoInputError(DraperError):
    """Raised when a request carries no frames to analyze."""

    status_code = 400


class MediaDecodeError(DraperError):
    """Raised when a video (or its audio track) cannot be decoded."""

    status_code = 422


class ProviderTranscriptionError(DraperError):
    """Raised when the speech-to-text call fails."""

    status_code = 500


class ProviderAnalysisError(DraperError):
    """Raised when the chat completion fails or returns unusable JSON."""

    status_code = 500


class PayloadTooLargeError(DraperError):
    """Raised when a request body exceeds the configured ceiling."""

    status_code = 413
