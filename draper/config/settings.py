"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a .env file)
with sensible defaults. Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Draper Ad Analysis API"
    api_version: str = "0.1.0"

    # OpenAI Configuration
    openai_api_key: str = Field(
        default="",
        description="Model provider credential. The API refuses to start without it."
    )
    openai_chat_model: str = Field(
        default="gpt-4o-mini",
        description="Vision-capable chat model used for every analysis call."
    )
    openai_transcription_model: str = Field(
        default="whisper-1",
        description="Speech-to-text model."
    )
    openai_timeout_seconds: float = Field(
        default=60.0,
        description="Per-request timeout for provider calls."
    )
    transcription_prompt: str = Field(
        default="This audio is in Kannada, Tamil, or Telugu. Transcribe the specific regional language exactly.",
        description="Priming prompt passed to the transcription model."
    )
    combined_max_tokens: int = Field(default=3500, description="Token budget for /api/analyze.")
    visuals_max_tokens: int = Field(default=2000, description="Token budget for /api/visuals.")
    audio_max_tokens: int = Field(default=800, description="Token budget for /api/audio.")

    # Request limits
    max_request_body_mb: int = Field(
        default=50,
        description="Largest accepted request body. Frames and audio travel as base64."
    )

    # Media extraction (used by the CLI client)
    frame_count: int = Field(default=8, description="Keyframes sampled per video.")
    frame_width: int = Field(default=256, gt=0, description="Keyframe width in pixels; height keeps aspect ratio.")
    frame_quality: float = Field(
        gt=0,
        le=1,
        default=0.3,
        description="JPEG quality factor in (0, 1]. Low on purpose to keep payloads small."
    )
    max_audio_seconds: Optional[float] = Field(
        default=30.0,
        description="Cap on extracted audio length. Unset or 0 means the whole track."
    )
    ffmpeg_path: str = Field(default="ffmpeg", description="Path to the ffmpeg binary.")
    ffprobe_path: str = Field(default="ffprobe", description="Path to the ffprobe binary.")
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Where the CLI sends extracted payloads."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def max_request_body_bytes(self) -> int:
        return self.max_request_body_mb * 1024 * 1024

    def validate_required_fields(self) -> list[str]:
        """Return the names of required settings that are missing."""
        missing = []
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
