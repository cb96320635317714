"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- openai: Model provider client (transcription + chat completion)
- video: FFmpeg-backed media extraction
- http: HTTP transport used by the CLI to reach the analysis API

These wrappers translate between external formats and our domain models.
"""
