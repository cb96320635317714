"""
Draper - video advertisement analysis.

This package contains the complete application:
- core: Framework-agnostic extraction and analysis logic
- infrastructure: FFmpeg and model provider integrations
- api: FastAPI routes and dependencies
- config: Application configuration
- cli: Command-line client that extracts media and calls the API
"""

__version__ = "0.1.0"
