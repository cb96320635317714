"""
OpenAI API client wrapper.

Implements the ProviderClient protocol from core.analysis.analyst.
"""

from .client import OpenAIConfig, OpenAIProviderClient, create_openai_client

__all__ = ["OpenAIConfig", "OpenAIProviderClient", "create_openai_client"]
