"""HTTP transport for talking to the analysis API."""

from .client import HttpxTransport

__all__ = ["HttpxTransport"]
