"""
Core logic for ad analysis.

This module is framework-agnostic - it doesn't import FastAPI, FFmpeg,
or the provider SDK. Media helpers and analysis orchestration can be
tested in isolation.
"""
