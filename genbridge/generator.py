"""Unified entry point for content generation."""

from __future__ import annotations

from .adapters import GenerationRequest
from .adapters.factory import build_adapter


def generate(request: GenerationRequest) -> str:
    """Generate text for ``request`` using either a compatible endpoint or Gemini.

    Raises:
        GenerationError: If the provider call fails or the response is unusable.
    """
    return build_adapter(request).generate(request)
