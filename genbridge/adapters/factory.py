"""Factory helpers for selecting a generation adapter."""

from __future__ import annotations

from . import Adapter, GenerationRequest
from .compatible import CompatibleAdapter
from .gemini import GeminiAdapter


def build_adapter(request: GenerationRequest) -> Adapter:
    """Instantiate the adapter serving ``request``.

    A non-empty ``endpoint_base`` routes to the chat-completions endpoint,
    anything else goes through the native Gemini SDK.
    """
    if request.endpoint_base:
        return CompatibleAdapter(
            model=request.model,
            api_key=request.credential,
            base_url=request.endpoint_base,
            timeout=request.timeout,
        )
    return GeminiAdapter(model=request.model, api_key=request.credential, timeout=request.timeout)
