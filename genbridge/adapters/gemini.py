"""Google Gemini provider adapter."""

from __future__ import annotations

import base64
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from ..logging import get_logger
from . import Adapter, GenerationError, GenerationRequest

JSON_MIME_TYPE = "application/json"

logger = get_logger("adapters.gemini")


def build_parts(request: GenerationRequest) -> list[types.Part]:
    # Image goes before the prompt text for the native API.
    parts: list[types.Part] = []
    if request.image:
        parts.append(
            types.Part.from_bytes(
                data=base64.b64decode(request.image, validate=True),
                mime_type=request.image_mime_type,
            )
        )
    parts.append(types.Part.from_text(text=request.prompt))
    return parts


def build_config(request: GenerationRequest) -> types.GenerateContentConfig:
    options: dict[str, Any] = {}
    if request.system_instruction:
        options["system_instruction"] = request.system_instruction
    if request.wants_json:
        options["response_mime_type"] = JSON_MIME_TYPE
        options["response_schema"] = request.output_schema
    return types.GenerateContentConfig(**options)


class GeminiAdapter(Adapter):
    """Interact with the Google Gemini API through the genai SDK."""

    def __init__(self, model: str, api_key: str, timeout: float) -> None:
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    def _client(self) -> genai.Client:
        http_options = types.HttpOptions(timeout=int(self.timeout * 1000))
        return genai.Client(api_key=self.api_key, http_options=http_options)

    def generate(self, request: GenerationRequest) -> str:
        logger.debug("Gemini generate_content (model=%s)", self.model)
        try:
            contents = types.Content(role="user", parts=build_parts(request))
            response = self._client().models.generate_content(
                model=self.model,
                contents=contents,
                config=build_config(request),
            )
        except (errors.APIError, httpx.HTTPError, ValueError) as exc:
            logger.error("Gemini API error: %s", exc)
            raise GenerationError(
                f"AI Request Failed: {exc}",
                status_code=getattr(exc, "code", None),
            ) from exc
        return response.text or ""
