"""OpenAI-compatible chat-completions adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from ..logging import get_logger
from . import Adapter, GenerationError, GenerationRequest

CHAT_COMPLETIONS_PATH = "/chat/completions"
JSON_HINT = "\n\nPlease respond in valid JSON format."

logger = get_logger("adapters.compatible")


@dataclass
class TextPart:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class ImagePart:
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "image_url", "image_url": {"url": self.url}}


ContentPart = TextPart | ImagePart


@dataclass
class ChatMessage:
    role: str
    content: str | list[ContentPart]

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.content, str):
            return {"role": self.role, "content": self.content}
        return {"role": self.role, "content": [part.to_dict() for part in self.content]}


def chat_completions_endpoint(base_url: str) -> str:
    """Return the chat-completions URL for ``base_url`` without doubling the path."""
    clean = base_url.rstrip("/")
    if clean.endswith(CHAT_COMPLETIONS_PATH):
        return clean
    return f"{clean}{CHAT_COMPLETIONS_PATH}"


def image_data_uri(image: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{image}"


def append_json_hint(message: ChatMessage) -> None:
    """Append the JSON instruction to the text of ``message``."""
    if isinstance(message.content, str):
        message.content += JSON_HINT
        return
    for part in message.content:
        if isinstance(part, TextPart):
            part.text += JSON_HINT
            return


def build_messages(request: GenerationRequest) -> list[ChatMessage]:
    messages: list[ChatMessage] = []
    if request.system_instruction:
        messages.append(ChatMessage(role="system", content=request.system_instruction))

    parts: list[ContentPart] = [TextPart(request.prompt)]
    if request.image:
        parts.append(ImagePart(image_data_uri(request.image, request.image_mime_type)))
    messages.append(ChatMessage(role="user", content=parts))

    if request.wants_json:
        append_json_hint(messages[-1])
    return messages


def build_payload(model: str, request: GenerationRequest) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "model": model,
        "messages": [message.to_dict() for message in build_messages(request)],
        "stream": False,
    }
    if request.wants_json:
        payload["response_format"] = {"type": "json_object"}
    return payload


def _extract_content(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content
    return None


class CompatibleAdapter(Adapter):
    """Interact with any endpoint speaking the chat-completions convention."""

    def __init__(self, model: str, api_key: str, base_url: str, timeout: float) -> None:
        self.model = model
        self.api_key = api_key
        self.endpoint = chat_completions_endpoint(base_url)
        self.timeout = timeout

    def generate(self, request: GenerationRequest) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = build_payload(self.model, request)

        logger.debug("POST %s (model=%s)", self.endpoint, self.model)
        try:
            response = requests.post(self.endpoint, headers=headers, json=payload, timeout=self.timeout)
            if not 200 <= response.status_code < 300:
                raise GenerationError(
                    f"API Error {response.status_code}: {response.text}",
                    status_code=response.status_code,
                    body=response.text,
                )
            text = _extract_content(response.json())
            if not text:
                raise GenerationError("No content in response")
            return text
        except (requests.RequestException, ValueError, GenerationError) as exc:
            logger.error("Compatible API error: %s", exc)
            raise GenerationError(
                f"AI Request Failed: {exc}",
                status_code=getattr(exc, "status_code", None),
                body=getattr(exc, "body", None),
            ) from exc
