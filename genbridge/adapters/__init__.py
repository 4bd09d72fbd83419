"""Content generation adapters for genbridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

DEFAULT_MIME_TYPE = "image/png"
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class GenerationRequest:
    credential: str = field(repr=False)
    model: str
    prompt: str
    endpoint_base: str | None = None
    system_instruction: str | None = None
    image: str | None = None
    mime_type: str | None = None
    output_schema: Any = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def image_mime_type(self) -> str:
        """MIME type used for the image, defaulting to PNG."""
        return self.mime_type or DEFAULT_MIME_TYPE

    @property
    def wants_json(self) -> bool:
        return self.output_schema is not None


class GenerationError(RuntimeError):
    """Raised when a provider interaction fails."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class Adapter(Protocol):
    """Common protocol for provider adapters."""

    def generate(self, request: GenerationRequest) -> str:
        ...
