"""genbridge package initialization."""

from importlib import metadata

from .adapters import GenerationError, GenerationRequest
from .generator import generate

try:
    __version__ = metadata.version("genbridge")
except metadata.PackageNotFoundError:  # pragma: no cover - best effort value during development
    __version__ = "0.0.0"

__all__ = ["GenerationError", "GenerationRequest", "__version__", "generate"]
