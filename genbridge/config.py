"""Configuration handling for genbridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .adapters import DEFAULT_TIMEOUT, GenerationRequest
from .util import deep_merge, env_first

CONFIG_FILENAME = ".genbridge.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "model": "gemini-2.5-flash",
    "base_url": None,
    "api_key_env": "GEMINI_API_KEY",
    "timeout": DEFAULT_TIMEOUT,
    "log_level": "INFO",
}

FALLBACK_KEY_ENVS = ("GEMINI_API_KEY", "OPENAI_API_KEY")
REQUIRED_KEYS = ("model", "api_key_env", "log_level")


class ConfigError(Exception):
    """Raised when configuration could not be loaded or parsed."""


@dataclass(frozen=True)
class GenBridgeConfig:
    model: str = DEFAULT_CONFIG["model"]
    base_url: str | None = DEFAULT_CONFIG["base_url"]
    api_key_env: str = DEFAULT_CONFIG["api_key_env"]
    timeout: float = DEFAULT_CONFIG["timeout"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenBridgeConfig":
        """Construct from a dictionary, applying defaults for missing keys."""
        merged = deep_merge(DEFAULT_CONFIG, data)
        missing = [key for key in REQUIRED_KEYS if merged.get(key) in (None, "")]
        if missing:
            raise ConfigError(f"Missing value for: {', '.join(missing)}")
        base_url = merged.get("base_url")
        try:
            timeout = float(merged.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid timeout value: {merged.get('timeout')!r}") from exc
        return cls(
            model=str(merged["model"]),
            base_url=str(base_url) if base_url else None,
            api_key_env=str(merged["api_key_env"]),
            timeout=timeout,
            log_level=str(merged["log_level"]),
            raw=merged,
        )

    def resolve_credential(self, credential: str | None = None) -> str:
        """Return the explicit credential or the first one found in the environment."""
        value = credential or env_first(self.api_key_env, *FALLBACK_KEY_ENVS)
        if not value:
            raise ConfigError(f"{self.api_key_env} is not set.")
        return value

    def build_request(
        self,
        prompt: str,
        *,
        system_instruction: str | None = None,
        image: str | None = None,
        mime_type: str | None = None,
        output_schema: Any = None,
        credential: str | None = None,
    ) -> GenerationRequest:
        """Build a generation request carrying this configuration's model and endpoint."""
        return GenerationRequest(
            credential=self.resolve_credential(credential),
            model=self.model,
            prompt=prompt,
            endpoint_base=self.base_url,
            system_instruction=system_instruction,
            image=image,
            mime_type=mime_type,
            output_schema=output_schema,
            timeout=self.timeout,
        )


def load_config(path: Path | None = None) -> GenBridgeConfig:
    """Load configuration from a file, applying defaults when missing."""
    config_path = path or Path(CONFIG_FILENAME)
    if not config_path.exists():
        return GenBridgeConfig.from_dict({})

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - depends on broken input
        raise ConfigError(f"Invalid YAML in {config_path}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return GenBridgeConfig.from_dict(payload)


def save_config(config: GenBridgeConfig, path: Path | None = None) -> None:
    """Write configuration back to disk."""
    config_path = path or Path(CONFIG_FILENAME)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config.raw or DEFAULT_CONFIG, handle, sort_keys=False)
