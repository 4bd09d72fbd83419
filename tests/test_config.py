"""
Tests for configuration loading, helpers and logging setup.
"""

import base64
import logging

import pytest
import yaml

from genbridge.config import ConfigError, GenBridgeConfig, load_config, save_config
from genbridge.logging import get_logger, setup_logging
from genbridge.util import deep_merge, encode_image_file, env_first


class TestLoadConfig:
    """Test YAML configuration handling."""

    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "missing.yml")
        assert config.model == "gemini-2.5-flash"
        assert config.base_url is None
        assert config.timeout == 60.0

    def test_file_overrides(self, tmp_path):
        path = tmp_path / ".genbridge.yml"
        path.write_text(
            "model: qwen-vl-max\nbase_url: https://x.test/v1/\napi_key_env: DASHSCOPE_API_KEY\ntimeout: 15\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.model == "qwen-vl-max"
        assert config.base_url == "https://x.test/v1/"
        assert config.api_key_env == "DASHSCOPE_API_KEY"
        assert config.timeout == 15.0
        assert config.log_level == "INFO"

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / ".genbridge.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_timeout(self):
        with pytest.raises(ConfigError):
            GenBridgeConfig.from_dict({"timeout": "soon"})

    @pytest.mark.parametrize("key", ["model", "api_key_env", "log_level"])
    def test_null_required_key(self, tmp_path, key):
        path = tmp_path / ".genbridge.yml"
        path.write_text(f"{key}: null\n", encoding="utf-8")
        with pytest.raises(ConfigError, match=key):
            load_config(path)

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / ".genbridge.yml"
        save_config(GenBridgeConfig.from_dict({"model": "m2"}), path)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["model"] == "m2"
        assert load_config(path).model == "m2"


class TestBuildRequest:
    """Test building generation requests from configuration."""

    def test_explicit_credential(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        config = GenBridgeConfig.from_dict({"base_url": "https://x.test/v1", "timeout": 10})
        request = config.build_request("hi", credential="abc", output_schema={"type": "object"})
        assert request.credential == "abc"
        assert request.endpoint_base == "https://x.test/v1"
        assert request.timeout == 10.0
        assert request.output_schema == {"type": "object"}

    def test_credential_from_environment(self, monkeypatch):
        monkeypatch.setenv("DASHSCOPE_API_KEY", "from-env")
        config = GenBridgeConfig.from_dict({"api_key_env": "DASHSCOPE_API_KEY"})
        assert config.build_request("hi").credential == "from-env"

    def test_fallback_environment_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "openai-key")
        config = GenBridgeConfig.from_dict({"api_key_env": "UNSET_KEY_FOR_TEST"})
        assert config.resolve_credential() == "openai-key"

    def test_missing_credential(self, monkeypatch):
        for key in ("GEMINI_API_KEY", "OPENAI_API_KEY", "UNSET_KEY_FOR_TEST"):
            monkeypatch.delenv(key, raising=False)
        config = GenBridgeConfig.from_dict({"api_key_env": "UNSET_KEY_FOR_TEST"})
        with pytest.raises(ConfigError, match="UNSET_KEY_FOR_TEST"):
            config.build_request("hi")


class TestUtil:
    """Test helper utilities."""

    def test_deep_merge(self):
        merged = deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 5}})
        assert merged == {"a": 1, "b": {"c": 5, "d": 3}}

    def test_env_first(self, monkeypatch):
        monkeypatch.setenv("GB_FIRST", "")
        monkeypatch.setenv("GB_SECOND", "value")
        assert env_first("GB_FIRST", "GB_SECOND") == "value"
        assert env_first("GB_NOT_SET_AT_ALL", default="d") == "d"

    def test_encode_image_file(self, tmp_path):
        path = tmp_path / "photo.jpg"
        path.write_bytes(b"jpeg-bytes")
        data, mime_type = encode_image_file(path)
        assert base64.b64decode(data) == b"jpeg-bytes"
        assert not data.startswith("data:")
        assert mime_type == "image/jpeg"

    def test_encode_image_unknown_extension(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"x")
        assert encode_image_file(path)[1] == "image/png"


class TestLogging:
    """Test logging setup."""

    @pytest.fixture(autouse=True)
    def reset_logger(self):
        yield
        logger = get_logger()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

    def test_levels(self):
        assert setup_logging("WARNING").level == logging.WARNING
        assert setup_logging("debug").level == logging.DEBUG
        assert setup_logging("ERROR").level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("LOUD").level == logging.INFO

    def test_level_from_config(self):
        config = GenBridgeConfig.from_dict({"log_level": "DEBUG"})
        logger = setup_logging(config.log_level)
        assert logger.handlers[0].level == logging.DEBUG
        assert "%(name)s" in logger.handlers[0].formatter._fmt

    def test_single_handler(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_child_logger_name(self):
        assert get_logger("adapters.gemini").name == "genbridge.adapters.gemini"
        assert get_logger().name == "genbridge"
