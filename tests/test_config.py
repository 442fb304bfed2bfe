"""Tests for configuration loading."""

import pytest

from styleswap.utils import config as config_module
from styleswap.utils.config import DEFAULT_SUGGESTIONS, get_config, load_config
from styleswap.utils.errors import ConfigurationError

ENV = {
    "GEMINI_BASE_URL": "https://gemini.test",
    "GEMINI_API_KEY": "test-key",
}


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    monkeypatch.setattr(config_module, "_config", None)


def test_loads_required_values(tmp_path):
    config = load_config(config_path=tmp_path / "missing.yaml", environ=ENV)

    assert config.gemini_base_url == "https://gemini.test"
    assert config.gemini_api_key == "test-key"
    assert config.gemini_model == "gemini-3-pro-image-preview"
    assert config.gemini_timeout_seconds is None
    assert config.suggestions == DEFAULT_SUGGESTIONS
    assert get_config() is config


@pytest.mark.parametrize("missing", ["GEMINI_BASE_URL", "GEMINI_API_KEY"])
def test_missing_credentials_are_fatal(tmp_path, missing):
    env = {key: value for key, value in ENV.items() if key != missing}

    with pytest.raises(ConfigurationError, match=missing):
        load_config(config_path=tmp_path / "missing.yaml", environ=env)


def test_blank_credentials_are_fatal(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(
            config_path=tmp_path / "missing.yaml",
            environ={**ENV, "GEMINI_API_KEY": "  "},
        )


def test_yaml_and_env_overrides(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text(
        "download_prefix: my-edit\n"
        "suggestions:\n"
        "  - Make it snow\n",
        encoding="utf-8",
    )
    env = {
        **ENV,
        "GEMINI_MODEL": "gemini-2.5-flash-image",
        "GEMINI_TIMEOUT_SECONDS": "30",
        "SESSION_TTL_SECONDS": "120",
        "MAX_SESSIONS": "10",
    }

    config = load_config(config_path=path, environ=env)

    assert config.download_prefix == "my-edit"
    assert config.suggestions == ["Make it snow"]
    assert config.gemini_model == "gemini-2.5-flash-image"
    assert config.gemini_timeout_seconds == 30.0
    assert config.session_ttl_seconds == 120.0
    assert config.max_sessions == 10


def test_get_config_before_load_raises():
    with pytest.raises(ConfigurationError):
        get_config()
