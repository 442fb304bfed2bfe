"""Configuration management for StyleSwap."""

import os
from pathlib import Path
from typing import Any, List, Mapping, Optional
import yaml
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from .errors import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

# Load environment variables
load_dotenv()

DEFAULT_CONFIG_PATH = Path("config/app.yaml")

DEFAULT_SUGGESTIONS = [
    "Change the t-shirt to a tuxedo",
    "Wear a red floral summer dress",
    "Add a leather jacket",
    "Change the background to a beach",
    "Add a superhero cape",
    "Wear a futuristic space suit",
]


class Config(BaseModel):
    """Main application configuration."""

    # Endpoint
    gemini_base_url: str = Field(..., alias="GEMINI_BASE_URL")
    gemini_api_key: str = Field(..., alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-3-pro-image-preview", alias="GEMINI_MODEL")
    gemini_api_version: str = Field(default="v1beta", alias="GEMINI_API_VERSION")
    # None leaves the request unbounded, as the transport allows
    gemini_timeout_seconds: Optional[float] = Field(default=None, alias="GEMINI_TIMEOUT_SECONDS")

    # Application Settings
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    port: int = Field(default=8000, alias="PORT")

    # Session store bounds
    session_ttl_seconds: float = Field(default=3600, alias="SESSION_TTL_SECONDS")
    max_sessions: int = Field(default=500, alias="MAX_SESSIONS")

    # From config/app.yaml
    default_mime_type: str = "image/png"
    download_prefix: str = "styleswap-edited"
    suggestions: List[str] = Field(default_factory=lambda: list(DEFAULT_SUGGESTIONS))

    class Config:
        populate_by_name = True

    @field_validator("gemini_base_url", "gemini_api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("gemini_timeout_seconds", mode="before")
    @classmethod
    def _blank_timeout_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


# Global config instance
_config: Optional[Config] = None


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Load configuration from environment and the optional YAML file.

    Args:
        config_path: YAML file path (defaults to $STYLESWAP_CONFIG or config/app.yaml)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Config instance

    Raises:
        ConfigurationError: If GEMINI_BASE_URL / GEMINI_API_KEY are missing
            or the configuration is otherwise invalid
    """
    global _config

    if environ is None:
        environ = os.environ

    missing = [
        key for key in ("GEMINI_BASE_URL", "GEMINI_API_KEY")
        if not environ.get(key, "").strip()
    ]
    if missing:
        raise ConfigurationError(
            f"Please set {' and '.join(missing)} in your environment variables."
        )

    if config_path is None:
        config_path = Path(environ.get("STYLESWAP_CONFIG", DEFAULT_CONFIG_PATH))

    try:
        file_config = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Config file not found at {config_path}, using defaults")

        config_data = {
            **environ,
            **file_config,
        }

        _config = Config(**config_data)

    except Exception as e:
        raise ConfigurationError(f"Failed to load configuration: {e}")

    logger.info(
        "Configuration loaded successfully",
        extra={
            "environment": _config.app_env,
            "model": _config.gemini_model,
            "suggestions_count": len(_config.suggestions),
        }
    )

    return _config


def get_config() -> Config:
    """
    Get the current configuration instance.

    Raises:
        ConfigurationError: If config not loaded
    """
    if _config is None:
        raise ConfigurationError("Configuration not loaded. Call load_config() first.")
    return _config
