"""Configuration management for the ToolHub gateway.

Supports YAML configuration files and environment variable overrides.
Configuration is loaded once and cached for performance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HubServerSettings(BaseSettings):
    """Gateway server configuration."""
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8787)

    # Streamable HTTP answers with plain JSON instead of an SSE stream
    json_response: bool = Field(default=True)

    # Shared secret every caller must present (HUB_TOKEN)
    token: Optional[str] = Field(default=None, description="Hub secret")

    model_config = SettingsConfigDict(
        env_prefix="HUB_",
        env_file=".env",
        extra="ignore"
    )


class AudioSettings(BaseSettings):
    """Text-to-speech downstream."""
    endpoint: str = Field(default="", description="TTS service URL")
    token: Optional[str] = Field(default=None, description="Query-string token")

    model_config = SettingsConfigDict(
        env_prefix="TTS_",
        env_file=".env",
        extra="ignore"
    )


class ImageSettings(BaseSettings):
    """Image generation downstream."""
    endpoint: str = Field(default="", description="Image service URL")
    key: Optional[str] = Field(default=None, description="Bearer key")

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_",
        env_file=".env",
        extra="ignore"
    )


class TranslateSettings(BaseSettings):
    """Translation downstream. The endpoint carries its own authentication, if any."""
    endpoint: str = Field(default="", description="Translation service URL")

    model_config = SettingsConfigDict(
        env_prefix="TRANSLATE_",
        env_file=".env",
        extra="ignore"
    )


class Settings(BaseSettings):
    """Main application settings."""
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Component settings
    hub: HubServerSettings = Field(default_factory=HubServerSettings)
    tts: AudioSettings = Field(default_factory=AudioSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    translate: TranslateSettings = Field(default_factory=TranslateSettings)

    model_config = SettingsConfigDict(
        env_prefix="TOOLHUB_",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        data = load_yaml_config(path)
        return cls(**data)


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    config_path = os.environ.get("TOOLHUB_CONFIG_PATH", "config/settings.yaml")
    return Settings.from_yaml(config_path)
