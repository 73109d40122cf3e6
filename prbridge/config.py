"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    return Path(os.environ.get(env_var) or fallback) / "prbridge"


def default_config_dir() -> Path:
    env = os.environ.get("PRBRIDGE_CONFIG_DIR")
    if env:
        return Path(env)
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")


def default_data_dir() -> Path:
    """Database location when neither ``data_dir`` nor ``database.path`` is set."""
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")


class ServerConfig(BaseModel):
    bind: str = "0.0.0.0"
    port: int = 3000


class ChatworkConfig(BaseModel):
    api_url: str = "https://api.chatwork.com/v2"
    timeout: float = 30.0


class DatabaseConfig(BaseModel):
    # Empty means <data_dir>/webhooks.db
    path: str = ""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRBRIDGE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    chatwork: ChatworkConfig = Field(default_factory=ChatworkConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    # AppEvent value -> template string, overriding the built-in templates
    templates: dict[str, str] = Field(default_factory=dict)
    data_dir: str = ""
    log_level: str = "INFO"
    log_json: bool = False

    def get_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir)
        return default_data_dir()

    def get_database_path(self) -> Path:
        if self.database.path:
            return Path(self.database.path)
        return self.get_data_dir() / "webhooks.db"


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("PRBRIDGE_CONFIG")
    if config_path is None:
        default = default_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    # Load YAML if found
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # YAML values are init arguments; env vars fill what YAML leaves unset
    return Settings(**yaml_data)
