"""Configuration management for panelterm.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (the panel bearer token). Supports .env
files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings

from panelterm.domain.models import QuickAction, Target

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/panelterm.yaml")


class ChannelConfig(BaseModel):
    url: str = Field(default="ws://localhost:8080/ws/terminal")
    open_timeout: float = Field(default=10.0, gt=0)
    close_timeout: float = Field(default=5.0, gt=0)
    max_message_size: int = Field(default=1024 * 1024, gt=0)


class PanelConfig(BaseModel):
    base_url: str | None = Field(default=None, description="Panel API used to list targets")
    timeout: float = Field(default=10.0, gt=0)


class EndpointConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080, ge=1, le=65535)
    workspace: Path = Field(default=Path("workspace"))
    shell_command: str = Field(default="/bin/bash")
    exec_timeout: float | None = Field(default=None, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for panelterm.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "PANELTERM_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Bearer credential presented at connect time
    token: SecretStr = Field(default=SecretStr(""))

    # Configuration sections
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    panel: PanelConfig = Field(default_factory=PanelConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    targets: list[Target] = Field(default_factory=list)
    quick_actions: dict[str, list[QuickAction]] = Field(default_factory=dict)

    def credential(self) -> str | None:
        """The bearer token, or None when unset."""
        return self.token.get_secret_value() or None


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    # Load .env file manually for non-prefixed vars
    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply non-prefixed overrides shared with the panel's own tooling."""
    token = os.environ.get("PANEL_TOKEN", "")
    panel_url = os.environ.get("PANEL_URL", "")

    if token and not yaml_data.get("token"):
        yaml_data["token"] = token

    if panel_url:
        panel = yaml_data.setdefault("panel", {})
        if not panel.get("base_url"):
            panel["base_url"] = panel_url
