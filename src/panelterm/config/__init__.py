"""Configuration management for panelterm.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for the bearer token.
"""

from panelterm.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
