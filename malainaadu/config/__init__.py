"""Configuration management for the news pipeline."""

from .loader import Config, default_config_path, load_config, load_sources, save_config, save_sources
from .models import (
    ConfigModel,
    EmailConfig,
    HealthConfig,
    IngestionConfig,
    LLMConfig,
    RelayConfig,
    SiteConfig,
    SourceConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "EmailConfig",
    "HealthConfig",
    "IngestionConfig",
    "LLMConfig",
    "RelayConfig",
    "SiteConfig",
    "SourceConfig",
    "default_config_path",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
