"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import ConfigModel, SourceConfig

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "MALAINAADU_CONFIG"


def default_config_path() -> Path:
    """Config path from the environment, else the per-user default."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "malainaadu" / "config.yaml"


class Config:
    """Configuration manager.

    Secrets never live in the YAML file; it only names the environment
    variables that hold them. They are resolved at call time so a missing
    secret fails the invocation that needs it, not process start-up.
    """

    def __init__(self, config_path: Optional[Path] = None, model: Optional[ConfigModel] = None) -> None:
        """Initialize config manager."""
        self.config_path = config_path or default_config_path()
        self._config: Optional[ConfigModel] = model

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            if self.config_path.exists():
                self._config = load_config(self.config_path)
            else:
                logger.debug("No config file at %s, using defaults", self.config_path)
                self._config = ConfigModel()
        return self._config

    @property
    def sources_path(self) -> Path:
        """Path of the sources seed file next to the config."""
        return self.config_path.parent / "sources.yaml"

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        if db_config.get("dsn_env"):
            dsn = os.environ.get(db_config["dsn_env"])
            if dsn:
                db_config["dsn"] = dsn

        # Handle password from environment if specified
        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config

    def get_llm_config(self) -> Dict[str, Any]:
        """Get LLM configuration dict."""
        llm_config = self.config.llm.model_dump()

        # Handle API key from environment if specified
        if llm_config.get("api_key_env"):
            api_key = os.environ.get(llm_config["api_key_env"])
            if api_key:
                llm_config["api_key"] = api_key

        return llm_config

    def require_llm_api_key(self) -> str:
        """Return the rewrite API key or raise a configuration error."""
        api_key = self.get_llm_config().get("api_key")
        if not api_key:
            name = self.config.llm.api_key_env or "llm.api_key"
            raise ConfigurationError(f"{name} is not configured", variable=name)
        return api_key

    def get_relay_url(self) -> Optional[str]:
        """Relay URL, or None when it is not configured."""
        return _env(self.config.relay.url_env)

    def get_relay_key(self) -> str:
        """Relay shared secret; an empty header value when unset."""
        return _env(self.config.relay.key_env) or ""

    def get_email_api_key(self) -> Optional[str]:
        """Email provider key, or None when it is not configured."""
        return _env(self.config.email.api_key_env)

    def require_email_api_key(self) -> str:
        """Return the email provider key or raise a configuration error."""
        api_key = self.get_email_api_key()
        if not api_key:
            raise ConfigurationError("Email service not configured", variable=self.config.email.api_key_env)
        return api_key

    def require_inbound_webhook_key(self) -> str:
        """Shared secret expected on inbound publish webhooks."""
        key = _env(self.config.relay.key_env)
        if not key:
            raise ConfigurationError("Server configuration error", variable=self.config.relay.key_env)
        return key


def _env(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    value = os.environ.get(name, "").strip()
    return value or None


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file."""
    if not sources_path.exists():
        raise FileNotFoundError(f"Sources file not found: {sources_path}")

    try:
        with open(sources_path) as f:
            sources_data = yaml.safe_load(f)

        if sources_data is None or "sources" not in sources_data:
            return []

        sources = []
        for source_data in sources_data["sources"]:
            try:
                sources.append(SourceConfig(**source_data))
            except ValidationError as e:
                logger.warning("Skipping invalid source %s: %s", source_data.get("name", "unknown"), e)

        return sources
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in sources file: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Save sources to YAML file."""
    sources_path.parent.mkdir(parents=True, exist_ok=True)

    sources_data = {"sources": [s.model_dump() for s in sources]}

    with open(sources_path, "w") as f:
        yaml.dump(sources_data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
