"""
Configuration loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, List

from ...core.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_MAX_WORKERS,
    DEFAULT_SSH_BINARY,
    DEFAULT_SSH_KEY,
    DEFAULT_SSH_USER,
    DEFAULT_STORE_FILE,
    ENV_PREFIX,
)
from ...core.exceptions import ConfigError


@dataclass
class Settings:
    """Resolved runtime settings"""
    regions: List[str] = field(default_factory=list)
    roles: List[str] = field(default_factory=list)
    store_path: Path = DEFAULT_STORE_FILE
    default_user: str = DEFAULT_SSH_USER
    default_key: str = DEFAULT_SSH_KEY
    ssh_binary: str = DEFAULT_SSH_BINARY
    max_workers: int = DEFAULT_MAX_WORKERS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """
        Create from a merged configuration dictionary.

        Raises:
            ConfigError: If a value has the wrong type
        """
        settings = cls()
        settings.regions = _string_list(data, "regions")
        settings.roles = _string_list(data, "roles")
        if data.get("store_path"):
            settings.store_path = Path(str(data["store_path"])).expanduser()
        for key in ("default_user", "default_key", "ssh_binary"):
            if data.get(key):
                setattr(settings, key, str(data[key]))
        if data.get("max_workers") is not None:
            try:
                settings.max_workers = int(data["max_workers"])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"max_workers must be an integer, got {data['max_workers']!r}") from e
            if settings.max_workers < 1:
                raise ConfigError(f"max_workers must be >= 1, got {settings.max_workers}")
        return settings


def _string_list(data: Dict[str, Any], key: str) -> List[str]:
    """Read a list of strings; a comma separated string is accepted"""
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key} must be a list of strings")
    return [item for item in value if item]


class ConfigLoader:
    """Configuration loader with priority support"""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._env_prefix = ENV_PREFIX
        self._environ = os.environ if environ is None else environ

    def config_path(self, toml_path: Optional[Path] = None) -> Path:
        """Configuration file to read: explicit path, $EC2SSH_CONFIG, or default"""
        if toml_path:
            return Path(toml_path).expanduser()
        env_path = self._environ.get(f"{self._env_prefix}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        return DEFAULT_CONFIG_FILE

    def load_toml(self, path: Path, required: bool = False) -> Dict[str, Any]:
        """Load TOML configuration file"""
        if not path.exists():
            if required:
                raise ConfigError(f"Configuration file not found: {path}")
            return {}

        try:
            return tomllib.loads(path.read_text(encoding='utf-8'))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML configuration {path}: {e}") from e

    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config = {}

        env_mappings = {
            "STORE": "store_path",
            "REGIONS": "regions",
            "ROLES": "roles",
            "DEFAULT_USER": "default_user",
            "DEFAULT_KEY": "default_key",
            "SSH_BINARY": "ssh_binary",
            "MAX_WORKERS": "max_workers",
        }

        for env_key, config_key in env_mappings.items():
            value = self._environ.get(f"{self._env_prefix}{env_key}")
            if value:
                config[config_key] = value

        return config

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones.
        """
        result = {}

        for config in configs:
            result = self._deep_merge(result, config)

        return result

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries"""
        result = base.copy()

        for key, value in override.items():
            if value is None:
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Settings:
        """
        Load configuration with priority: CLI > env > TOML > defaults

        Args:
            toml_path: Path to TOML configuration file (must exist if given)
            cli_overrides: CLI parameter overrides, None values are ignored
            use_env: Whether to load from environment variables

        Returns:
            Resolved settings

        Raises:
            ConfigError: If the configuration is invalid
        """
        configs = [self.load_toml(self.config_path(toml_path), required=toml_path is not None)]

        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)

        if cli_overrides:
            configs.append(cli_overrides)

        return Settings.from_dict(self.merge_configs(*configs))
