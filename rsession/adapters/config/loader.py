"""
Configuration loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from ...core.constants import (
    ENV_PREFIX,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_TIMEOUT,
    DEFAULT_HOST_KEY_POLICY,
)
from ...core.exceptions import ConfigError

DEFAULTS: Dict[str, Any] = {
    "port": DEFAULT_SSH_PORT,
    "timeout": DEFAULT_SSH_TIMEOUT,
    "host_key_policy": DEFAULT_HOST_KEY_POLICY,
}


class ConfigLoader:
    """Configuration loader with priority support"""

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix
        # env suffix -> (config key, converter)
        self._env_mappings: Dict[str, Tuple[str, Callable[[str], Any]]] = {
            "USER": ("user", str),
            "PORT": ("port", int),
            "PASSWORD": ("password", str),
            "TIMEOUT": ("timeout", float),
            "HOST_KEY_POLICY": ("host_key_policy", str.lower),
            "KNOWN_HOSTS": ("known_hosts", str),
        }

    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Load TOML configuration file"""
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            data = tomllib.loads(path.read_text(encoding='utf-8'))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse TOML configuration {path}: {e}") from e

        # Connection settings may live at top level or under [connection]
        section = data.get("connection", data)
        if not isinstance(section, dict):
            raise ConfigError(f"[connection] in {path} must be a table")
        return {key: section[key] for key in self._known_keys() if key in section}

    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config = {}

        for suffix, (config_key, convert) in self._env_mappings.items():
            env_key = self._env_prefix + suffix
            value = os.getenv(env_key)
            if not value:
                continue
            try:
                config[config_key] = convert(value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {env_key}: {value!r}") from e

        return config

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones; None values never override.
        """
        result: Dict[str, Any] = {}

        for config in configs:
            for key, value in config.items():
                if value is not None:
                    result[key] = value

        return result

    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration with priority: CLI > env > TOML > defaults

        Args:
            toml_path: Path to TOML configuration file
            cli_overrides: CLI parameter overrides
            use_env: Whether to load from environment variables

        Returns:
            Merged configuration dictionary
        """
        configs = [DEFAULTS]

        # 1. Load TOML if provided
        if toml_path:
            configs.append(self.load_toml(toml_path))

        # 2. Load environment variables
        if use_env:
            configs.append(self.load_env())

        # 3. Apply CLI overrides (highest priority)
        if cli_overrides:
            configs.append(cli_overrides)

        return self.merge_configs(*configs)

    def _known_keys(self):
        return [config_key for config_key, _ in self._env_mappings.values()]
