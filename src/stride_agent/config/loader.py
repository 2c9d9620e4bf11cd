"""
Configuration loading system for Stride Agent.

This module handles loading, merging, and validating configuration from
YAML files, environment variables, and CLI arguments.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List, Union
import yaml
from pydantic import ValidationError
from dotenv import load_dotenv

from .models import StrideAgentConfig
from ..utils.error_handling import ConfigurationError


ENV_PREFIX = "STRIDE_"

# Variables understood by the original DevStride tooling
LEGACY_ENV_VARS = {
    "DEVSTRIDE_API_BASE": ("tracker", "api_base"),
    "DEVSTRIDE_ORG_ID": ("tracker", "org_id"),
    "DEVSTRIDE_API_KEY": ("tracker", "api_key"),
    "DEVSTRIDE_API_SECRET": ("tracker", "api_secret"),
}

# Values that stay strings even when they look numeric or boolean
STRING_FIELDS = {
    ("tracker", "api_base"), ("tracker", "org_id"), ("tracker", "api_key"),
    ("tracker", "api_secret"), ("tools", "default_board_id"), ("app", "version"),
}


class ConfigLoader:
    """
    Configuration loader that supports multiple sources and validation.

    Loading priority (highest to lowest):
    1. Environment variables (STRIDE_<SECTION>_<KEY>)
    2. DEVSTRIDE_* credential variables
    3. CLI-specified config file
    4. Environment-specific config (e.g., configs/production.yaml)
    5. Default configuration file
    6. Built-in defaults (from Pydantic models)
    """

    def __init__(self):
        self._config: Optional[StrideAgentConfig] = None
        self._config_path: Optional[Path] = None

        env_file = Path(".env")
        if env_file.exists():
            load_dotenv(env_file)

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> StrideAgentConfig:
        """
        Load configuration from multiple sources and validate it.

        Args:
            config_path: Optional path to a specific config file

        Returns:
            Validated StrideAgentConfig instance

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            config_data: Dict[str, Any] = {}

            default_config_path = self._find_config("default")
            if default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(default_config_path))

            env_name = os.getenv("STRIDE_ENV")
            env_config_path = self._find_config(env_name) if env_name else None
            if env_config_path and env_config_path != default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(env_config_path))

            if config_path:
                cli_config_path = Path(config_path)
                if not cli_config_path.exists():
                    raise ConfigurationError(f"Specified config file not found: {config_path}")

                config_data = self._deep_merge(config_data, self._load_yaml_file(cli_config_path))
                self._config_path = cli_config_path

            config_data = self._apply_env_overrides(config_data)

            self._config = StrideAgentConfig(**config_data)
            return self._config

        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {self._format_validation_error(e)}") from e
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

    def get_config(self) -> StrideAgentConfig:
        """Get the current configuration, loading it if necessary."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def reload_config(self, config_path: Optional[Union[str, Path]] = None) -> StrideAgentConfig:
        """Reload configuration from sources."""
        self._config = None
        return self.load_config(config_path)

    def _find_config(self, name: str) -> Optional[Path]:
        """Find a named configuration file in the usual places."""
        possible_paths = [
            Path(f"configs/{name}.yaml"),
            Path(f"configs/{name}.yml"),
            Path(f"config/{name}.yaml"),
            Path(f"config/{name}.yml"),
        ]

        for path in possible_paths:
            if path.exists():
                return path

        return None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML configuration file.

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

            if data is None:
                return {}

            if not isinstance(data, dict):
                raise ConfigurationError(f"Configuration file {file_path} must contain a YAML object (dictionary)")

            return data

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {str(e)}") from e
        except IOError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {str(e)}") from e

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        The first segment after the prefix names the section and the rest
        names the key, so STRIDE_TRACKER_API_KEY overrides tracker.api_key.
        """
        result = config_data.copy()

        for env_key, (section, key) in LEGACY_ENV_VARS.items():
            value = os.environ.get(env_key)
            if value:
                self._set_nested_value(result, [section, key], value)

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX) or env_key == "STRIDE_ENV":
                continue

            parts = env_key[len(ENV_PREFIX):].lower().split('_', 1)
            if len(parts) != 2 or not parts[1]:
                continue

            section, key = parts
            if (section, key) in STRING_FIELDS:
                typed_value: Any = env_value
            else:
                typed_value = self._convert_env_value(env_value)

            self._set_nested_value(result, [section, key], typed_value)

        return result

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to bool, int, float or string."""
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        try:
            if '.' not in value:
                return int(value)
            else:
                return float(value)
        except ValueError:
            pass

        return value

    def _set_nested_value(self, data: Dict[str, Any], path: List[str], value: Any) -> None:
        """Set a value in a nested dictionary using a path."""
        current = data

        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            elif not isinstance(current[key], dict):
                return
            else:
                # Copy so merged YAML data is not mutated in place
                current[key] = dict(current[key])
            current = current[key]

        if path:
            current[path[-1]] = value

    def _format_validation_error(self, error: ValidationError) -> str:
        """Format a Pydantic validation error for user-friendly display."""
        messages = []
        for err in error.errors():
            location = " -> ".join(str(loc) for loc in err['loc'])
            message = err['msg']
            value = err.get('input', 'N/A')
            messages.append(f"  {location}: {message} (got: {value})")

        return "Validation errors:\n" + "\n".join(messages)


# Global configuration loader instance
_config_loader = ConfigLoader()


def load_config(config_path: Optional[Union[str, Path]] = None) -> StrideAgentConfig:
    """
    Load configuration from multiple sources.

    Raises:
        ConfigurationError: If configuration loading fails
    """
    return _config_loader.load_config(config_path)


def get_config() -> StrideAgentConfig:
    """Get the current configuration, loading it if necessary."""
    return _config_loader.get_config()


def reload_config(config_path: Optional[Union[str, Path]] = None) -> StrideAgentConfig:
    """Reload configuration from sources."""
    return _config_loader.reload_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> tuple[bool, Optional[str]]:
    """
    Validate a configuration file without loading it globally.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        temp_loader = ConfigLoader()
        temp_loader.load_config(config_path)
        return True, None
    except ConfigurationError as e:
        return False, str(e)
