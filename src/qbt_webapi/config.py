"""
Configuration loader with environment variable expansion and universal _FILE support

Resolution order (highest to lowest priority):
1. CLI arguments
2. Environment variable _FILE variant (reads from file)
3. Environment variable (direct value)
4. Config file
5. Default value
"""

import os
import re
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from qbt_webapi.client import DEFAULT_URL
from qbt_webapi.errors import ConfigurationError


# Maps config keys to environment variable names
ENV_VAR_MAP = {
    'qbittorrent.url': 'QBT_WEBAPI_URL',
    'logging.level': 'QBT_WEBAPI_LOG_LEVEL',
    'logging.file': 'QBT_WEBAPI_LOG_FILE',
    'logging.trace_mode': 'QBT_WEBAPI_TRACE_MODE',
}

DEFAULT_CONFIG_DIR = Path('./config')


def get_nested_config(config: Dict[str, Any], key: str) -> Optional[Any]:
    """
    Get nested configuration value using dot notation

    Examples:
        >>> get_nested_config({'qbittorrent': {'url': 'http://nas:8080'}}, 'qbittorrent.url')
        'http://nas:8080'
        >>> get_nested_config({}, 'qbittorrent.url')
        None
    """
    value = config

    for k in key.split('.'):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return None

    return value


def parse_bool(value: Any) -> bool:
    """
    Parse boolean from various formats

    Examples:
        >>> parse_bool('true')
        True
        >>> parse_bool('0')
        False
        >>> parse_bool(None)
        False
    """
    if value is None:
        return False

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value != 0

    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')

    return bool(value)


def resolve_config(
    cli_value: Optional[Any],
    env_var: str,
    config: Dict[str, Any],
    config_key: str,
    default: Optional[Any] = None
) -> Any:
    """
    Universal configuration resolver with _FILE support

    Args:
        cli_value: Value from CLI argument (None if not provided)
        env_var: Environment variable name (without _FILE suffix)
        config: Loaded configuration dictionary
        config_key: Dot-notation key for config file (e.g., 'qbittorrent.url')
        default: Default value if no source provides a value

    Returns:
        Resolved configuration value
    """
    if cli_value is not None:
        return cli_value

    file_var = f"{env_var}_FILE"
    if file_var in os.environ:
        file_path = os.environ[file_var]
        try:
            with open(file_path, 'r') as f:
                content = f.read().strip()
            logging.debug(f"Loaded config from file: {file_var}={file_path}")
            return content
        except FileNotFoundError:
            logging.warning(f"File not found for {file_var}: {file_path}")
        except PermissionError:
            logging.warning(f"Permission denied reading {file_var}: {file_path}")
        except OSError as e:
            logging.warning(f"Error reading {file_var} from {file_path}: {e}")

    if env_var in os.environ:
        value = os.environ[env_var]
        logging.debug(f"Loaded config from env: {env_var}={value}")
        return value

    if config:
        value = get_nested_config(config, config_key)
        if value is not None:
            logging.debug(f"Loaded config from file: {config_key}={value}")
            return value

    logging.debug(f"Using default config: {config_key}={default}")
    return default


def expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values

    Supports format: ${VAR_NAME:-default_value}
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ''
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replacer, value)

    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]

    return value


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """
    Load YAML file with error handling

    A missing or empty file yields an empty configuration.

    Raises:
        ConfigurationError: If the file exists but cannot be loaded
    """
    if not file_path.exists():
        return {}

    try:
        with open(file_path, 'r') as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(str(file_path), f"Invalid YAML syntax: {str(e)}")
    except PermissionError:
        raise ConfigurationError(str(file_path), "Permission denied - cannot read file")
    except OSError as e:
        raise ConfigurationError(str(file_path), f"Cannot read file: {str(e)}")

    if content is None:
        return {}

    if not isinstance(content, dict):
        raise ConfigurationError(str(file_path), "Top level must be a mapping")

    return content


class Config:
    """Configuration manager"""

    def __init__(self, config_dir: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration

        Args:
            config_dir: Directory containing config.yml
                       Defaults to CONFIG_DIR env var or ./config
            overrides: CLI values keyed by config key (e.g., {'qbittorrent.url': ...})
        """
        if config_dir is None:
            config_dir = Path(os.environ.get('CONFIG_DIR', DEFAULT_CONFIG_DIR))

        self.config_dir = Path(config_dir)
        self.config_file = self.config_dir / 'config.yml'
        self.overrides = overrides or {}

        logging.debug(f"Loading config from {self.config_file}")
        self.config = expand_env_vars(load_yaml_file(self.config_file))

    def get(self, key: str, default: Any = None) -> Any:
        """Resolve a setting from CLI overrides, environment and config file"""
        return resolve_config(
            self.overrides.get(key),
            ENV_VAR_MAP.get(key, ''),
            self.config,
            key,
            default=default
        )

    def get_url(self) -> str:
        """Get qBittorrent WebUI URL"""
        return str(self.get('qbittorrent.url', DEFAULT_URL))

    def get_log_level(self) -> str:
        """Get logging level"""
        return str(self.get('logging.level', 'INFO')).upper()

    def get_log_file(self) -> Optional[Path]:
        """
        Get log file path, or None when file logging is off

        Relative paths are taken relative to the config directory.
        """
        log_file = self.get('logging.file')
        if not log_file:
            return None

        log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = self.config_dir / log_path

        return log_path

    def get_trace_mode(self) -> bool:
        """Check if trace mode is enabled (detailed logging with module/function/line)"""
        return parse_bool(self.get('logging.trace_mode', False))


def load_config(config_dir: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None) -> Config:
    """Load configuration from directory"""
    return Config(config_dir, overrides)
