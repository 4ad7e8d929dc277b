"""Provides functions for loading and accessing configuration settings.

Supports loading from a YAML configuration file (~/.diskstash/config.yaml),
a .env file and environment variables. Keys are dotted names such as
'cache.default_ttl'; the matching environment variable is
DISKSTASH_CACHE_DEFAULT_TTL.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
CONFIG_DIR_NAME = ".diskstash"
CONFIG_FILE_NAME = "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "DISKSTASH_"

DEFAULT_DIRECTORY_NAME = "CacheDirectory"
DEFAULT_SERIALIZER = "pickle"

_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def default_config_file() -> Optional[Path]:
    """Returns ~/.diskstash/config.yaml, or None when there is no home directory."""
    try:
        return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME
    except (KeyError, RuntimeError):
        return None


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ({'cache': {'x': 1}} -> {'cache.x': 1})."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None, force: bool = False) -> None:
    """Loads configuration from the YAML file and the .env file.

    Priority order (highest to lowest):
    1. Test overrides (set_config_for_testing)
    2. Environment Variables
    3. .env file
    4. YAML configuration file
    5. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file (~/.diskstash/config.yaml if None).
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    config_file = config_file or default_config_file()
    if config_file is None:
        logger.debug("No home directory; skipping the YAML config file.")
    elif config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        else:
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables take precedence
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    _loaded = True


def env_var_name(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_")


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Gets a configuration value by dotted key.

    Args:
        key: The configuration key, e.g. 'cache.base_dir'.
        default: Value returned when the key is not set anywhere.

    Returns:
        The configuration value.
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not set. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    try:
        cwd = Path.cwd()
    except OSError as e:
        logger.warning(f"Error searching for .env file: {e}")
        return None
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_cache_base_dir() -> Optional[Path]:
    """Configured base directory for caches, or None to use the platform default."""
    value = get_config("cache.base_dir")
    return Path(str(value)).expanduser() if value else None


def get_cache_directory_name() -> str:
    return str(get_config("cache.directory_name", DEFAULT_DIRECTORY_NAME))


def get_default_ttl() -> Optional[float]:
    """Default time-to-live in seconds, or None for entries that never expire."""
    value = get_config("cache.default_ttl")
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid cache.default_ttl value: {value!r}")
        return None


def get_serializer_name() -> str:
    return str(get_config("cache.serializer", DEFAULT_SERIALIZER))


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Overrides configuration values; these win over every other source."""
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clears all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


# Load configuration when the module is imported
load_configuration()
