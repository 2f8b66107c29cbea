"""
Settings loading and cache management.

Settings come from DEFAULT_SETTINGS overlaid with a YAML file. The file is,
in order of preference: the path passed to load_settings, the file named by
the TSCOP_SETTINGS environment variable, or config/settings.yaml under the
project root. A missing default file is not an error.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..errors import ConfigError
from ..logging.config import _validate_log_level
from ..logging.error_codes import ErrorCode
from ..paths import ProjectRootNotFoundError, get_config_dir
from ..utils import load_yaml

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = 'TSCOP_SETTINGS'

DEFAULT_SETTINGS: Dict[str, Any] = {
    'delimiter': '\t',
    'batch_size': 10000,
    'missing_values': ['NA', 'NaN'],
    'ensure_sorted': True,
    'log_level': 'INFO',
    'influxdb': {
        'host': None,
        'database': None,
        'token': None,
        'downsample_query': None,
    },
}

_config_cache: Dict[str, Any] = {}


def _get_config_path(filename: str) -> Path:
    """Get path to config file."""
    return get_config_dir() / filename


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check setting types and normalize values.

    ``missing_values`` is returned as a frozenset and ``log_level`` in upper
    case.

    Raises:
        ConfigError: If a setting has the wrong type or value.
    """
    unknown = set(settings) - set(DEFAULT_SETTINGS)
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

    delimiter = settings['delimiter']
    if not isinstance(delimiter, str) or not delimiter:
        raise ConfigError(f"delimiter must be a non-empty string, got {delimiter!r}")

    batch_size = settings['batch_size']
    if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size <= 0:
        raise ConfigError(f"batch_size must be a positive integer, got {batch_size!r}")

    missing = settings['missing_values']
    if not isinstance(missing, (list, tuple, set, frozenset)) or not all(isinstance(v, str) for v in missing):
        raise ConfigError("missing_values must be a list of strings")
    settings['missing_values'] = frozenset(missing)

    if not isinstance(settings['ensure_sorted'], bool):
        raise ConfigError(f"ensure_sorted must be true or false, got {settings['ensure_sorted']!r}")

    try:
        settings['log_level'] = _validate_log_level(str(settings['log_level']).upper())
    except ValueError as e:
        raise ConfigError(str(e)) from e

    influx = settings['influxdb']
    if not isinstance(influx, dict):
        raise ConfigError("influxdb must be a mapping")
    unknown = set(influx) - set(DEFAULT_SETTINGS['influxdb'])
    if unknown:
        raise ConfigError(f"Unknown influxdb setting(s): {', '.join(sorted(unknown))}")

    return settings


def _resolve_settings_path(path: Optional[Union[str, Path]]) -> Optional[Path]:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return Path(env_path)
    try:
        default_path = _get_config_path('settings.yaml')
    except ProjectRootNotFoundError:
        return None
    return default_path if default_path.exists() else None


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings, overlaying a YAML file on DEFAULT_SETTINGS.

    Args:
        path: Optional explicit settings file.

    Returns:
        dict: Validated settings

    Raises:
        ConfigError: If the file is missing (when named explicitly or through
            TSCOP_SETTINGS), is not valid YAML, or holds invalid values.
    """
    settings_path = _resolve_settings_path(path)
    cache_key = str(settings_path.resolve()) if settings_path is not None else 'defaults'
    if cache_key in _config_cache:
        logger.debug("Returning cached settings")
        return _config_cache[cache_key]

    overrides: Dict[str, Any] = {}
    if settings_path is not None:
        logger.debug(f"Loading settings from {settings_path}")
        try:
            overrides = load_yaml(settings_path)
        except FileNotFoundError as e:
            raise ConfigError(str(e), error_code=ErrorCode.CONFIG_LOAD_ERROR) from e
        except yaml.YAMLError as e:
            raise ConfigError(str(e), error_code=ErrorCode.CONFIG_LOAD_ERROR) from e
        if not isinstance(overrides, dict):
            raise ConfigError(
                f"Settings file {settings_path} must contain a mapping",
                error_code=ErrorCode.CONFIG_LOAD_ERROR,
            )

    settings = validate_settings(_merge(DEFAULT_SETTINGS, overrides))
    _config_cache[cache_key] = settings
    return settings


def clear_config_cache() -> None:
    """Clear the configuration cache. Useful for testing or reloading configs."""
    cache_size = len(_config_cache)
    _config_cache.clear()
    logger.debug(f"Cleared config cache ({cache_size} entries)")
