"""
Configuration loading for tscop.

Public API:
    - load_settings: Load settings from YAML on top of the defaults
    - validate_settings: Check and normalize a settings mapping
    - clear_config_cache: Clear the configuration cache
"""

from __future__ import annotations

from .core import (
    DEFAULT_SETTINGS,
    SETTINGS_ENV_VAR,
    load_settings,
    validate_settings,
    clear_config_cache,
)

__all__ = [
    'DEFAULT_SETTINGS',
    'SETTINGS_ENV_VAR',
    'load_settings',
    'validate_settings',
    'clear_config_cache',
]
