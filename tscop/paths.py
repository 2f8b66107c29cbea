"""
Project root discovery.

The project root is the nearest directory, starting from the working
directory and moving up, that holds config/settings.yaml. The search never
starts from the installed package, so an unrelated checkout above
site-packages is not picked up.
"""

import os
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigError
from .logging.error_codes import ErrorCode

PROJECT_MARKER = Path('config') / 'settings.yaml'


class ProjectRootNotFoundError(ConfigError):
    """Raised when project root cannot be determined."""

    default_code = ErrorCode.CONFIG_LOAD_ERROR


def get_project_root(start: Optional[Union[str, Path]] = None) -> Path:
    """
    Find the project root directory.

    Set the PROJECT_ROOT environment variable to override detection.

    Args:
        start: Directory to search from (default: the working directory).

    Raises:
        ProjectRootNotFoundError: If no directory from ``start`` upward holds
            config/settings.yaml.
    """
    env_root = os.environ.get('PROJECT_ROOT')
    if env_root and Path(env_root).is_dir():
        return Path(env_root).resolve()

    start = Path(start) if start is not None else Path.cwd()
    start = start.resolve()
    for directory in (start, *start.parents):
        if (directory / PROJECT_MARKER).is_file():
            return directory

    raise ProjectRootNotFoundError(
        f"No {PROJECT_MARKER.as_posix()} found in {start} or its parents. "
        f"Set PROJECT_ROOT or TSCOP_SETTINGS to point at one."
    )


def get_config_dir() -> Path:
    """Get the config directory path."""
    return get_project_root() / 'config'


__all__ = ['PROJECT_MARKER', 'ProjectRootNotFoundError', 'get_config_dir', 'get_project_root']
