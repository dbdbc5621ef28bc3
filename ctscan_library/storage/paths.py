"""Path resolution for scanboard storage locations.

This module provides path resolution based on the SCANBOARD_HOME environment
variable, following an XDG-like directory structure within that root.

Contract:
- Inputs: Environment variables (SCANBOARD_HOME, SCANBOARD_CONFIG_DIR, SCANBOARD_LOG_DIR)
- Outputs: Resolved Path objects
- Side Effects: Creates directories if they don't exist
"""

import os
from pathlib import Path


def get_home_dir() -> Path:
    """Get SCANBOARD_HOME from environment.

    Returns:
        Path to root directory (default: .scanboard)
    """
    root = os.environ.get("SCANBOARD_HOME", ".scanboard")
    return Path(root).resolve()


def get_config_dir() -> Path:
    """Get configuration directory.

    Returns:
        Path to config directory ($SCANBOARD_HOME/config)
    """
    config_dir: Path = get_home_dir() / "config"

    env_override: str | None = os.environ.get("SCANBOARD_CONFIG_DIR")
    if env_override is not None:
        config_dir = Path(env_override).resolve()

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_log_dir() -> Path:
    """Get log directory.

    Returns:
        Path to log directory ($SCANBOARD_HOME/logs)
    """
    log_dir: Path = get_home_dir() / "logs"

    env_override: str | None = os.environ.get("SCANBOARD_LOG_DIR")
    if env_override is not None:
        log_dir = Path(env_override).resolve()

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir
