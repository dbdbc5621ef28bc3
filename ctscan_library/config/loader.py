"""Configuration loading for the scanboard client.

This module handles loading client configuration from YAML files
and environment variables.

Contract:
- Inputs: Config file paths, environment variables
- Outputs: ClientSettings objects
- Side Effects: Creates default config file if missing
"""

import logging
import os
from pathlib import Path

import yaml

from ..storage.paths import get_config_dir
from .settings import ClientSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = """# scanboard client configuration

# Scan-analysis backend
backend_url: "http://127.0.0.1:4943"
request_timeout_s: 30

# Logging
log_level: "info"

# Identity token issued by the identity provider.
# Prefer the SCANBOARD_IDENTITY environment variable over storing it here.
# identity: ""
"""


def get_config_path() -> Path:
    """Get path to config file.

    Returns:
        Path to scanboard.yaml in config directory
    """
    return get_config_dir() / "scanboard.yaml"


def create_default_config() -> None:
    """Create default config file if it doesn't exist."""
    config_path = get_config_path()

    if config_path.exists():
        logger.debug(f"Config file already exists: {config_path}")
        return

    config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    logger.info(f"Created default config: {config_path}")


def load_settings(config_path: Path | None = None) -> ClientSettings:
    """Load client configuration from YAML and environment.

    Environment variables take precedence over YAML settings.
    Variables should be prefixed with SCANBOARD_ (e.g., SCANBOARD_BACKEND_URL).

    Args:
        config_path: Optional config file path (default: scanboard.yaml in config dir)

    Returns:
        Validated client settings
    """
    if config_path is None:
        config_path = get_config_path()
        if not config_path.exists():
            create_default_config()

    yaml_settings: dict = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default settings and environment variables")
        else:
            if isinstance(loaded, dict):
                yaml_settings = loaded
                logger.debug(f"Loaded config from {config_path}")
            else:
                logger.warning(f"Ignoring {config_path}: expected a mapping, got {type(loaded).__name__}")

    # Defaults < YAML < env vars
    known = set(ClientSettings.model_fields)
    overrides = {}
    for key, value in yaml_settings.items():
        if key not in known:
            logger.warning(f"Unknown config key '{key}' in {config_path}")
        elif f"SCANBOARD_{key.upper()}" not in os.environ:
            overrides[key] = value

    settings = ClientSettings(**overrides)

    logger.info(f"Client configuration loaded: backend_url={settings.backend_url}, log_level={settings.log_level}")

    return settings
