"""
Configuration loader for autocommit.

The tool expects a JSON configuration file named ``config.json`` in the
``~/.autocommit/`` directory (overridable through the
``AUTOCOMMIT_CONFIG_DIR`` environment variable). The file describes how
to reach the Ollama server used for summarizing and grouping changes.

If the configuration file is missing, malformed, or missing required
keys, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where the root logger is not configured. The CLI configures logging
# explicitly when it runs.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_DIR_ENV = "AUTOCOMMIT_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json"


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the configuration file."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".autocommit"


def load_config() -> Dict[str, Any]:
    """Load and validate the Ollama configuration.

    Returns:
        A dictionary containing the validated configuration with keys:
        - base_url (str): The base URL of the Ollama server
        - port (int): The port number
        - model (str): The model name
        - request_timeout (int|float, optional): Request timeout in seconds
        - max_tokens (int, optional): Maximum tokens for generation

    Raises:
        ConfigError: If the configuration file is missing, malformed, or invalid.
    """
    config_dir = _get_config_directory()
    config_path = config_dir / CONFIG_FILE_NAME

    if not config_path.exists():
        logger.error("Configuration file '%s' does not exist", config_path)
        raise ConfigError(
            f"Missing configuration file: {config_path}. "
            f"Create it with the keys base_url, port and model."
        )

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    required_keys = ["base_url", "port", "model"]
    missing = [key for key in required_keys if key not in data]
    if missing:
        logger.error("Configuration file missing required keys: %s", missing)
        raise ConfigError(f"Missing required configuration keys: {', '.join(missing)}")

    if not isinstance(data.get("base_url"), str):
        raise ConfigError("'base_url' must be a string")
    # bool is an int subclass; a port of true is still a mistake
    if not isinstance(data.get("port"), int) or isinstance(data.get("port"), bool):
        raise ConfigError("'port' must be an integer")
    if not isinstance(data.get("model"), str):
        raise ConfigError("'model' must be a string")

    if "request_timeout" in data and not isinstance(data["request_timeout"], (int, float)):
        raise ConfigError("'request_timeout' must be a number")
    if "max_tokens" in data and not isinstance(data["max_tokens"], int):
        raise ConfigError("'max_tokens' must be an integer")

    logger.debug("Loaded configuration from: %s", config_path)
    return data
