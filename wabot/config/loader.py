"""Configuration loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from wabot.config.schema import Config
from wabot.utils.helpers import get_wabot_home

GEMINI_API_KEY_ENV = "GEMINI_API_KEY"


def get_config_path() -> Path:
    """Get the default configuration file path (~/.wabot/config.json)."""
    return get_wabot_home() / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    The Gemini API key falls back to the ``GEMINI_API_KEY`` environment
    variable when the file does not set one.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()
    config: Config | None = None

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            config = Config.model_validate(_convert_config_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    if config is None:
        config = Config()

    if not config.gemini.api_key:
        config.gemini.api_key = os.environ.get(GEMINI_API_KEY_ENV, "")
    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional explicit path. Uses the default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump()
    groups = data.pop("groups", {})
    data = convert_to_camel(data)
    # Group JIDs are map keys, not field names: keep them verbatim
    data["groups"] = {gid: convert_to_camel(rules) for gid, rules in groups.items()}

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _convert_config_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    data = dict(data)
    groups = data.pop("groups", None)
    converted = convert_keys(data)
    if isinstance(groups, dict):
        converted["groups"] = {gid: convert_keys(rules) for gid, rules in groups.items()}
    return converted


# ---------------------------------------------------------------------------
# Key conversion helpers
# ---------------------------------------------------------------------------


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
