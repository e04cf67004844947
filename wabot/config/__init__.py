"""Configuration module for wabot."""

from wabot.config.loader import get_config_path, load_config, save_config
from wabot.config.schema import BotConfig, Config, GeminiConfig, GroupRulesConfig, HistoryConfig

__all__ = [
    "BotConfig",
    "Config",
    "GeminiConfig",
    "GroupRulesConfig",
    "HistoryConfig",
    "get_config_path",
    "load_config",
    "save_config",
]
