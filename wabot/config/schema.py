"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, Field

from wabot.utils.helpers import get_wabot_home


class BotConfig(BaseModel):
    """Identity and behaviour of the bot itself."""

    name: str = "DuckerIA"
    aliases: list[str] = Field(default_factory=lambda: ["ducker", "duckeria", "botia", "bot"])
    command_prefix: str = "!"
    media_dir: str = "static/gif"
    prompt_file: str = "prompt.txt"
    private_history_messages: int = 100


class GeminiConfig(BaseModel):
    api_key: str = ""
    model: str = "gemini-2.5-flash"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 60.0


class HistoryConfig(BaseModel):
    dir: str = str(get_wabot_home() / "history")
    retention_days: int = 0  # 0 disables the sweep
    sweep_interval_hours: int = 24

    @property
    def path(self) -> Path:
        return Path(self.dir).expanduser()


class GroupRulesConfig(BaseModel):
    """Per-group rule values. Also used for the defaults of new groups."""

    allowed_users: list[str] = Field(default_factory=list)
    blocked_users: list[str] = Field(default_factory=list)
    ai_enabled: bool = True
    max_history_messages: int = 50
    require_mention: bool = True
    custom_prompt: str | None = None
    response_cooldown_seconds: int = 30


class Config(BaseModel):
    """Root configuration for wabot."""

    bot: BotConfig = Field(default_factory=BotConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    group_defaults: GroupRulesConfig = Field(default_factory=GroupRulesConfig)
    groups: dict[str, GroupRulesConfig] = Field(default_factory=dict)
