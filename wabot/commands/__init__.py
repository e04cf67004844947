"""Chat commands and the router that dispatches them."""

from wabot.commands.actions import ActionCommand, default_action_commands
from wabot.commands.base import BotContext, Command, CommandContext, CommandRouter
from wabot.commands.generative import ExplainCommand, JokeCommand, PickupCommand, StoryCommand
from wabot.commands.help import HelpCommand
from wabot.commands.pause import SelfDestructCommand
from wabot.commands.roulette import RouletteCommand


def build_default_router(prefix: str = "!") -> CommandRouter:
    """Create a router with every built-in command registered."""
    router = CommandRouter(prefix)
    for action in default_action_commands():
        router.register(action)
    for command in (
        JokeCommand(),
        PickupCommand(),
        StoryCommand(),
        ExplainCommand(),
        SelfDestructCommand(),
        RouletteCommand(),
        HelpCommand(),
    ):
        router.register(command)
    return router


__all__ = [
    "ActionCommand",
    "BotContext",
    "Command",
    "CommandContext",
    "CommandRouter",
    "build_default_router",
]
