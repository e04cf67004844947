"""Base classes for chat commands and the router that dispatches them.

A command line looks like ``!verb arg1 arg2``. :class:`CommandRouter`
parses it, finds the registered :class:`Command` by verb or alias, and runs
it with a :class:`CommandContext`. Unknown verbs are ignored silently: not
every message starting with the marker is meant for the bot.
"""

from __future__ import annotations

import abc
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from wabot.bus.events import InboundMessage
from wabot.config.schema import BotConfig
from wabot.history.store import HistoryStore
from wabot.providers.base import AIBackend
from wabot.transport.base import Transport
from wabot.transport.fallback import send_mention, send_text
from wabot.utils.clock import Clock, SystemClock

if TYPE_CHECKING:
    from wabot.group.pause import PauseScheduler
    from wabot.group.rules import RuleStore

GROUP_ONLY_MSG = "❌ This command only works in groups!"


@dataclass
class BotContext:
    """Services shared by every command invocation."""

    transport: Transport
    history: HistoryStore
    rules: "RuleStore"
    bot: BotConfig = field(default_factory=BotConfig)
    provider: AIBackend | None = None
    scheduler: "PauseScheduler | None" = None
    clock: Clock = field(default_factory=SystemClock)
    rng: random.Random = field(default_factory=random.Random)


@dataclass
class CommandContext:
    """One command invocation: the message, its arguments and the services."""

    msg: InboundMessage
    args: list[str]
    bot: BotContext

    @property
    def chat_id(self) -> str:
        return self.msg.chat_id

    @property
    def transport(self) -> Transport:
        return self.bot.transport

    @property
    def prefix(self) -> str:
        return self.bot.bot.command_prefix

    async def reply(self, text: str) -> bool:
        return await send_text(self.bot.transport, self.msg.chat_id, text)

    async def reply_mention(self, text: str, mentioned_id: str | None) -> bool:
        return await send_mention(self.bot.transport, self.msg.chat_id, text, mentioned_id)


def resolve_target(token: str, msg: InboundMessage) -> tuple[str | None, str]:
    """
    Resolve a command argument to ``(target_id, display_name)``.

    An ``@token`` maps to the *first* identifier in the message's mention
    list. With several mentions this may not be the one the token refers
    to; the platform does not say which mention sits where in the text.
    A token without ``@`` is a plain name with no identifier.
    """
    if not token.startswith("@"):
        return None, token
    name = token[1:]
    mentioned = msg.mentioned_ids()
    if not mentioned:
        return None, name
    return mentioned[0], name


class Command(abc.ABC):
    """Base class for a chat command."""

    name: str = ""
    aliases: tuple[str, ...] = ()
    group_only: bool = False
    description: str = ""

    @property
    def verbs(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    @abc.abstractmethod
    async def run(self, ctx: CommandContext) -> None:
        ...


class CommandRouter:
    """Parses command lines and dispatches them to registered commands."""

    def __init__(self, prefix: str = "!") -> None:
        if len(prefix) != 1:
            raise ValueError("Command prefix must be a single character")
        self.prefix = prefix
        self._commands: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        for verb in command.verbs:
            self._commands[verb.lower()] = command

    def get(self, verb: str) -> Command | None:
        return self._commands.get(verb.lower())

    def is_registered(self, verb: str) -> bool:
        return verb.lower() in self._commands

    @property
    def commands(self) -> list[Command]:
        """Registered commands, each listed once, in registration order."""
        unique: list[Command] = []
        for cmd in self._commands.values():
            if cmd not in unique:
                unique.append(cmd)
        return unique

    def parse(self, text: str) -> tuple[str, list[str]] | None:
        """Split ``!verb a b`` into ``("verb", ["a", "b"])``, or ``None``."""
        parts = text.split()
        if not parts or not parts[0].startswith(self.prefix):
            return None
        verb = parts[0][len(self.prefix):].lower()
        if not verb:
            return None
        return verb, parts[1:]

    async def dispatch(
        self, verb: str, args: list[str], msg: InboundMessage, bot: BotContext
    ) -> bool:
        """
        Run the command registered for *verb*.

        Returns:
            True if a command handled the message, False for unknown verbs.
        """
        command = self.get(verb)
        if command is None:
            logger.debug(f"Ignoring unknown command '{verb}' in {msg.chat_id}")
            return False

        logger.info(
            f"Command {self.prefix}{verb} args={args} chat={msg.chat_id} sender={msg.sender_id}"
        )
        ctx = CommandContext(msg=msg, args=args, bot=bot)
        if command.group_only and not msg.is_group:
            await ctx.reply(GROUP_ONLY_MSG)
            return True

        try:
            await command.run(ctx)
        except Exception as e:
            logger.exception(f"Command {verb} failed in {msg.chat_id}: {e}")
        return True
