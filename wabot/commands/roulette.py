"""Couples roulette: pair two random group members."""

from __future__ import annotations

import re

from loguru import logger

from wabot.commands.base import Command, CommandContext
from wabot.transport.base import TransportError
from wabot.utils.helpers import normalize_jid

GROUP_INFO_ERROR_MSG = "❌ Could not read the group information."
NOT_ENOUGH_MSG = "❌ The group needs at least 2 members to form a couple!"

# \w covers accented letters and digits; underscore is allowed anyway
_DISALLOWED_RE = re.compile(r"[^\w\s\-.,!?]")


def sanitize_name(name: str) -> str:
    """Keep letters, digits, whitespace and ``- _ . , ! ?``; trim the rest."""
    return _DISALLOWED_RE.sub("", name).strip()


def is_only_number(name: str) -> bool:
    stripped = name.replace("+", "").replace(" ", "").replace("-", "")
    return stripped.isdigit()


class RouletteCommand(Command):
    name = "roulette"
    aliases = ("roletacasais", "roleta", "couples")
    group_only = True
    description = "Form a random couple from the group members"

    async def eligible_names(self, ctx: CommandContext) -> list[str]:
        """Sanitized display names of every member except the bot, skipping bare numbers."""
        participants = await ctx.transport.get_group_participants(ctx.chat_id)
        own_id = normalize_jid(ctx.transport.own_id)

        names = []
        for participant in participants:
            if participant.is_bot or normalize_jid(participant.id) == own_id:
                continue
            try:
                name = await ctx.transport.resolve_display_name(participant.id)
            except TransportError as e:
                logger.debug(f"No display name for {participant.id}: {e}")
                continue
            name = sanitize_name(name)
            if name and not is_only_number(name):
                names.append(name)
        return names

    async def run(self, ctx: CommandContext) -> None:
        try:
            names = await self.eligible_names(ctx)
        except TransportError as e:
            logger.error(f"Failed to read participants of {ctx.chat_id}: {e}")
            await ctx.reply(GROUP_INFO_ERROR_MSG)
            return

        if len(names) < 2:
            await ctx.reply(NOT_ENOUGH_MSG)
            return

        first, second = ctx.bot.rng.sample(names, 2)
        await ctx.reply(f"💕 *COUPLES ROULETTE*\n\n💑 *{first}* and *{second}*")
        logger.info(
            f"Roulette in {ctx.chat_id} over {len(names)} members: {first} and {second}"
        )
