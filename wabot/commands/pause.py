"""The self-destruct command: pause the bot in a group for a while."""

from __future__ import annotations

from loguru import logger

from wabot.commands.base import Command, CommandContext

DEFAULT_MINUTES = 5
MIN_MINUTES = 1
MAX_MINUTES = 60

IN_PROGRESS_MSG = "⚠️ Self-destruct is already in progress!"


def parse_minutes(args: list[str]) -> int:
    """First argument as minutes, defaulting to 5 and clamped to 1..60."""
    minutes = DEFAULT_MINUTES
    if args:
        try:
            parsed = int(args[0])
        except ValueError:
            parsed = 0
        if parsed > 0:
            minutes = parsed
    return max(MIN_MINUTES, min(MAX_MINUTES, minutes))


class SelfDestructCommand(Command):
    name = "selfdestruct"
    aliases = ("autodestruicao", "autodestruição", "pause")
    group_only = True
    description = "Pause the bot in this group for N minutes (default 5, max 60)"

    async def run(self, ctx: CommandContext) -> None:
        scheduler = ctx.bot.scheduler
        if scheduler is None:
            logger.warning("Self-destruct requested but no pause scheduler is wired")
            return

        group_id = ctx.chat_id
        minutes = parse_minutes(ctx.args)

        now = ctx.bot.clock.now()
        rules = ctx.bot.rules.get(group_id)
        if rules.is_paused_at(now):
            remaining = max(1, int((rules.paused_until - now) // 60))
            await ctx.reply(f"⚠️ Bot is already paused! Back in {remaining} minute(s).")
            return
        if not await scheduler.start(ctx.chat_id, group_id, minutes):
            await ctx.reply(IN_PROGRESS_MSG)
