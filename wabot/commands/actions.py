"""Action commands: send a looping GIF of the sender doing something to a target."""

from __future__ import annotations

import asyncio
import random
from pathlib import Path

from loguru import logger

from wabot.commands.base import Command, CommandContext, resolve_target
from wabot.transport.base import MEDIA_VIDEO, TransportError
from wabot.utils.helpers import jid_user

MEDIA_UNAVAILABLE = "[media unavailable]"
MEDIA_SUFFIX = ".mp4"


def find_random_media(media_dir: Path, folder: str, rng: random.Random) -> Path:
    """
    Pick a random ``.mp4`` file from ``media_dir/folder``.

    Raises:
        FileNotFoundError: If the folder is missing or holds no clips.
    """
    directory = media_dir / folder
    if not directory.is_dir():
        raise FileNotFoundError(f"Media folder not found: {directory}")
    clips = sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == MEDIA_SUFFIX
    )
    if not clips:
        raise FileNotFoundError(f"No {MEDIA_SUFFIX} files in {directory}")
    return rng.choice(clips)


class ActionCommand(Command):
    """``!verb @user``: caption plus a random clip from the action's folder."""

    def __init__(
        self,
        name: str,
        aliases: tuple[str, ...],
        folder: str,
        phrase: str,
        emoji: str,
        description: str,
    ) -> None:
        self.name = name
        self.aliases = aliases
        self.folder = folder
        self.phrase = phrase
        self.emoji = emoji
        self.description = description

    def usage(self, prefix: str) -> str:
        return f"❌ Use: {prefix}{self.name} @user\nExample: {prefix}{self.name} @johndoe"

    def build_caption(self, sender_name: str, target_name: str, has_id: bool) -> str:
        target = f"@{target_name}" if has_id else target_name
        return f"{self.emoji} *{sender_name}* {self.phrase} *{target}*!"

    async def run(self, ctx: CommandContext) -> None:
        if not ctx.args:
            await ctx.reply(self.usage(ctx.prefix))
            return

        target_id, target_name = resolve_target(ctx.args[0], ctx.msg)
        sender_name = ctx.msg.sender_name or jid_user(ctx.msg.sender_id)
        caption = self.build_caption(sender_name, target_name, target_id is not None)

        media_dir = Path(ctx.bot.bot.media_dir)
        try:
            path = find_random_media(media_dir, self.folder, ctx.bot.rng)
            loop = asyncio.get_running_loop()
            data = await loop.run_in_executor(None, path.read_bytes)
            logger.debug(f"Uploading {path.name} ({len(data)} bytes) for {self.name}")
            media = await ctx.transport.upload_media(data, MEDIA_VIDEO)
            await ctx.transport.send_media(ctx.chat_id, media, caption, as_gif_loop=True)
        except (OSError, TransportError) as e:
            logger.warning(f"{self.name}: media send failed ({e}), falling back to text")
            await ctx.reply_mention(f"{caption}\n\n{MEDIA_UNAVAILABLE}", target_id)
            return

        logger.info(f"{self.name}: sent {path.name} to {ctx.chat_id}")


def default_action_commands() -> list[ActionCommand]:
    return [
        ActionCommand("slap", ("tapa",), "slap", "slapped", "🤚", "Slap someone with a GIF"),
        ActionCommand("kick", ("chute",), "kick", "kicked", "🦵", "Kick someone with a GIF"),
        ActionCommand(
            "flyingkick", ("voadora",), "flying", "flying-kicked", "💥",
            "Flying kick someone with a GIF",
        ),
        ActionCommand("kiss", ("beijo",), "kiss", "kissed", "💋", "Kiss someone with a GIF"),
        ActionCommand("hug", ("abraco", "abraço"), "hug", "hugged", "🤗", "Hug someone with a GIF"),
    ]
