"""Commands whose reply is written by the AI backend."""

from __future__ import annotations

from loguru import logger

from wabot import prompts
from wabot.commands.base import Command, CommandContext, resolve_target
from wabot.providers.base import ProviderError
from wabot.transport.base import PRESENCE_COMPOSING, PRESENCE_PAUSED
from wabot.transport.fallback import set_presence
from wabot.utils.helpers import truncate

NOT_CONFIGURED_MSG = "❌ AI backend is not configured. Set an API key to use this command."

JOKE_HISTORY_LIMIT = 50
SHORT_LIMIT = 500
STORY_LIMIT = 3000
EXPLAIN_LIMIT = 1000
STORY_TRUNCATED = "\n\n... (story truncated)"
DEFAULT_GENRE = "adventure"


def failure_message(thing: str) -> str:
    return f"❌ Failed to generate {thing}. Please try again later."


class GenerativeCommand(Command):
    """Base for commands that call the AI backend once per invocation."""

    thing: str = "response"

    async def generate(self, ctx: CommandContext, prompt: str) -> str | None:
        """
        Run *prompt* through the backend with a typing indicator.

        Replies with the fixed error text and returns None when the backend
        is missing or fails.
        """
        provider = ctx.bot.provider
        if provider is None:
            await ctx.reply(NOT_CONFIGURED_MSG)
            return None

        await set_presence(ctx.transport, ctx.chat_id, PRESENCE_COMPOSING)
        try:
            return await provider.generate(prompt)
        except ProviderError as e:
            logger.error(f"Failed to generate {self.thing} for {ctx.chat_id}: {e}")
            await ctx.reply(failure_message(self.thing))
            return None
        finally:
            await set_presence(ctx.transport, ctx.chat_id, PRESENCE_PAUSED)


class JokeCommand(GenerativeCommand):
    name = "joke"
    aliases = ("piada",)
    description = "Tell an AI-generated joke"
    thing = "joke"

    async def run(self, ctx: CommandContext) -> None:
        if ctx.bot.provider is None:
            await ctx.reply(NOT_CONFIGURED_MSG)
            return

        try:
            jokes = ctx.bot.history.load_recent_jokes(JOKE_HISTORY_LIMIT)
        except OSError as e:
            logger.warning(f"Failed to load joke history, continuing without it: {e}")
            jokes = []
        logger.debug(f"Building joke prompt with {len(jokes)} previous jokes")
        joke = await self.generate(ctx, prompts.build_joke_prompt(jokes))
        if joke is None:
            return

        joke = truncate(joke.strip(), SHORT_LIMIT)
        try:
            ctx.bot.history.append_joke(joke)
        except OSError as e:
            logger.warning(f"Failed to save joke: {e}")
        await ctx.reply(f"😄 *Joke:*\n\n{joke}")


class PickupCommand(GenerativeCommand):
    name = "pickup"
    aliases = ("cantada",)
    description = "Write a pickup line for someone"
    thing = "pickup line"

    async def run(self, ctx: CommandContext) -> None:
        if ctx.bot.provider is None:
            await ctx.reply(NOT_CONFIGURED_MSG)
            return
        if not ctx.args:
            await ctx.reply(
                f"❌ Use: {ctx.prefix}pickup @user\nExample: {ctx.prefix}pickup @johndoe"
            )
            return

        target_id, target_name = resolve_target(ctx.args[0], ctx.msg)
        line = await self.generate(ctx, prompts.PICKUP_PROMPT.format(target=target_name))
        if line is None:
            return

        line = truncate(line.strip(), SHORT_LIMIT)
        await ctx.reply_mention(f"💕 *Pickup line for @{target_name}:*\n\n{line}", target_id)


class StoryCommand(GenerativeCommand):
    name = "story"
    aliases = ("historia", "história")
    description = "Tell a story of the given genre"
    thing = "story"

    async def run(self, ctx: CommandContext) -> None:
        if ctx.bot.provider is None:
            await ctx.reply(NOT_CONFIGURED_MSG)
            return

        genre = " ".join(ctx.args).lower() or DEFAULT_GENRE
        story = await self.generate(ctx, prompts.STORY_PROMPT.format(genre=genre))
        if story is None:
            return

        story = truncate(story.strip(), STORY_LIMIT, STORY_TRUNCATED)
        await ctx.reply(f"📖 *{genre.capitalize()} story:*\n\n{story}")


class ExplainCommand(GenerativeCommand):
    name = "explain"
    aliases = ("explique",)
    description = "Explain the quoted message"
    thing = "explanation"

    def usage(self, prefix: str) -> str:
        return (
            f"❌ Quote a message before using {prefix}explain.\n\n"
            "How to use:\n"
            "1. Reply to the message you want explained\n"
            f"2. Type: {prefix}explain"
        )

    async def run(self, ctx: CommandContext) -> None:
        if ctx.bot.provider is None:
            await ctx.reply(NOT_CONFIGURED_MSG)
            return

        quoted = ctx.msg.quoted_text()
        if quoted is None:
            await ctx.reply(self.usage(ctx.prefix))
            return

        explanation = await self.generate(ctx, prompts.EXPLAIN_PROMPT.format(text=quoted))
        if explanation is None:
            return

        explanation = truncate(explanation.strip(), EXPLAIN_LIMIT)
        await ctx.reply(f"💡 *Explanation:*\n\n{explanation}")
