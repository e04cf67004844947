"""Static help text."""

from wabot.commands.base import Command, CommandContext

HELP_TEXT = """\
*🤖 Available commands:*

• *{p}slap @user* - Slap someone with a GIF
• *{p}kick @user* - Kick someone with a GIF
• *{p}flyingkick @user* - Flying kick someone with a GIF
• *{p}kiss @user* - Kiss someone with a GIF
• *{p}hug @user* - Hug someone with a GIF
• *{p}joke* - Tell an AI-generated joke
• *{p}pickup @user* - Write a pickup line for someone
• *{p}story [genre]* - Tell a story (e.g. {p}story horror, {p}story comedy)
• *{p}explain* - Explain a quoted message (reply to it and type {p}explain)
• *{p}selfdestruct [minutes]* - Pause the bot with a countdown (default 5 min, max 60)
• *{p}roulette* - Form a random couple from the group members
• *{p}help* - Show this list

_Examples:_
• {p}slap @friend
• {p}hug @friend
• {p}joke
• {p}pickup @friend
• {p}story horror
• Reply to a message and type: {p}explain
• {p}selfdestruct 10 (pause for 10 minutes)
• {p}roulette
• {p}help"""


class HelpCommand(Command):
    name = "help"
    aliases = ("ajuda", "menu")
    description = "Show the command list"

    async def run(self, ctx: CommandContext) -> None:
        await ctx.reply(HELP_TEXT.format(p=ctx.prefix))
