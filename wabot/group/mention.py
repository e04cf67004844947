"""Detect whether a group message addresses the bot."""

from wabot.bus.events import InboundMessage
from wabot.utils.helpers import normalize_jid

# Bare alias matches only count in short messages
NAME_MATCH_MAX_LEN = 100


class MentionDetector:
    """
    Decide if a message mentions or replies to the bot.

    Checks every message shape (text, image caption, video caption,
    document) because each one carries its own context block.
    """

    def __init__(self, bot_id: str, aliases: list[str]) -> None:
        self.bot_id = normalize_jid(bot_id)
        self.aliases = [a.lower() for a in aliases if a]

    def is_mentioned(self, msg: InboundMessage, plain_text: str) -> bool:
        """
        True if the bot is in any mention list, or named in the text.

        The name fallback accepts ``@alias`` anywhere, and a bare alias only
        when the text is shorter than ``NAME_MATCH_MAX_LEN`` characters.
        """
        if self.bot_id:
            for mentioned in msg.mentioned_ids():
                if normalize_jid(mentioned) == self.bot_id:
                    return True

        lowered = plain_text.lower()
        short = len(plain_text) < NAME_MATCH_MAX_LEN
        for alias in self.aliases:
            if f"@{alias}" in lowered:
                return True
            if short and alias in lowered:
                return True
        return False

    def is_quoting_bot(self, msg: InboundMessage) -> bool:
        """True if any shape quotes a message written by the bot."""
        if not self.bot_id:
            return False
        return any(normalize_jid(author) == self.bot_id for author in msg.quoted_authors())
