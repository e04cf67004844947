"""Conversation and joke history storage."""

from wabot.history.store import ConversationMessage, HistoryStore, JokeRecord

__all__ = ["ConversationMessage", "HistoryStore", "JokeRecord"]
