"""Message bus module for decoupled transport-agent communication."""

from wabot.bus.events import (
    ContextInfo,
    DocumentMessage,
    ImageMessage,
    InboundMessage,
    MessageShape,
    TextMessage,
    VideoMessage,
)
from wabot.bus.queue import MessageBus

__all__ = [
    "ContextInfo",
    "DocumentMessage",
    "ImageMessage",
    "InboundMessage",
    "MessageBus",
    "MessageShape",
    "TextMessage",
    "VideoMessage",
]
