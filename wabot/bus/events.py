"""Event types carried on the message bus.

An inbound WhatsApp message can arrive in several shapes (plain text, image
with caption, video with caption, document). Each shape carries its own
optional :class:`ContextInfo` block with mentions and quote information, so
:class:`InboundMessage` keeps a list of shapes and exposes uniform accessors
over all of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

# Placeholders used when a quoted message has no text of its own
QUOTED_IMAGE = "[image message]"
QUOTED_VIDEO = "[video message]"
QUOTED_DOCUMENT = "[document message]"
QUOTED_EMPTY = "[message without text]"


@dataclass
class ContextInfo:
    """Mentions and reply context attached to one message shape."""

    mentioned_ids: list[str] = field(default_factory=list)
    quoted_author: str | None = None  # who wrote the quoted message
    quoted: "MessageShape | None" = None  # the quoted message itself


@dataclass
class TextMessage:
    text: str
    context: ContextInfo | None = None
    kind: str = field(default="text", init=False)

    def quoted_text(self) -> str:
        return self.text


@dataclass
class ImageMessage:
    caption: str | None = None
    context: ContextInfo | None = None
    kind: str = field(default="image", init=False)

    def quoted_text(self) -> str:
        return self.caption if self.caption else QUOTED_IMAGE


@dataclass
class VideoMessage:
    caption: str | None = None
    context: ContextInfo | None = None
    gif_playback: bool = False
    kind: str = field(default="video", init=False)

    def quoted_text(self) -> str:
        return self.caption if self.caption else QUOTED_VIDEO


@dataclass
class DocumentMessage:
    caption: str | None = None
    title: str | None = None
    context: ContextInfo | None = None
    kind: str = field(default="document", init=False)

    def quoted_text(self) -> str:
        if self.caption:
            return self.caption
        if self.title:
            return f"[Document: {self.title}]"
        return QUOTED_DOCUMENT


MessageShape = Union[TextMessage, ImageMessage, VideoMessage, DocumentMessage]


@dataclass
class InboundMessage:
    """Message received from the WhatsApp transport."""

    chat_id: str  # group JID or the private chat JID
    sender_id: str
    content: list[MessageShape] = field(default_factory=list)
    sender_name: str = ""
    is_group: bool = False
    message_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def text(self) -> str:
        """Plain text of the message: the text shape first, then any caption."""
        for shape in self.content:
            if isinstance(shape, TextMessage) and shape.text:
                return shape.text
        for shape in self.content:
            caption = getattr(shape, "caption", None)
            if caption:
                return caption
        return ""

    def contexts(self) -> list[ContextInfo]:
        """Context blocks of every shape that carries one."""
        return [s.context for s in self.content if s.context is not None]

    def mentioned_ids(self) -> list[str]:
        """All explicitly mentioned identifiers, in shape order."""
        ids: list[str] = []
        for ctx in self.contexts():
            ids.extend(ctx.mentioned_ids)
        return ids

    def quoted_authors(self) -> list[str]:
        """Authors of quoted messages, one per shape that quotes something."""
        return [c.quoted_author for c in self.contexts() if c.quoted_author]

    def quoted_text(self) -> str | None:
        """Text of the first quoted message, or ``None`` if nothing is quoted."""
        for ctx in self.contexts():
            if ctx.quoted is not None:
                return ctx.quoted.quoted_text() or QUOTED_EMPTY
        return None

    @property
    def session_key(self) -> str:
        """Conversation key for history: the group for groups, else the sender."""
        return self.chat_id if self.is_group else self.sender_id
