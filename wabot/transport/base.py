"""Base transport interface.

The transport is the only component that talks to WhatsApp. The agent,
governor and commands only see this narrow async contract; pairing, the
wire protocol and media encryption stay on the other side of it.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass

# Chat presence states accepted by send_presence()
PRESENCE_COMPOSING = "composing"
PRESENCE_PAUSED = "paused"

MEDIA_VIDEO = "video"
MEDIA_IMAGE = "image"


class TransportError(Exception):
    """Raised when a send, upload or lookup through the transport fails."""


@dataclass
class UploadedMedia:
    """Reference to media uploaded to the WhatsApp servers."""

    url: str
    direct_path: str
    length: int
    kind: str = MEDIA_VIDEO
    media_key: bytes = b""
    file_sha256: bytes = b""
    file_enc_sha256: bytes = b""
    mimetype: str = "video/mp4"


@dataclass
class Participant:
    """One member of a group."""

    id: str
    is_bot: bool = False


class Transport(abc.ABC):
    """
    Abstract WhatsApp transport.

    Every method raises :class:`TransportError` on failure.
    """

    @property
    @abc.abstractmethod
    def own_id(self) -> str:
        """The bot's own account identifier."""
        ...

    @abc.abstractmethod
    async def send_text(self, chat_id: str, text: str) -> None:
        ...

    @abc.abstractmethod
    async def send_text_with_mention(
        self, chat_id: str, text: str, mentioned_id: str
    ) -> None:
        """Send text carrying a clickable mention of *mentioned_id*."""
        ...

    @abc.abstractmethod
    async def upload_media(self, data: bytes, kind: str) -> UploadedMedia:
        ...

    @abc.abstractmethod
    async def send_media(
        self,
        chat_id: str,
        media: UploadedMedia,
        caption: str = "",
        as_gif_loop: bool = False,
    ) -> None:
        ...

    @abc.abstractmethod
    async def send_presence(self, chat_id: str, state: str) -> None:
        """Send a chat presence hint (``composing`` / ``paused``)."""
        ...

    @abc.abstractmethod
    async def get_group_participants(self, group_id: str) -> list[Participant]:
        ...

    @abc.abstractmethod
    async def resolve_display_name(self, identifier: str) -> str:
        """Best known display name for *identifier*, or ``""`` if unknown."""
        ...
