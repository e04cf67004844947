"""WhatsApp transport interface and local implementations."""

from wabot.transport.base import (
    MEDIA_IMAGE,
    MEDIA_VIDEO,
    PRESENCE_COMPOSING,
    PRESENCE_PAUSED,
    Participant,
    Transport,
    TransportError,
    UploadedMedia,
)

__all__ = [
    "MEDIA_IMAGE",
    "MEDIA_VIDEO",
    "PRESENCE_COMPOSING",
    "PRESENCE_PAUSED",
    "Participant",
    "Transport",
    "TransportError",
    "UploadedMedia",
]
