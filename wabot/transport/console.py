"""Console transport for trying the bot locally without a WhatsApp account.

Lines typed on stdin become inbound messages. A line starting with ``g:``
goes to a simulated group; anything else is a private chat. Outbound
messages are printed to stdout.
"""

from __future__ import annotations

import asyncio
import sys
import threading
import uuid
from typing import TextIO

from loguru import logger

from wabot.bus.events import InboundMessage, TextMessage
from wabot.bus.queue import MessageBus
from wabot.transport.base import Participant, Transport, UploadedMedia

CONSOLE_BOT_ID = "10000000000@s.whatsapp.net"
CONSOLE_USER_ID = "5500000000001@s.whatsapp.net"
CONSOLE_GROUP_ID = "120363000000000000@g.us"
GROUP_PREFIX = "g:"

_DEFAULT_MEMBERS = {
    CONSOLE_USER_ID: "You",
    "5500000000002@s.whatsapp.net": "Alice",
    "5500000000003@s.whatsapp.net": "Bruno",
}


class ConsoleTransport(Transport):
    """Reads stdin in a background thread and prints replies to stdout."""

    def __init__(
        self,
        bus: MessageBus,
        members: dict[str, str] | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.bus = bus
        self.members = dict(members or _DEFAULT_MEMBERS)
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def own_id(self) -> str:
        return CONSOLE_BOT_ID

    async def start(self) -> None:
        self._loop = asyncio.get_running_loop()

        def read_lines() -> None:
            for line in self._stdin:
                self._on_line_sync(line)
            logger.info("Console input closed")

        self._thread = threading.Thread(target=read_lines, daemon=True)
        self._thread.start()
        logger.info(f"Console transport started; prefix lines with '{GROUP_PREFIX}' for the group")

    def _on_line_sync(self, line: str) -> None:
        """Called from the reader thread; hands the line to the event loop."""
        if self._loop and self._loop.is_running():
            asyncio.run_coroutine_threadsafe(self._on_line(line), self._loop)

    async def _on_line(self, line: str) -> None:
        msg = self.parse_line(line)
        if msg is not None:
            await self.bus.publish_inbound(msg)

    def parse_line(self, line: str) -> InboundMessage | None:
        text = line.rstrip("\n")
        if not text.strip():
            return None
        is_group = text.startswith(GROUP_PREFIX)
        if is_group:
            text = text[len(GROUP_PREFIX):].lstrip()
        return InboundMessage(
            chat_id=CONSOLE_GROUP_ID if is_group else CONSOLE_USER_ID,
            sender_id=CONSOLE_USER_ID,
            content=[TextMessage(text=text)],
            sender_name=self.members.get(CONSOLE_USER_ID, ""),
            is_group=is_group,
            message_id=uuid.uuid4().hex[:16],
        )

    def _print(self, chat_id: str, text: str) -> None:
        where = "group" if chat_id.endswith("@g.us") else "private"
        print(f"[{where}] {text}\n", file=self._stdout, flush=True)

    async def send_text(self, chat_id: str, text: str) -> None:
        self._print(chat_id, text)

    async def send_text_with_mention(self, chat_id: str, text: str, mentioned_id: str) -> None:
        self._print(chat_id, text)

    async def upload_media(self, data: bytes, kind: str) -> UploadedMedia:
        return UploadedMedia(
            url=f"console://{uuid.uuid4().hex}",
            direct_path="",
            length=len(data),
            kind=kind,
        )

    async def send_media(
        self,
        chat_id: str,
        media: UploadedMedia,
        caption: str = "",
        as_gif_loop: bool = False,
    ) -> None:
        label = "gif" if as_gif_loop else media.kind
        self._print(chat_id, f"<{label} {media.length} bytes> {caption}".rstrip())

    async def send_presence(self, chat_id: str, state: str) -> None:
        logger.debug(f"Presence {state} in {chat_id}")

    async def get_group_participants(self, group_id: str) -> list[Participant]:
        participants = [Participant(id=jid) for jid in self.members]
        participants.append(Participant(id=CONSOLE_BOT_ID, is_bot=True))
        return participants

    async def resolve_display_name(self, identifier: str) -> str:
        return self.members.get(identifier, "")
