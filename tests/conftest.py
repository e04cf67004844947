"""Shared fakes and builders for the test suite."""

from __future__ import annotations

import asyncio
import random
from pathlib import Path

import pytest

from wabot.bus.events import ContextInfo, InboundMessage, MessageShape, TextMessage
from wabot.commands import BotContext, build_default_router
from wabot.config.schema import BotConfig, GroupRulesConfig
from wabot.group.governor import GroupGovernor
from wabot.group.mention import MentionDetector
from wabot.group.pause import PauseScheduler
from wabot.group.rules import RuleStore
from wabot.history.store import HistoryStore
from wabot.providers.base import AIBackend, ProviderError
from wabot.transport.base import Participant, Transport, TransportError, UploadedMedia
from wabot.utils.clock import Clock

BOT_ID = "999000@s.whatsapp.net"
GROUP = "120363000000000001@g.us"
ALICE = "5511111111111@s.whatsapp.net"
BOB = "5522222222222@s.whatsapp.net"
START = 1_700_000_000.0


class FakeClock(Clock):
    """Virtual time: sleeping advances the clock instead of waiting."""

    def __init__(self, start: float = START) -> None:
        self.t = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.t

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.t += seconds
        await asyncio.sleep(0)

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeTransport(Transport):
    """Records every outbound call."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []  # (kind, chat_id, text)
        self.mentions: list[str] = []
        self.presence: list[tuple[str, str]] = []
        self.uploads: list[tuple[int, str]] = []
        self.media: list[tuple[str, UploadedMedia, str, bool]] = []
        self.participants: list[Participant] = []
        self.names: dict[str, str] = {}
        self.fail_mentions = False
        self.fail_upload = False
        self.fail_participants = False
        self.fail_text = False

    @property
    def own_id(self) -> str:
        return BOT_ID

    @property
    def texts(self) -> list[str]:
        return [text for _, _, text in self.sent]

    @property
    def outbound_count(self) -> int:
        return len(self.sent) + len(self.media) + len(self.presence) + len(self.uploads)

    async def send_text(self, chat_id: str, text: str) -> None:
        if self.fail_text:
            raise TransportError("send failed")
        self.sent.append(("text", chat_id, text))

    async def send_text_with_mention(self, chat_id: str, text: str, mentioned_id: str) -> None:
        if self.fail_mentions:
            raise TransportError("mention send failed")
        self.sent.append(("mention", chat_id, text))
        self.mentions.append(mentioned_id)

    async def upload_media(self, data: bytes, kind: str) -> UploadedMedia:
        if self.fail_upload:
            raise TransportError("upload failed")
        self.uploads.append((len(data), kind))
        return UploadedMedia(url="https://mmg.example/x", direct_path="/x", length=len(data))

    async def send_media(
        self, chat_id: str, media: UploadedMedia, caption: str = "", as_gif_loop: bool = False
    ) -> None:
        self.media.append((chat_id, media, caption, as_gif_loop))

    async def send_presence(self, chat_id: str, state: str) -> None:
        self.presence.append((chat_id, state))

    async def get_group_participants(self, group_id: str) -> list[Participant]:
        if self.fail_participants:
            raise TransportError("group info unavailable")
        return list(self.participants)

    async def resolve_display_name(self, identifier: str) -> str:
        return self.names.get(identifier, "")


class FakeProvider(AIBackend):
    """Scripted backend: returns *responses* in order, repeating the last one."""

    def __init__(self, *responses: str, fail: bool = False, delay_ticks: int = 0) -> None:
        self.responses = list(responses) or ["ok"]
        self.fail = fail
        self.delay_ticks = delay_ticks
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        for _ in range(self.delay_ticks):
            await asyncio.sleep(0)
        if self.fail:
            raise ProviderError("backend down")
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def get_default_model(self) -> str:
        return "fake"


def make_msg(
    text: str = "",
    sender: str = ALICE,
    chat: str = GROUP,
    is_group: bool = True,
    mentions: list[str] | None = None,
    quoted_author: str | None = None,
    quoted: MessageShape | None = None,
    sender_name: str = "Alice",
    content: list[MessageShape] | None = None,
) -> InboundMessage:
    if content is None:
        context = None
        if mentions or quoted_author or quoted is not None:
            context = ContextInfo(
                mentioned_ids=list(mentions or []),
                quoted_author=quoted_author,
                quoted=quoted,
            )
        content = [TextMessage(text=text, context=context)]
    return InboundMessage(
        chat_id=chat,
        sender_id=sender,
        content=content,
        sender_name=sender_name,
        is_group=is_group,
        message_id="MSG1",
    )


def make_bot(
    tmp_path: Path,
    provider: AIBackend | None = None,
    clock: FakeClock | None = None,
    transport: FakeTransport | None = None,
    defaults: GroupRulesConfig | None = None,
) -> BotContext:
    clock = clock or FakeClock()
    transport = transport or FakeTransport()
    rules = RuleStore(defaults or GroupRulesConfig())
    return BotContext(
        transport=transport,
        history=HistoryStore(tmp_path / "history", clock),
        rules=rules,
        bot=BotConfig(
            media_dir=str(tmp_path / "gif"),
            prompt_file=str(tmp_path / "prompt.txt"),
        ),
        provider=provider,
        scheduler=PauseScheduler(rules, transport, clock),
        clock=clock,
        rng=random.Random(7),
    )


def make_governor(bot: BotContext) -> GroupGovernor:
    router = build_default_router(bot.bot.command_prefix)
    detector = MentionDetector(bot.transport.own_id, bot.bot.aliases)
    return GroupGovernor(bot, router, detector)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
