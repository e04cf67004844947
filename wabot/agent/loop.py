"""Agent loop: pulls inbound messages off the bus and routes them."""

import asyncio

from loguru import logger

from wabot import prompts
from wabot.bus.events import InboundMessage
from wabot.bus.queue import MessageBus
from wabot.commands.base import BotContext, CommandRouter
from wabot.config.schema import HistoryConfig
from wabot.group.governor import GroupGovernor
from wabot.history.store import ROLE_ASSISTANT, ROLE_USER, ConversationMessage
from wabot.providers.base import ProviderError
from wabot.transport.base import PRESENCE_COMPOSING, PRESENCE_PAUSED
from wabot.transport.fallback import send_text, set_presence
from wabot.utils.helpers import normalize_jid, truncate

PRIVATE_REPLY_LIMIT = 4000
PRIVATE_TRUNCATED = "\n\n... (response truncated)"
PRIVATE_NOT_CONFIGURED_MSG = (
    "⚠️ AI backend is not configured. Set an API key to use this feature."
)
PRIVATE_FAILURE_MSG = "❌ Failed to process your request. Please try again later."


class AgentLoop:
    """
    The core processing engine.

    It:
    1. Receives messages from the bus
    2. Drops the bot's own messages and empty ones
    3. Hands group messages to the :class:`GroupGovernor`
    4. Runs private messages as a command or a private AI turn

    Each message is handled in its own task so a slow AI call in one chat
    never holds up another.
    """

    def __init__(
        self,
        bus: MessageBus,
        bot: BotContext,
        router: CommandRouter,
        governor: GroupGovernor,
        history_config: HistoryConfig | None = None,
    ):
        self.bus = bus
        self.bot = bot
        self.router = router
        self.governor = governor
        self.history_config = history_config or HistoryConfig()
        self.system_prompt = prompts.load_private_prompt(bot.bot.prompt_file, bot.bot.name)

        self._running = False
        self._tasks: set[asyncio.Task[None]] = set()
        self._sweep_task: asyncio.Task[None] | None = None

    async def run(self) -> None:
        """Run the agent loop until :meth:`stop`, then drain running handlers."""
        self._running = True
        logger.info("Agent loop started")
        if self.history_config.retention_days > 0:
            self._sweep_task = asyncio.create_task(self._sweep_history(), name="history-sweep")

        try:
            while self._running:
                try:
                    msg = await asyncio.wait_for(self.bus.consume_inbound(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue
                self.dispatch(msg)
        finally:
            if self._sweep_task is not None:
                self._sweep_task.cancel()
                await asyncio.gather(self._sweep_task, return_exceptions=True)
                self._sweep_task = None
            if self._tasks:
                logger.info(f"Waiting for {len(self._tasks)} message handler(s) to finish")
                await asyncio.gather(*self._tasks, return_exceptions=True)
            logger.info("Agent loop stopped")

    def stop(self) -> None:
        """Stop the agent loop."""
        self._running = False
        logger.info("Agent loop stopping")

    def dispatch(self, msg: InboundMessage) -> asyncio.Task[None]:
        """Handle *msg* in a new tracked task."""
        task = asyncio.create_task(self._safe_process(msg))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _safe_process(self, msg: InboundMessage) -> None:
        try:
            await self.process_message(msg)
        except Exception as e:
            logger.exception(f"Error processing message from {msg.chat_id}:{msg.sender_id}: {e}")

    async def process_message(self, msg: InboundMessage) -> None:
        own_id = normalize_jid(self.bot.transport.own_id)
        if own_id and normalize_jid(msg.sender_id) == own_id:
            return

        text = msg.text.strip()
        if not text:
            logger.debug(f"Skipping message without text from {msg.sender_id}")
            return

        preview = text[:80] + "..." if len(text) > 80 else text
        logger.info(
            f"Processing {'group' if msg.is_group else 'private'} message "
            f"from {msg.chat_id}:{msg.sender_id}: {preview}"
        )

        if msg.is_group:
            await self.governor.handle(msg)
            return

        parsed = self.router.parse(text)
        if parsed is not None and self.router.is_registered(parsed[0]):
            verb, args = parsed
            await self.router.dispatch(verb, args, msg, self.bot)
            return

        await self._process_private(msg, text)

    async def _process_private(self, msg: InboundMessage, text: str) -> None:
        transport = self.bot.transport
        provider = self.bot.provider
        if provider is None:
            await send_text(transport, msg.chat_id, PRIVATE_NOT_CONFIGURED_MSG)
            return

        key = msg.session_key
        history = self.bot.history
        await set_presence(transport, msg.chat_id, PRESENCE_COMPOSING)
        try:
            recent: list[ConversationMessage] = []
            try:
                recent = history.load_recent(key, self.bot.bot.private_history_messages)
            except OSError as e:
                logger.error(f"Failed to load history for {key}: {e}")
            self._save(key, ROLE_USER, text)

            prompt = prompts.build_private_prompt(
                self.system_prompt, recent, text, self.bot.bot.name
            )
            try:
                reply = await provider.generate(prompt)
            except ProviderError as e:
                logger.error(f"Failed to generate private reply for {key}: {e}")
                await send_text(transport, msg.chat_id, PRIVATE_FAILURE_MSG)
                return

            reply = truncate(reply.strip(), PRIVATE_REPLY_LIMIT, PRIVATE_TRUNCATED)
            self._save(key, ROLE_ASSISTANT, reply)
            await send_text(transport, msg.chat_id, f"🤖 {reply}")
        finally:
            await set_presence(transport, msg.chat_id, PRESENCE_PAUSED)

    def _save(self, key: str, role: str, text: str) -> None:
        try:
            self.bot.history.append_message(key, role, text)
        except OSError as e:
            logger.error(f"Failed to save {role} message for {key}: {e}")

    async def _sweep_history(self) -> None:
        interval = self.history_config.sweep_interval_hours * 3600
        days = self.history_config.retention_days
        while True:
            try:
                await asyncio.get_running_loop().run_in_executor(
                    None, self.bot.history.clean_old, days
                )
            except OSError as e:
                logger.error(f"History retention sweep failed: {e}")
            await self.bot.clock.sleep(interval)
