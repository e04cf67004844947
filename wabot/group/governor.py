"""Group message governance: pause, commands, admission policy and AI replies."""

from __future__ import annotations

from loguru import logger

from wabot import prompts
from wabot.bus.events import InboundMessage
from wabot.commands.base import BotContext, CommandRouter
from wabot.group.mention import MentionDetector
from wabot.group.rules import GroupRules, RuleStore
from wabot.history.store import ROLE_ASSISTANT, ROLE_USER, ConversationMessage
from wabot.providers.base import ProviderError
from wabot.transport.base import PRESENCE_COMPOSING, PRESENCE_PAUSED
from wabot.transport.fallback import send_text, set_presence
from wabot.utils.helpers import jid_user, truncate

GROUP_REPLY_LIMIT = 500
GROUP_FAILURE_MSG = "❌ Failed to process the request in the group."


class GroupGovernor:
    """
    Decides what happens to every inbound group message.

    A paused group drops everything, commands included. Commands are
    dispatched without further checks. Free text must pass the group's
    policy chain before it reaches the AI backend. The chain runs under the
    group lock and reserves the reply slot (``reply_in_flight``) so two
    concurrent messages cannot both slip through the cooldown. The lock is
    released before the backend call.
    """

    def __init__(
        self,
        bot: BotContext,
        router: CommandRouter,
        detector: MentionDetector,
    ) -> None:
        self.bot = bot
        self.router = router
        self.detector = detector

    @property
    def store(self) -> RuleStore:
        return self.bot.rules

    async def handle(self, msg: InboundMessage) -> None:
        group_id = msg.chat_id

        if await self._is_paused(group_id):
            logger.debug(f"Group {group_id} is paused, dropping message from {msg.sender_id}")
            return

        text = msg.text
        if text.lstrip().startswith(self.router.prefix):
            # Marker text is command territory even when no verb follows it
            parsed = self.router.parse(text)
            if parsed is None:
                logger.debug(f"Empty command in {group_id} from {msg.sender_id}, ignoring")
                return
            verb, args = parsed
            await self.router.dispatch(verb, args, msg, self.bot)
            return

        if not await self._admit(msg, text):
            return

        await self._reply_with_ai(msg, text)

    # -- policy ------------------------------------------------------------

    async def _is_paused(self, group_id: str) -> bool:
        async with self.store.locked(group_id) as rules:
            if not rules.paused:
                return False
            if self.bot.clock.now() >= rules.paused_until:
                rules.unpause()
                logger.info(f"Pause expired for group {group_id}, bot active again")
                return False
            return True

    async def _admit(self, msg: InboundMessage, text: str) -> bool:
        """Run the policy chain; on success the reply slot is reserved."""
        group_id = msg.chat_id
        async with self.store.locked(group_id) as rules:
            reason = self._reject_reason(rules, msg, text)
            if reason:
                logger.debug(f"Dropping message in {group_id} from {msg.sender_id}: {reason}")
                return False
            rules.reply_in_flight = True
            return True

    def _reject_reason(self, rules: GroupRules, msg: InboundMessage, text: str) -> str | None:
        if not rules.is_user_allowed(msg.sender_id):
            return "sender not allowed"
        if rules.reply_in_flight:
            return "reply already in flight"
        if not rules.cooldown_elapsed(self.bot.clock.now()):
            return "cooldown"
        if not rules.ai_enabled:
            return "AI disabled"
        if self.detector.is_mentioned(msg, text) or self.detector.is_quoting_bot(msg):
            return None
        if rules.require_mention:
            return "bot not mentioned"
        return None

    async def _release(self, group_id: str, replied: bool) -> None:
        async with self.store.locked(group_id) as rules:
            if replied:
                rules.last_response_at = self.bot.clock.now()
            rules.reply_in_flight = False

    # -- AI turn -----------------------------------------------------------

    async def _reply_with_ai(self, msg: InboundMessage, text: str) -> None:
        group_id = msg.chat_id
        provider = self.bot.provider
        if provider is None:
            logger.warning(f"No AI backend configured, ignoring group message in {group_id}")
            await self._release(group_id, replied=False)
            return

        rules = self.store.get(group_id)
        history = self.bot.history
        sender = jid_user(msg.sender_id)

        released = False
        await set_presence(self.bot.transport, group_id, PRESENCE_COMPOSING)
        try:
            recent: list[ConversationMessage] = []
            try:
                recent = history.load_recent(group_id, rules.max_history_messages)
            except OSError as e:
                logger.error(f"Failed to load history for {group_id}: {e}")
            self._save(group_id, ROLE_USER, f"{sender}: {text}")

            prompt = prompts.build_group_prompt(
                rules.custom_prompt, recent, text, sender, self.bot.bot.name
            )
            try:
                reply = await provider.generate(prompt)
            except ProviderError as e:
                logger.error(f"Failed to generate group reply for {group_id}: {e}")
                await self._release(group_id, replied=False)
                released = True
                await send_text(self.bot.transport, group_id, GROUP_FAILURE_MSG)
                return

            reply = truncate(reply.strip(), GROUP_REPLY_LIMIT)
            self._save(group_id, ROLE_ASSISTANT, reply)
            await self._release(group_id, replied=True)
            released = True

            await send_text(self.bot.transport, group_id, f"🤖 {reply}")
            logger.info(f"Replied in group {group_id} to {sender}")
        finally:
            if not released:
                await self._release(group_id, replied=False)
            await set_presence(self.bot.transport, group_id, PRESENCE_PAUSED)

    def _save(self, key: str, role: str, text: str) -> None:
        try:
            self.bot.history.append_message(key, role, text)
        except OSError as e:
            logger.error(f"Failed to save {role} message for {key}: {e}")

    # -- admin setters -----------------------------------------------------

    async def set_rules(self, group_id: str, rules: GroupRules) -> None:
        async with self.store.locked(group_id):
            self.store.set(group_id, rules)

    async def enable_ai(self, group_id: str) -> None:
        async with self.store.locked(group_id) as rules:
            rules.ai_enabled = True

    async def disable_ai(self, group_id: str) -> None:
        async with self.store.locked(group_id) as rules:
            rules.ai_enabled = False

    async def add_allowed_user(self, group_id: str, user_id: str) -> None:
        async with self.store.locked(group_id) as rules:
            rules.allowed_users.add(user_id)

    async def remove_allowed_user(self, group_id: str, user_id: str) -> None:
        async with self.store.locked(group_id) as rules:
            rules.allowed_users.discard(user_id)

    async def block_user(self, group_id: str, user_id: str) -> None:
        async with self.store.locked(group_id) as rules:
            rules.blocked_users.add(user_id)

    async def unblock_user(self, group_id: str, user_id: str) -> None:
        async with self.store.locked(group_id) as rules:
            rules.blocked_users.discard(user_id)

    async def set_custom_prompt(self, group_id: str, prompt: str | None) -> None:
        async with self.store.locked(group_id) as rules:
            rules.custom_prompt = prompt or None

    async def pause(self, group_id: str, seconds: float) -> None:
        """Pause the group immediately, without the countdown."""
        async with self.store.locked(group_id) as rules:
            rules.pause(self.bot.clock.now() + seconds)
        logger.info(f"Group {group_id} paused for {seconds:.0f}s")

    async def unpause(self, group_id: str) -> None:
        """Resume the group now and cancel any running pause sequence."""
        if self.bot.scheduler is not None:
            self.bot.scheduler.cancel(group_id)
        async with self.store.locked(group_id) as rules:
            rules.unpause()
        logger.info(f"Group {group_id} unpaused manually")
