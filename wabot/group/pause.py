"""Timed self-pause sequence: countdown, pause window, auto-resume."""

from __future__ import annotations

import asyncio

from loguru import logger

from wabot.group.rules import RuleStore
from wabot.transport.base import Transport
from wabot.transport.fallback import send_text
from wabot.utils.clock import Clock, SystemClock

COUNTDOWN_TICKS = 5

_ACTIVATED_MSG = (
    "⚠️ *SELF-DESTRUCT ACTIVATED*\n\n"
    "Bot will be paused for *{minutes} minute(s)*.\n\n"
    "Starting {ticks}-second countdown..."
)
_TICK_MSG = "💥 {n}"
_PAUSED_MSG = "💥 *Bot paused!*\n\nBot will stay inactive for a while."
_RESUMED_MSG = (
    "✅ *Bot reactivated!*\n\n"
    "Self-destruct complete. Bot is working normally again."
)


class PauseScheduler:
    """
    Runs one detached pause sequence per group.

    The countdown is cosmetic: the group only starts dropping messages once
    the last tick has been sent. On wake-up the rules are re-read, and the
    group is resumed (and the resume announced) only if it is still paused
    and the expiry has passed. :meth:`cancel` stops a running sequence, so a
    manual unpause never gets a late "reactivated" message.
    """

    def __init__(
        self,
        store: RuleStore,
        transport: Transport,
        clock: Clock | None = None,
        countdown_ticks: int = COUNTDOWN_TICKS,
    ) -> None:
        self.store = store
        self.transport = transport
        self.clock = clock or SystemClock()
        self.countdown_ticks = countdown_ticks
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def is_running(self, group_id: str) -> bool:
        task = self._tasks.get(group_id)
        return task is not None and not task.done()

    async def start(self, chat_id: str, group_id: str, minutes: int) -> bool:
        """
        Launch the sequence without waiting for it.

        Returns False when the group already has a sequence running. The task
        is registered before anything is awaited, so two concurrent callers
        can never both start one.
        """
        if self.is_running(group_id):
            return False
        task = asyncio.create_task(
            self._run(chat_id, group_id, minutes), name=f"pause:{group_id}"
        )
        self._tasks[group_id] = task
        task.add_done_callback(lambda t, gid=group_id: self._forget(gid, t))
        logger.info(f"Self-pause sequence started for {group_id} ({minutes} min)")
        return True

    def cancel(self, group_id: str) -> bool:
        """Cancel the group's running sequence. Returns True if one was running."""
        task = self._tasks.pop(group_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.info(f"Self-pause sequence cancelled for {group_id}")
        return True

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, group_id: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(group_id) is task:
            del self._tasks[group_id]
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Self-pause sequence for {group_id} failed: {task.exception()}")

    async def _run(self, chat_id: str, group_id: str, minutes: int) -> None:
        await send_text(
            self.transport,
            chat_id,
            _ACTIVATED_MSG.format(minutes=minutes, ticks=self.countdown_ticks),
        )
        for n in range(self.countdown_ticks, 0, -1):
            await self.clock.sleep(1)
            await send_text(self.transport, chat_id, _TICK_MSG.format(n=n))

        duration = minutes * 60
        async with self.store.locked(group_id) as rules:
            rules.pause(self.clock.now() + duration)
            paused_until = rules.paused_until
        logger.info(f"Group {group_id} paused until {paused_until:.0f}")

        await send_text(self.transport, chat_id, _PAUSED_MSG)

        await self.clock.sleep(duration)

        async with self.store.locked(group_id) as rules:
            resume = rules.paused and self.clock.now() >= rules.paused_until
            if resume:
                rules.unpause()

        if not resume:
            logger.debug(f"Group {group_id} pause state changed meanwhile, skipping resume")
            return

        await send_text(self.transport, chat_id, _RESUMED_MSG)
        logger.info(f"Self-pause finished, group {group_id} reactivated")
