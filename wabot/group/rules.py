"""Per-group rule set and the keyed store that owns it."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from wabot.config.schema import GroupRulesConfig


@dataclass
class GroupRules:
    """
    Governance state of one group.

    ``paused_until`` only means something while ``paused`` is true.
    ``last_response_at`` starts at the epoch so the first reply is never
    held back by the cooldown.
    """

    group_id: str
    allowed_users: set[str] = field(default_factory=set)  # empty = everyone
    blocked_users: set[str] = field(default_factory=set)
    ai_enabled: bool = True
    max_history_messages: int = 50
    require_mention: bool = True
    custom_prompt: str | None = None
    response_cooldown_seconds: int = 30
    last_response_at: float = 0.0
    paused: bool = False
    paused_until: float = 0.0
    # Set while an AI turn is running so a second message cannot pass the cooldown
    reply_in_flight: bool = False

    @classmethod
    def from_config(cls, group_id: str, cfg: GroupRulesConfig) -> "GroupRules":
        return cls(
            group_id=group_id,
            allowed_users=set(cfg.allowed_users),
            blocked_users=set(cfg.blocked_users),
            ai_enabled=cfg.ai_enabled,
            max_history_messages=cfg.max_history_messages,
            require_mention=cfg.require_mention,
            custom_prompt=cfg.custom_prompt or None,
            response_cooldown_seconds=cfg.response_cooldown_seconds,
        )

    def is_user_allowed(self, user_id: str) -> bool:
        """Block list first, then the allow list (empty allow list = everyone)."""
        if user_id in self.blocked_users:
            return False
        if not self.allowed_users:
            return True
        return user_id in self.allowed_users

    def cooldown_elapsed(self, now: float) -> bool:
        return now - self.last_response_at > self.response_cooldown_seconds

    def is_paused_at(self, now: float) -> bool:
        return self.paused and now < self.paused_until

    def pause(self, until: float) -> None:
        self.paused = True
        self.paused_until = until

    def unpause(self) -> None:
        self.paused = False
        self.paused_until = 0.0


LockFactory = Callable[[], Any]


class RuleStore:
    """
    In-memory map from group JID to its :class:`GroupRules`.

    Rules are created lazily with defaults on first reference and live
    until the process exits. :meth:`get` always returns the same object for
    a key, so every caller mutates one shared record.

    Read-check-write sequences must run inside :meth:`locked`, which holds a
    per-group lock. The lock type is injectable through *lock_factory*
    (anything usable with ``async with``).
    """

    def __init__(
        self,
        defaults: GroupRulesConfig | None = None,
        lock_factory: LockFactory = asyncio.Lock,
    ) -> None:
        self.defaults = defaults or GroupRulesConfig()
        self._lock_factory = lock_factory
        self._rules: dict[str, GroupRules] = {}
        self._locks: dict[str, Any] = {}

    def get(self, group_id: str) -> GroupRules:
        """Get the rules for *group_id*, creating defaults if absent."""
        rules = self._rules.get(group_id)
        if rules is None:
            rules = GroupRules.from_config(group_id, self.defaults)
            self._rules[group_id] = rules
        return rules

    def set(self, group_id: str, rules: GroupRules) -> None:
        """Replace the stored record for *group_id* wholesale."""
        rules.group_id = group_id
        self._rules[group_id] = rules

    def _lock_for(self, group_id: str) -> Any:
        lock = self._locks.get(group_id)
        if lock is None:
            lock = self._lock_factory()
            self._locks[group_id] = lock
        return lock

    @asynccontextmanager
    async def locked(self, group_id: str) -> AsyncIterator[GroupRules]:
        """Hold the group's lock and yield its rules."""
        async with self._lock_for(group_id):
            yield self.get(group_id)

    def __contains__(self, group_id: str) -> bool:
        return group_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)
