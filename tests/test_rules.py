import asyncio

from wabot.config.schema import GroupRulesConfig
from wabot.group.rules import GroupRules, RuleStore

GROUP = "1203@g.us"


def test_get_creates_defaults_once():
    store = RuleStore()
    rules = store.get(GROUP)
    assert rules.group_id == GROUP
    assert rules.ai_enabled is True
    assert rules.require_mention is True
    assert rules.max_history_messages == 50
    assert rules.response_cooldown_seconds == 30
    assert rules.last_response_at == 0.0
    assert rules.paused is False
    assert store.get(GROUP) is rules
    assert len(store) == 1


def test_defaults_come_from_config():
    store = RuleStore(GroupRulesConfig(require_mention=False, response_cooldown_seconds=5))
    rules = store.get(GROUP)
    assert rules.require_mention is False
    assert rules.response_cooldown_seconds == 5


def test_set_forces_group_id():
    store = RuleStore()
    store.set(GROUP, GroupRules(group_id="other", ai_enabled=False))
    assert store.get(GROUP).group_id == GROUP
    assert store.get(GROUP).ai_enabled is False
    assert GROUP in store


def test_block_takes_precedence_over_allow():
    rules = GroupRules(group_id=GROUP, allowed_users={"a"}, blocked_users={"a"})
    assert rules.is_user_allowed("a") is False


def test_allow_list_semantics():
    assert GroupRules(group_id=GROUP).is_user_allowed("anyone") is True
    rules = GroupRules(group_id=GROUP, allowed_users={"a"})
    assert rules.is_user_allowed("a") is True
    assert rules.is_user_allowed("b") is False


def test_cooldown_is_strict():
    rules = GroupRules(group_id=GROUP, response_cooldown_seconds=30, last_response_at=100.0)
    assert rules.cooldown_elapsed(130.0) is False
    assert rules.cooldown_elapsed(130.5) is True


def test_pause_and_unpause():
    rules = GroupRules(group_id=GROUP)
    rules.pause(200.0)
    assert rules.is_paused_at(199.0)
    assert not rules.is_paused_at(200.0)
    rules.unpause()
    assert rules.paused is False
    assert rules.paused_until == 0.0


def test_locked_uses_injected_lock_factory():
    created = []

    class CountingLock:
        def __init__(self):
            self.entered = 0
            created.append(self)

        async def __aenter__(self):
            self.entered += 1

        async def __aexit__(self, *exc):
            return False

    store = RuleStore(lock_factory=CountingLock)

    async def scenario():
        async with store.locked(GROUP) as rules:
            rules.ai_enabled = False
        async with store.locked(GROUP):
            pass

    asyncio.run(scenario())
    assert len(created) == 1
    assert created[0].entered == 2
    assert store.get(GROUP).ai_enabled is False
