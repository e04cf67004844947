"""Group governance: per-group rules, mention detection, pause sequence."""

from wabot.group.governor import GroupGovernor
from wabot.group.mention import MentionDetector
from wabot.group.pause import PauseScheduler
from wabot.group.rules import GroupRules, RuleStore

__all__ = ["GroupGovernor", "GroupRules", "MentionDetector", "PauseScheduler", "RuleStore"]
