"""Agent core module."""

from wabot.agent.loop import AgentLoop

__all__ = ["AgentLoop"]
