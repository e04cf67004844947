"""Command-line entry point: ``python -m wabot``."""

import argparse
import asyncio
import random
import sys
from pathlib import Path

from loguru import logger

from wabot import __logo__, __version__
from wabot.agent.loop import AgentLoop
from wabot.bus.queue import MessageBus
from wabot.commands import BotContext, build_default_router
from wabot.config.loader import get_config_path, load_config
from wabot.config.schema import Config
from wabot.group.governor import GroupGovernor
from wabot.group.mention import MentionDetector
from wabot.group.pause import PauseScheduler
from wabot.group.rules import GroupRules, RuleStore
from wabot.history.store import HistoryStore
from wabot.providers.gemini import GeminiProvider
from wabot.transport.console import ConsoleTransport
from wabot.utils.clock import SystemClock


def configure_logging(level: str, fmt: str) -> None:
    logger.remove()
    if fmt == "json":
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level)


def build_rule_store(config: Config) -> RuleStore:
    """Rule store with defaults for new groups, seeded from the ``groups`` section."""
    store = RuleStore(config.group_defaults)
    for group_id, group_cfg in config.groups.items():
        store.set(group_id, GroupRules.from_config(group_id, group_cfg))
    return store


async def run(config: Config) -> None:
    bus = MessageBus()
    transport = ConsoleTransport(bus)
    clock = SystemClock()

    provider = None
    if config.gemini.api_key:
        provider = GeminiProvider(
            api_key=config.gemini.api_key,
            model=config.gemini.model,
            api_base=config.gemini.api_base,
            timeout=config.gemini.timeout,
        )
        logger.info(f"AI backend: Gemini ({provider.get_default_model()})")
    else:
        logger.warning("No Gemini API key configured; AI features are disabled")

    rules = build_rule_store(config)
    scheduler = PauseScheduler(rules, transport, clock)
    bot = BotContext(
        transport=transport,
        history=HistoryStore(config.history.path, clock),
        rules=rules,
        bot=config.bot,
        provider=provider,
        scheduler=scheduler,
        clock=clock,
        rng=random.Random(),
    )
    router = build_default_router(config.bot.command_prefix)
    detector = MentionDetector(transport.own_id, config.bot.aliases)
    governor = GroupGovernor(bot, router, detector)
    agent = AgentLoop(bus, bot, router, governor, config.history)

    logger.info(f"{__logo__} Starting wabot {__version__} as {config.bot.name}")
    await transport.start()
    try:
        await agent.run()
    finally:
        agent.stop()
        await scheduler.shutdown()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="wabot", description="WhatsApp group bot")
    parser.add_argument("--config", type=Path, default=None,
                        help=f"config file (default: {get_config_path()})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-format", default="console", choices=["console", "json"])
    parser.add_argument("--version", action="version", version=f"wabot {__version__}")
    args = parser.parse_args(argv)

    configure_logging(args.log_level, args.log_format)
    config = load_config(args.config)

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
