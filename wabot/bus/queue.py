"""Async message queue between the transport and the agent loop."""

import asyncio

from wabot.bus.events import InboundMessage


class MessageBus:
    """
    Inbound queue that decouples the WhatsApp transport from the agent.

    The transport pushes messages with :meth:`publish_inbound` and the
    agent loop pulls them with :meth:`consume_inbound`.
    """

    def __init__(self) -> None:
        self.inbound: asyncio.Queue[InboundMessage] = asyncio.Queue()

    async def publish_inbound(self, msg: InboundMessage) -> None:
        """Publish a message from the transport to the agent."""
        await self.inbound.put(msg)

    async def consume_inbound(self) -> InboundMessage:
        """Consume the next inbound message (blocks until available)."""
        return await self.inbound.get()

    @property
    def inbound_size(self) -> int:
        return self.inbound.qsize()
