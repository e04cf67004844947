"""Send helpers that degrade instead of raising.

Commands and the governor use these so a failed send is logged and the
rest of the turn continues.
"""

from loguru import logger

from wabot.transport.base import Transport, TransportError


async def send_text(transport: Transport, chat_id: str, text: str) -> bool:
    """Send *text*; log and return False on failure."""
    try:
        await transport.send_text(chat_id, text)
        return True
    except TransportError as e:
        logger.error(f"Failed to send message to {chat_id}: {e}")
        return False


async def send_mention(
    transport: Transport, chat_id: str, text: str, mentioned_id: str | None
) -> bool:
    """Send *text* mentioning *mentioned_id*, falling back to a plain send."""
    if mentioned_id:
        try:
            await transport.send_text_with_mention(chat_id, text, mentioned_id)
            return True
        except TransportError as e:
            logger.warning(f"Mention send to {chat_id} failed, sending plain text: {e}")
    return await send_text(transport, chat_id, text)


async def set_presence(transport: Transport, chat_id: str, state: str) -> None:
    try:
        await transport.send_presence(chat_id, state)
    except TransportError as e:
        logger.warning(f"Failed to send presence '{state}' to {chat_id}: {e}")
