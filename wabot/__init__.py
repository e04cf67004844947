"""wabot - WhatsApp group agent with AI replies and chat commands."""

__version__ = "0.1.0"
__logo__ = "🦆"
