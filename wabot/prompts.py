"""Prompt templates and history formatting.

All prompt text sent to the AI backend lives here so the governor and the
commands only assemble pieces.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from wabot.history.store import ROLE_USER, ConversationMessage, JokeRecord

# -----------------------------------------------------------------------
# Personas
# -----------------------------------------------------------------------

DEFAULT_PRIVATE_PROMPT = """\
You are {bot_name}, the virtual assistant of Hyper Ducker, a technology company
that builds web applications.

## Identity
- You are a conversation agent, not a sales agent
- Chat in a relaxed and friendly way and answer questions directly

## Company
- Business: web application development, all kinds (e-commerce, internal systems, platforms)
- Opening hours: 07:00 to 19:00
- The company is currently NOT selling services; you only chat and answer questions

## Tone
- Friendly and professional with a relaxed touch
- Simple, clear answers that go straight to the point
- Introduce yourself only on the first interaction
- Do NOT use emojis

## Restrictions
You must NOT:
- Share sensitive customer data
- Promise discounts or prices
- Change orders
- Offer a transfer to a human (there is no such option)

When the conversation ends naturally, say goodbye with:
"Team Hyper Ducker, thank you for getting in touch."
"""

DEFAULT_GROUP_PROMPT = """\
You are {bot_name}, taking part in a WhatsApp group.

## Personality
- Relaxed, friendly and natural; you are part of the group, not just an assistant
- Use natural, colloquial language

## How to answer
- Be DIRECT and SHORT (at most 3-4 sentences, ideally 1-2)
- Answer only what was asked; do not force topics or change the subject
- Only talk about technology if that is the subject of the conversation
- Do NOT use emojis
- Be respectful to everyone; if you do not know something, say so

## Conversation context
The current group conversation is below. Use it only to understand the context:"""

_GROUP_REPLY_INSTRUCTION = (
    "Answer in a DIRECT, SHORT and NATURAL way. Go straight to the point."
)

# -----------------------------------------------------------------------
# Command prompts
# -----------------------------------------------------------------------

JOKE_PROMPT = """\
You are a laid-back comedian. Tell a short, funny joke.

Requirements:
- The joke must be short (at most 3-4 sentences)
- Funny and suitable for all audiences
- Any kind of joke (pun, situation, etc.)
- Do NOT use emojis
- Reply ONLY with the joke, without explanations or extra comments"""

_JOKES_HISTORY_HEADER = (
    "\n\nIMPORTANT: The following jokes were already told. Do NOT repeat any of them:\n\n"
)
_JOKES_HISTORY_FOOTER = "\nTell a NEW joke, different from the ones listed above."

PICKUP_PROMPT = """\
You are an expert at creative, funny pickup lines.

Write one pickup line aimed at {target}.

Requirements:
- Creative and funny
- Suitable for all audiences (nothing offensive or inappropriate)
- At most 3-4 sentences
- Do NOT use emojis
- Reply ONLY with the pickup line, without explanations or extra comments

Write the pickup line now:"""

STORY_PROMPT = """\
You are a creative, engaging storyteller.

Write a story of the genre: {genre}

Requirements:
- The story must belong to the {genre} genre
- It must have a beginning, middle and end
- Between 5 and 10 paragraphs
- Do NOT use emojis
- Keep it suitable for all audiences
- Reply ONLY with the story, without explanations or extra comments

Write the story now:"""

EXPLAIN_PROMPT = """\
You are an assistant that explains messages in a simple and clear way.

Explain what the following message meant:
- Simple and direct, easy to understand
- Objective (at most 2-3 sentences)
- No emojis, no judgement or opinion, only the explanation

Message to explain:
"{text}"

Explain simply what this message meant:"""


# -----------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------


def format_conversation_history(history: list[ConversationMessage], bot_name: str) -> str:
    """Render stored turns as ``[HH:MM] Role: text`` lines."""
    if not history:
        return "No previous conversation."
    lines = ["Conversation history:"]
    for m in history:
        role = "User" if m.role == ROLE_USER else bot_name
        lines.append(f"[{m.timestamp.strftime('%H:%M')}] {role}: {m.text}")
    return "\n".join(lines) + "\n"


def format_jokes_history(jokes: list[JokeRecord]) -> str:
    """Numbered do-not-repeat list, or ``""`` when there are no prior jokes."""
    if not jokes:
        return ""
    numbered = "".join(f"{i}. {j.text}\n" for i, j in enumerate(jokes, 1))
    return _JOKES_HISTORY_HEADER + numbered + _JOKES_HISTORY_FOOTER


def build_joke_prompt(jokes: list[JokeRecord]) -> str:
    return JOKE_PROMPT + format_jokes_history(jokes) + "\n\nTell the joke now:"


def build_group_prompt(
    custom_prompt: str | None,
    history: list[ConversationMessage],
    user_message: str,
    user_name: str,
    bot_name: str,
) -> str:
    system_prompt = custom_prompt or DEFAULT_GROUP_PROMPT.format(bot_name=bot_name)
    return (
        f"{system_prompt}\n\n"
        f"{format_conversation_history(history, bot_name)}\n\n"
        f"**{user_name}:** {user_message}\n\n"
        f"{_GROUP_REPLY_INSTRUCTION}"
    )


def build_private_prompt(
    system_prompt: str,
    history: list[ConversationMessage],
    user_message: str,
    bot_name: str,
) -> str:
    return (
        f"{system_prompt}\n\n"
        f"{format_conversation_history(history, bot_name)}\n\n"
        f"Current user message: {user_message}"
    )


def load_private_prompt(prompt_file: str | Path | None, bot_name: str) -> str:
    """Read the private-chat persona from *prompt_file*, else use the default."""
    if prompt_file:
        path = Path(prompt_file)
        if path.exists():
            try:
                text = path.read_text(encoding="utf-8").strip()
                if text:
                    return text
            except OSError as e:
                logger.warning(f"Failed to read prompt file {path}: {e}")
    return DEFAULT_PRIVATE_PROMPT.format(bot_name=bot_name)
