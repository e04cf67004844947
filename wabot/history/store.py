"""Append-only conversation and joke history."""

import json
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger

from wabot.utils.clock import Clock, SystemClock
from wabot.utils.helpers import ensure_dir, get_wabot_home, safe_filename

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationMessage:
    """One stored chat turn."""

    key: str  # user or group JID
    role: str  # "user" | "assistant"
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class JokeRecord:
    text: str
    timestamp: datetime


class HistoryStore:
    """
    Store chat history and generated jokes as JSONL files.

    Each conversation key gets its own file under ``chats/``; jokes live in a
    single ``jokes.jsonl`` so they are shared across every chat. Records are
    never edited after they are written; :meth:`clean_old` is the only
    operation that removes them.
    """

    def __init__(self, base_dir: Path | None = None, clock: Clock | None = None) -> None:
        self.base_dir = ensure_dir(base_dir or (get_wabot_home() / "history"))
        self.chats_dir = ensure_dir(self.base_dir / "chats")
        self.jokes_path = self.base_dir / "jokes.jsonl"
        self.clock = clock or SystemClock()
        self._lock = threading.Lock()

    def _get_path(self, key: str) -> Path:
        """Get file path for a conversation key."""
        safe_key = safe_filename(key.replace("@", "_at_"))
        return self.chats_dir / f"{safe_key}.jsonl"

    def _append(self, path: Path, entry: dict[str, Any]) -> None:
        line = json.dumps(entry, ensure_ascii=False) + "\n"
        with self._lock:
            with open(path, "a", encoding="utf-8") as f:
                f.write(line)

    @staticmethod
    def _read(path: Path, tail: int | None = None) -> list[dict[str, Any]]:
        """Parse the JSONL file; with *tail*, only its last *tail* non-blank lines."""
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            lines = deque((line for line in f if line.strip()), maxlen=tail)
        entries: list[dict[str, Any]] = []
        for line in lines:
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning(f"Skipping corrupt history line in {path.name}")
        return entries

    # -- conversations ----------------------------------------------------

    def append_message(self, key: str, role: str, text: str) -> None:
        """
        Append a chat turn.

        Args:
            key: Conversation key (sender JID for private chats, group JID for groups).
            role: "user" or "assistant".
            text: Message text.
        """
        if role not in (ROLE_USER, ROLE_ASSISTANT):
            raise ValueError(f"Invalid role: {role}")
        self._append(
            self._get_path(key),
            {"key": key, "role": role, "text": text, "ts": self.clock.now()},
        )

    def load_recent(self, key: str, limit: int) -> list[ConversationMessage]:
        """Return up to *limit* most recent turns for *key*, oldest first."""
        if limit <= 0:
            return []
        entries = sorted(self._read(self._get_path(key), tail=limit), key=lambda e: e.get("ts", 0))
        return [
            ConversationMessage(
                key=e.get("key", key),
                role=e.get("role", ROLE_USER),
                text=e.get("text", ""),
                timestamp=datetime.fromtimestamp(e.get("ts", 0)),
            )
            for e in entries[-limit:]
        ]

    # -- jokes ------------------------------------------------------------

    def append_joke(self, text: str) -> None:
        self._append(self.jokes_path, {"text": text, "ts": self.clock.now()})

    def load_recent_jokes(self, limit: int) -> list[JokeRecord]:
        """Return up to *limit* most recent jokes, oldest first."""
        if limit <= 0:
            return []
        entries = sorted(self._read(self.jokes_path, tail=limit), key=lambda e: e.get("ts", 0))
        return [
            JokeRecord(text=e.get("text", ""), timestamp=datetime.fromtimestamp(e.get("ts", 0)))
            for e in entries[-limit:]
        ]

    # -- retention --------------------------------------------------------

    def clean_old(self, max_age_days: int = 30) -> int:
        """
        Remove records older than *max_age_days* from every file.

        Returns:
            Number of records removed.
        """
        cutoff = self.clock.now() - max_age_days * 86400
        removed = 0
        paths = list(self.chats_dir.glob("*.jsonl"))
        if self.jokes_path.exists():
            paths.append(self.jokes_path)

        with self._lock:
            for path in paths:
                entries = self._read(path)
                kept = [e for e in entries if e.get("ts", 0) >= cutoff]
                if len(kept) == len(entries):
                    continue
                removed += len(entries) - len(kept)
                with open(path, "w", encoding="utf-8") as f:
                    for e in kept:
                        f.write(json.dumps(e, ensure_ascii=False) + "\n")

        if removed:
            logger.info(f"History sweep removed {removed} records older than {max_age_days} days")
        return removed
