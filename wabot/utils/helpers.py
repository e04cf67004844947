"""Small shared helpers."""

import re
from pathlib import Path

_UNSAFE_FILENAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def get_wabot_home() -> Path:
    """Get the wabot home directory (~/.wabot)."""
    return Path.home() / ".wabot"


def ensure_dir(path: Path) -> Path:
    """Create *path* (and parents) if missing and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_filename(name: str) -> str:
    """Replace characters that are not allowed in file names."""
    return _UNSAFE_FILENAME_RE.sub("_", name).strip() or "_"


def truncate(text: str, limit: int, marker: str = "...") -> str:
    """
    Cut *text* to *limit* characters and append *marker* when it was longer.

    Text at or under the limit is returned unchanged.
    """
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def normalize_jid(jid: str) -> str:
    """
    Strip the device part from a WhatsApp identifier.

    ``5511999999999:12@s.whatsapp.net`` -> ``5511999999999@s.whatsapp.net``
    """
    if not jid:
        return ""
    user, sep, server = jid.partition("@")
    user = user.split(":", 1)[0]
    return f"{user}{sep}{server}"


def jid_user(jid: str) -> str:
    """Return the user part of an identifier (phone number for most JIDs)."""
    return normalize_jid(jid).partition("@")[0]
