"""Utility functions for wabot."""

from wabot.utils.helpers import ensure_dir, get_wabot_home, normalize_jid, safe_filename, truncate

__all__ = ["ensure_dir", "get_wabot_home", "normalize_jid", "safe_filename", "truncate"]
