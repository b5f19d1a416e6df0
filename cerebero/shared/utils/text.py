"""
Text helpers shared by the tag, content and search services.
"""

from typing import Optional


def normalize_tag_name(name: str) -> str:
    """Tags are compared trimmed and lowercased: " Work " and "work" are one tag."""
    return name.strip().lower()


def truncate(text: Optional[str], length: int = 60, suffix: str = "...") -> Optional[str]:
    """
    Cut ``text`` to ``length`` characters, appending ``suffix`` if anything was cut.

    Example:
        truncate("a" * 61)  # "aaaa...a..." (60 a's + "...")
    """
    if not text:
        return None
    if len(text) <= length:
        return text
    return f"{text[:length]}{suffix}"
