"""Text helpers."""

import re
import secrets
import unicodedata

_SEPARATORS = re.compile(r"[\s_-]+")


def make_slug(title: str, max_length: int = 60, suffix_bytes: int = 3) -> str:
    """
    Build a unique-enough article slug from a title.

    Letters, digits and combining marks are kept in any script so Tamil
    titles stay readable. A short random hex suffix keeps slugs unique for
    articles that share a title.
    """
    normalized = unicodedata.normalize("NFC", title or "").lower()
    kept = []
    for char in normalized:
        category = unicodedata.category(char)
        if category[0] in ("L", "N", "M"):
            kept.append(char)
        elif char.isspace() or char in "-_":
            kept.append(" ")
    base = _SEPARATORS.sub("-", "".join(kept)).strip("-")
    base = base[:max_length].rstrip("-") or "berita"
    return f"{base}-{secrets.token_hex(suffix_bytes)}"


def truncate(text: str, limit: int) -> str:
    """First `limit` characters of `text`."""
    return (text or "")[:limit]
