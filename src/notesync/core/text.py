"""Plain-text helpers for rich-text (HTML) note content."""

import re

_TAG_RE = re.compile(r"<[^>]*>")

UNTITLED = "Untitled Note"


def strip_html(html: str) -> str:
    """Drop markup tags and non-breaking space entities."""
    return _TAG_RE.sub("", html).replace("&nbsp;", " ").strip()


def truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length] + "..."


def get_preview(content: str, max_chars: int = 100) -> str:
    """First line of the stripped content, truncated to ``max_chars``."""
    first_line = strip_html(content).split("\n")[0]
    return truncate(first_line, max_chars)
