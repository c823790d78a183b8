# Cleans raw generated text into the shape the caller expects:
# up to three short options, or one cleaned block. Never raises.

from __future__ import annotations
import re
from typing import List, Optional

MAX_OPTIONS = 3

QUOTE_CHARS = "\"“”'‘’`"
_NUMBERING = re.compile(r"^\s*\d+\.\s*")
_OUTER_QUOTES = re.compile(rf"^[{QUOTE_CHARS}]+|[{QUOTE_CHARS}]+$")
_BOILERPLATE = re.compile(r"^\s*(?:here['’]?s a reply:|reply:|response:)\s*", re.IGNORECASE)


def strip_outer_quotes(s: str) -> str:
    return _OUTER_QUOTES.sub("", s)


def to_options(raw: Optional[str], limit: int = MAX_OPTIONS) -> List[str]:
    """One option per non-empty line, numbering and bounding quotes removed."""
    if not isinstance(raw, str):
        return []
    options = []
    for line in raw.splitlines():
        cleaned = strip_outer_quotes(_NUMBERING.sub("", line).strip()).strip()
        if cleaned:
            options.append(cleaned)
    return options[:limit]


def to_block(raw: Optional[str]) -> str:
    """Full text with bounding quotes and a leading "Reply:"-style label removed."""
    if not isinstance(raw, str):
        return ""
    text = strip_outer_quotes(raw.strip())
    text = _BOILERPLATE.sub("", text)
    return strip_outer_quotes(text.strip()).strip()
