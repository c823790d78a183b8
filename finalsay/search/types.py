# Data models for the source-resolution layer.

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class SearchHit:
    """One organic result as returned by the search backend."""
    title: str
    link: str


@dataclass
class SourceRef:
    """A reference link surfaced next to advice. Identity is (domain, title)."""
    title: str
    url: str
    domain: str
    query: Optional[str] = None

    @property
    def key(self) -> tuple:
        return (self.domain, self.title)

    def to_payload(self) -> Dict[str, Any]:
        payload = {"title": self.title, "url": self.url, "domain": self.domain}
        if self.query:
            payload["query"] = self.query
        return payload
