# Typed dataclasses shared across the generation pipeline.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from finalsay.style.sliders import ToneSliders


@dataclass
class Message:
    """Single chat turn: system, user, or assistant."""
    role: str
    content: str


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class Prompt:
    """System/user instruction pair plus sampling settings for one backend call."""
    system: str
    user: str
    temperature: float
    max_tokens: int

    def messages(self) -> List[Message]:
        return [Message(role="system", content=self.system), Message(role="user", content=self.user)]


# --- Request variants -------------------------------------------------------

REPLY_FORMATS = ("short", "normal", "long")


@dataclass(frozen=True)
class SimpleRequest:
    text: str
    tone: str


@dataclass(frozen=True)
class AdvancedRequest:
    message: str = ""
    scenario: str = ""
    intent_text: str = ""
    intents: Tuple[str, ...] = ()
    sliders: ToneSliders = field(default_factory=ToneSliders)
    reply_format: str = "normal"


@dataclass(frozen=True)
class AdviceRequest:
    message: str = ""
    scenario: str = ""
    intent_text: str = ""
    intents: Tuple[str, ...] = ()
    sliders: ToneSliders = field(default_factory=ToneSliders)
    want_sources: bool = False
    persona: str = ""


GenerationRequest = Union[SimpleRequest, AdvancedRequest, AdviceRequest]


@dataclass
class GenerationResult:
    replies: List[str]
    sources: Optional[List[Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"replies": self.replies}
        if self.sources is not None:
            payload["sources"] = [s.to_payload() for s in self.sources]
        return payload
