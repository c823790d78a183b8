# Slider-to-style compiler.
# Ten 0-100 tone sliders become an ordered list of style directives plus
# the generation parameters (target length, temperature, token budget).
# Everything here is pure: same sliders in, same output out.

from __future__ import annotations
import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple

NEUTRAL = 50
LOW_BELOW = 40
HIGH_ABOVE = 60

# Order matters: directives are concatenated verbatim into the system prompt.
CONTENT_SLIDERS = (
    "politics",
    "spirit",
    "heat",
    "formality",
    "empathy",
    "directness",
    "humor",
    "roast",
    "optimism",
)

# (low clause, high clause, neutral clause)
_CLAUSES = {
    "politics": (
        "Frame any values questions from a progressive angle.",
        "Frame any values questions from a conservative angle.",
        "Stay politically neutral; do not take sides.",
    ),
    "spirit": (
        "Ground every point in science, evidence, and data.",
        "Draw on spiritual and philosophical framing where it helps.",
        "Balance evidence with a sense of meaning.",
    ),
    "heat": (
        "Keep the temperature low: calm, cool, and de-escalating.",
        "Bring heat: bold, fiery, confrontational energy, but no slurs.",
        "Moderate intensity: firm but controlled.",
    ),
    "formality": (
        "Write casually, like texting a friend.",
        "Write formally, with polished and precise wording.",
        "Use a conversational, professional register.",
    ),
    "empathy": (
        "Keep emotional acknowledgement minimal; stick to the facts.",
        "Lead with warmth and validate the other person's feelings.",
        "Acknowledge feelings briefly, then move on.",
    ),
    "directness": (
        "Be diplomatic and indirect; soften the edges.",
        "Be blunt: state the point in the first sentence.",
        "Be clear without being harsh.",
    ),
    "humor": (
        "Keep it serious; no jokes.",
        "Be funny: wit and wordplay are welcome.",
        "Allow light humor only where it fits naturally.",
    ),
    "roast": (
        "No roasting or teasing.",
        "Roast hard: sharp, teasing burns that stay playful.",
        "A gentle tease is fine, nothing more.",
    ),
    "optimism": (
        "Be realistic, even skeptical, about how things will turn out.",
        "Be upbeat and hopeful about what comes next.",
        "Keep a balanced outlook.",
    ),
}

PARAGRAPH_BUCKETS = ((30, 1), (60, 3), (80, 5))
PARAGRAPH_MAX = 6
SENTENCE_BUCKETS = ((30, 2), (60, 4), (80, 6))
SENTENCE_MAX = 8


def clamp_slider(value: Any) -> float:
    """Clamp to [0, 100]; anything non-numeric counts as 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return max(0.0, min(100.0, number))


@dataclass(frozen=True)
class ToneSliders:
    politics: float = NEUTRAL
    spirit: float = NEUTRAL
    heat: float = NEUTRAL
    formality: float = NEUTRAL
    empathy: float = NEUTRAL
    directness: float = NEUTRAL
    humor: float = NEUTRAL
    roast: float = NEUTRAL
    optimism: float = NEUTRAL
    length: float = NEUTRAL

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "ToneSliders":
        """Missing sliders take the neutral default; present ones are clamped."""
        raw = raw or {}
        values = {}
        for f in fields(cls):
            if f.name in raw:
                values[f.name] = clamp_slider(raw[f.name])
        return cls(**values)


@dataclass(frozen=True)
class Directive:
    """One style clause derived from one slider."""
    slider: str
    level: str  # "low" | "neutral" | "high"
    text: str


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_tokens: int
    target_units: int


@dataclass(frozen=True)
class CompiledStyle:
    directives: Tuple[Directive, ...]
    params: GenerationParams

    def lines(self) -> list[str]:
        return [d.text for d in self.directives]


def _level(value: float) -> str:
    if value < LOW_BELOW:
        return "low"
    if value > HIGH_ABOVE:
        return "high"
    return "neutral"


def directive_for(slider: str, value: float) -> Directive:
    low, high, neutral = _CLAUSES[slider]
    level = _level(value)
    text = {"low": low, "high": high, "neutral": neutral}[level]
    return Directive(slider=slider, level=level, text=text)


def bucket_units(length: float, unit: str = "paragraph") -> int:
    if unit == "paragraph":
        buckets, top = PARAGRAPH_BUCKETS, PARAGRAPH_MAX
    elif unit == "sentence":
        buckets, top = SENTENCE_BUCKETS, SENTENCE_MAX
    else:
        raise ValueError(f"Unknown length unit: {unit}")
    for bound, units in buckets:
        if length < bound:
            return units
    return top


def sampling_temperature(sliders: ToneSliders) -> float:
    if sliders.length > 70 or sliders.humor > 60 or sliders.roast > 60:
        return 0.95
    if sliders.heat > 60:
        return 0.9
    return 0.7


class StyleCompiler:
    """
    Compile ToneSliders into directives + GenerationParams.

    `unit` picks the length bucketing ("paragraph" or "sentence") and
    `base_tokens` the mode-specific token floor; both are fixed per mode.
    """

    def __init__(self, unit: str = "paragraph", base_tokens: int = 700):
        if unit not in ("paragraph", "sentence"):
            raise ValueError(f"Unknown length unit: {unit}")
        self.unit = unit
        self.base_tokens = base_tokens

    def compile(self, sliders: ToneSliders) -> CompiledStyle:
        directives = tuple(directive_for(name, getattr(sliders, name)) for name in CONTENT_SLIDERS)
        params = GenerationParams(
            temperature=sampling_temperature(sliders),
            max_tokens=self.base_tokens + math.floor(sliders.length * 2),
            target_units=bucket_units(sliders.length, self.unit),
        )
        return CompiledStyle(directives=directives, params=params)
