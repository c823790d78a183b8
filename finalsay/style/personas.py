# Named personas for simple mode.
# The tag set is closed (PersonaTag); instruction blocks are read from
# personas.yaml next to this file and every tag must have one.

from __future__ import annotations
import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Optional

import yaml

PERSONAS_PATH = os.path.join(os.path.dirname(__file__), "personas.yaml")


class PersonaTag(str, Enum):
    SAVAGE = "Savage"
    WITTY_SARCASTIC = "Witty & Sarcastic"
    INSPIRATIONAL = "Inspirational & Profound"
    PLAYFUL_ROAST = "Playful Roast"
    PETTY_PRECISE = "Petty & Precise"
    DIPLOMATIC_ASSASSIN = "Diplomatic Assassin"
    CHAOTIC_GENIUS = "Chaotic Genius"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "PersonaTag":
        """Exact match on the tag text; anything else is the default persona."""
        for tag in cls:
            if tag.value == raw:
                return tag
        return DEFAULT_PERSONA


DEFAULT_PERSONA = PersonaTag.WITTY_SARCASTIC


@dataclass(frozen=True)
class Persona:
    tag: PersonaTag
    instructions: str


@lru_cache(maxsize=4)
def load_personas(path: str = PERSONAS_PATH) -> Dict[PersonaTag, Persona]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"personas.yaml not found at {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    table = {}
    for tag in PersonaTag:
        block = data.get(tag.value)
        if not block:
            raise KeyError(f"Persona '{tag.value}' not found in {path}")
        table[tag] = Persona(tag=tag, instructions=str(block).strip())
    return table


def resolve_persona(raw: Optional[str]) -> Persona:
    return load_personas()[PersonaTag.parse(raw)]
