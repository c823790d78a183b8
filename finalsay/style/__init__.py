# Tone controls: slider compilation and named personas.

from .sliders import ToneSliders, StyleCompiler, CompiledStyle, Directive, GenerationParams
from .personas import PersonaTag, Persona, resolve_persona

__all__ = [
    "ToneSliders",
    "StyleCompiler",
    "CompiledStyle",
    "Directive",
    "GenerationParams",
    "PersonaTag",
    "Persona",
    "resolve_persona",
]
