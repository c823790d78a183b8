# Generation package: prompt composition, backend call, text cleanup.

from .composer import PromptComposer
from .generator import ReplyGenerator
from .types import (
    Message,
    ModelParams,
    Prompt,
    SimpleRequest,
    AdvancedRequest,
    AdviceRequest,
    GenerationRequest,
    GenerationResult,
)

__all__ = [
    "PromptComposer",
    "ReplyGenerator",
    "Message",
    "ModelParams",
    "Prompt",
    "SimpleRequest",
    "AdvancedRequest",
    "AdviceRequest",
    "GenerationRequest",
    "GenerationResult",
]
