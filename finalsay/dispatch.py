# Dispatcher: turns a request body into one of the three request variants,
# runs compose -> generate -> normalize (-> sources for advice), and shapes
# the result. All field checks happen in parse_request, before any backend
# call is made.

from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional

from finalsay.errors import ClientError, ConfigError
from finalsay.generate import normalize
from finalsay.generate.composer import PromptComposer
from finalsay.generate.generator import ReplyGenerator
from finalsay.generate.types import (
    REPLY_FORMATS,
    AdvancedRequest,
    AdviceRequest,
    GenerationRequest,
    GenerationResult,
    SimpleRequest,
)
from finalsay.search.resolver import SourceResolver
from finalsay.style.sliders import ToneSliders

logger = logging.getLogger(__name__)

MODES = ("simple", "advanced")


def _text(body: Mapping[str, Any], key: str) -> str:
    value = body.get(key)
    return value.strip() if isinstance(value, str) else ""


def parse_request(body: Mapping[str, Any]) -> GenerationRequest:
    """Validate a raw body and build the matching request variant."""
    if not isinstance(body, Mapping):
        raise ClientError("Invalid request body")

    mode = body.get("mode")
    if not mode:
        raise ClientError("Missing mode")
    if mode not in MODES:
        raise ClientError(f"Unsupported mode: {mode}")

    if mode == "simple":
        text, tone = _text(body, "text"), _text(body, "tone")
        if not text or not tone:
            raise ClientError("Missing text/tone")
        return SimpleRequest(text=text, tone=tone)

    message = _text(body, "message") or _text(body, "text")
    scenario = _text(body, "scenario")
    if not message and not scenario:
        raise ClientError("Missing message/scenario")

    intents = tuple(str(i).strip() for i in (body.get("intents") or []) if str(i).strip())
    intent_text = _text(body, "intentText")
    sliders = ToneSliders.from_mapping(body.get("sliders"))

    if body.get("adviceMode"):
        return AdviceRequest(
            message=message,
            scenario=scenario,
            intent_text=intent_text,
            intents=intents,
            sliders=sliders,
            want_sources=bool(body.get("wantSources")),
            persona=_text(body, "persona"),
        )

    reply_format = body.get("replyFormat") or "normal"
    if reply_format not in REPLY_FORMATS:
        raise ClientError(f"Unsupported replyFormat: {reply_format}")
    return AdvancedRequest(
        message=message,
        scenario=scenario,
        intent_text=intent_text,
        intents=intents,
        sliders=sliders,
        reply_format=reply_format,
    )


def source_context(req: AdviceRequest) -> str:
    lines = []
    if req.message:
        lines.append(f"Message: {req.message}")
    if req.scenario:
        lines.append(f"Scenario: {req.scenario}")
    if req.intent_text:
        lines.append(f"Intent: {req.intent_text}")
    if req.intents:
        lines.append(f"Tags: {', '.join(req.intents)}")
    return "\n".join(lines)


class Dispatcher:
    def __init__(
        self,
        generator: Optional[ReplyGenerator],
        resolver: Optional[SourceResolver] = None,
        composer: Optional[PromptComposer] = None,
    ):
        self.generator = generator
        self.resolver = resolver
        self.composer = composer or PromptComposer()

    def handle(self, req: GenerationRequest) -> GenerationResult:
        if self.generator is None:
            raise ConfigError("Missing OPENAI_API_KEY")

        prompt = self.composer.compose(req)
        raw = self.generator.complete(prompt)

        if isinstance(req, SimpleRequest):
            return GenerationResult(replies=normalize.to_options(raw))

        if isinstance(req, AdvancedRequest):
            if req.reply_format == "short":
                return GenerationResult(replies=normalize.to_options(raw))
            return GenerationResult(replies=[normalize.to_block(raw)])

        result = GenerationResult(replies=[normalize.to_block(raw)])
        if req.want_sources:
            sources: List = []
            if self.resolver is not None:
                sources = self.resolver.resolve(source_context(req))
            result.sources = sources
        return result
