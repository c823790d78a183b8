# Prompt composer for the three request modes.
# Each mode turns a request (plus persona or compiled style) into a Prompt:
# system text, user text, temperature, and token budget. Prompts are built
# from ordered clause lists so the pieces stay inspectable.
#
# Guardrail lines are instructions to the backend only; nothing here checks
# that the generated text follows them.

from __future__ import annotations
from typing import List, Sequence, Union

from finalsay.style.personas import resolve_persona
from finalsay.style.sliders import CompiledStyle, StyleCompiler
from .types import AdvancedRequest, AdviceRequest, GenerationRequest, Prompt, SimpleRequest

SIMPLE_TEMPERATURE = 0.95
SIMPLE_MAX_TOKENS = 240

BASE_TOKENS = {"short": 600, "normal": 700, "long": 800}
ADVICE_BASE_TOKENS = 700
MIN_BULLETS = 4
MAX_BULLETS = 8

SIMPLE_RULES = (
    "Rules:",
    "- Sound human. No \"As an AI\".",
    "- Write THREE options, numbered 1-3.",
    "- Each 1-2 sentences, quotable, distinct from one another.",
    "- No emojis, no hashtags, no @mentions.",
    "- Avoid profanity and anything hateful. Be sharp without targeting protected classes.",
)

MISSION = "You are FinalSay: you write the reply the user wishes they had sent."
DEFAULT_OBJECTIVE = "Respond clearly and respectfully."

ADVICE_IDENTITY = "You are FinalSay's advice engine."
ADVICE_RULES = (
    "Give compact, actionable guidance as bullet points.",
    "Rules:",
    "- Each bullet starts with \"- \" and is one or two sentences.",
    "- Lead with the most useful next step; skip generic filler.",
    "- No emojis, no hashtags, no @mentions.",
    "- No hateful or profane content.",
    "- If the situation involves medical or legal matters, end with a bullet recommending a qualified professional.",
)

HEAT_HIGH = 60


def wrap(text: str) -> str:
    return f'"""{text}"""'


def guardrails(heat: float) -> List[str]:
    rules = [
        "Guardrails:",
        "- Sound human. No \"As an AI\".",
        "- No emojis, no hashtags, no @mentions.",
        "- No hateful content, slurs, or profanity; never target protected classes.",
    ]
    if heat > HEAT_HIGH:
        rules.append("- Heat is allowed, but aim it at the situation, never at identity.")
    else:
        rules.append("- De-escalate aggression instead of matching it.")
    return rules


def objectives(intents: Sequence[str], intent_text: str) -> List[str]:
    goals = [i.strip() for i in intents if i and i.strip()]
    if intent_text and intent_text.strip():
        goals.append(intent_text.strip())
    if not goals:
        goals = [DEFAULT_OBJECTIVE]
    return [f"Objective: {g}" for g in goals]


def context_lines(req: Union[AdvancedRequest, AdviceRequest], style: CompiledStyle) -> List[str]:
    """Structured context lines: message, scenario, intent, tags, style."""
    lines = []
    if req.message:
        lines.append(f"Message: {wrap(req.message)}")
    if req.scenario:
        lines.append(f"Scenario: {wrap(req.scenario)}")
    if req.intent_text:
        lines.append(f"Intent: {req.intent_text}")
    if req.intents:
        lines.append(f"Tags: {', '.join(req.intents)}")
    lines.append(f"Style: {' '.join(style.lines())}")
    return lines


class PromptComposer:
    """Builds the Prompt for a parsed GenerationRequest."""

    def compose(self, req: GenerationRequest) -> Prompt:
        if isinstance(req, SimpleRequest):
            return self.simple(req)
        if isinstance(req, AdvancedRequest):
            return self.advanced(req)
        if isinstance(req, AdviceRequest):
            return self.advice(req)
        raise TypeError(f"Unsupported request type: {type(req).__name__}")

    def simple(self, req: SimpleRequest) -> Prompt:
        persona = resolve_persona(req.tone)
        system = "\n".join([persona.instructions, *SIMPLE_RULES])
        user = f"Original post:\n{wrap(req.text)}"
        return Prompt(system=system, user=user, temperature=SIMPLE_TEMPERATURE, max_tokens=SIMPLE_MAX_TOKENS)

    def advanced(self, req: AdvancedRequest) -> Prompt:
        short = req.reply_format == "short"
        compiler = StyleCompiler(
            unit="sentence" if short else "paragraph",
            base_tokens=BASE_TOKENS[req.reply_format],
        )
        style = compiler.compile(req.sliders)
        units = style.params.target_units

        clauses = [MISSION, *objectives(req.intents, req.intent_text), "Style:"]
        clauses += [f"- {line}" for line in style.lines()]
        clauses += guardrails(req.sliders.heat)
        if short:
            clauses.append(
                f"Write THREE distinct reply options, numbered 1-3, each at most {units} sentences."
            )
        else:
            noun = "paragraph" if units == 1 else "paragraphs"
            length = f"Write a single reply of {units} {noun}."
            if req.reply_format == "long":
                length += " Fully develop each paragraph."
            clauses.append(length)

        user = "\n".join(
            f"{label}:\n{wrap(text)}" for label, text in (("Message", req.message), ("Scenario", req.scenario)) if text
        )
        return Prompt(
            system="\n".join(clauses),
            user=user,
            temperature=style.params.temperature,
            max_tokens=style.params.max_tokens,
        )

    def advice(self, req: AdviceRequest) -> Prompt:
        style = StyleCompiler(unit="sentence", base_tokens=ADVICE_BASE_TOKENS).compile(req.sliders)
        identity = ADVICE_IDENTITY
        if req.persona and req.persona.strip():
            identity = f"{ADVICE_IDENTITY} Voice: {req.persona.strip()}."
        system = "\n".join([identity, *ADVICE_RULES])

        bullets = max(MIN_BULLETS, min(MAX_BULLETS, style.params.target_units))
        lines = context_lines(req, style)
        lines.append(f"Give {bullets} bullets.")
        return Prompt(
            system=system,
            user="\n".join(lines),
            temperature=style.params.temperature,
            max_tokens=style.params.max_tokens,
        )
