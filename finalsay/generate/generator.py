# ReplyGenerator: sends a composed Prompt to any model client exposing
# generate(messages, params) -> (text, meta) and returns the raw text.

from __future__ import annotations

from .types import ModelParams, Prompt


class ReplyGenerator:
    def __init__(self, model_client):
        self.model_client = model_client

    def complete(self, prompt: Prompt) -> str:
        """Single backend call; returns the raw generated text."""
        params = ModelParams(temperature=prompt.temperature, max_tokens=prompt.max_tokens)
        text, _meta = self.model_client.generate(prompt.messages(), params)
        return text or ""
